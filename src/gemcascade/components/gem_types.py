from dataclasses import dataclass, field
from typing import Dict, List, Tuple

@dataclass(slots=True)
class GemTypes:
    """Canonical gem type definitions stored on a single entity."""
    types: Dict[str, Tuple[int, int, int]]
    spawnable: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.spawnable:
            seen: set[str] = set()
            filtered: List[str] = []
            for name in self.spawnable:
                if name in self.types and name not in seen:
                    filtered.append(name)
                    seen.add(name)
            self.spawnable = filtered or list(self.types.keys())
        else:
            self.spawnable = list(self.types.keys())

    def color_for(self, type_name: str) -> Tuple[int, int, int]:
        return self.types[type_name]

    def spawnable_types(self) -> List[str]:
        return list(self.spawnable)
