from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class SwapAnimation:
    """Tween between two exchanged cells; lives on its own entity until progress reaches 1."""
    src: Tuple[int, int]
    dst: Tuple[int, int]
    duration: float
    progress: float = 0.0

    def advance(self, dt: float) -> bool:
        """Move progress forward by ``dt`` seconds; True once the tween has finished."""
        self.progress = min(1.0, self.progress + dt / self.duration)
        return self.progress >= 1.0
