"""Read-only views handed to rendering collaborators once per frame."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from gemcascade.components.game_state import GameMode
from gemcascade.components.resolver_state import ResolverPhase


@dataclass(frozen=True, slots=True)
class GemView:
    type_name: str
    row: int
    col: int
    visual_row: float
    visual_col: float
    scale: float
    matched: bool
    falling: bool
    just_spawned: bool


@dataclass(frozen=True, slots=True)
class GridView:
    rows: int
    cols: int
    cells: Tuple[Tuple[Optional[GemView], ...], ...]
    selection: Optional[Tuple[int, int]]
    phase: ResolverPhase
    mode: GameMode
    score: int
    combo: int
    max_combo: int
    move_count: int
    high_score: int
    swap_progress: Optional[float] = None

    def cell(self, row: int, col: int) -> Optional[GemView]:
        return self.cells[row][col]

    def type_rows(self) -> Tuple[Tuple[Optional[str], ...], ...]:
        return tuple(
            tuple(view.type_name if view is not None else None for view in row)
            for row in self.cells
        )


@dataclass(frozen=True, slots=True)
class StateChange:
    """One bus emission observed during an engine call."""
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)
