"""Engine tunables bundled in one place.

Defaults come from ``gemcascade.constants``; tests and alternative front ends
override individual fields instead of patching module globals.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from gemcascade.constants import (
    BASE_POINTS,
    FALL_SPEED,
    GEM_COLORS,
    GRID_COLS,
    GRID_ROWS,
    MAX_LAYOUT_ATTEMPTS,
    MIN_RUN,
    SPAWN_SCALE_SPEED,
    SWAP_DURATION,
)


@dataclass(slots=True)
class EngineConfig:
    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    base_points: int = BASE_POINTS
    min_run: int = MIN_RUN
    swap_duration: float = SWAP_DURATION
    fall_speed: float = FALL_SPEED
    spawn_scale_speed: float = SPAWN_SCALE_SPEED
    max_layout_attempts: int = MAX_LAYOUT_ATTEMPTS
    gem_colors: Dict[str, Tuple[int, int, int]] = field(default_factory=lambda: dict(GEM_COLORS))
    reshuffle_on_stalemate: bool = True

    def validate(self) -> "EngineConfig":
        if self.rows < 3 or self.cols < 3:
            raise ValueError(f"Board must be at least 3x3, got {self.rows}x{self.cols}")
        if len(self.gem_colors) < 3:
            raise ValueError("At least three gem types are required")
        if self.min_run < 2:
            raise ValueError(f"min_run must be >= 2, got {self.min_run}")
        if self.base_points < 0:
            raise ValueError(f"base_points must be non-negative, got {self.base_points}")
        if self.swap_duration <= 0 or self.fall_speed <= 0 or self.spawn_scale_speed <= 0:
            raise ValueError("Animation durations and speeds must be positive")
        if self.max_layout_attempts < 1:
            raise ValueError("max_layout_attempts must be at least 1")
        return self
