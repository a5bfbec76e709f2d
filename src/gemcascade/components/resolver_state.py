from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ResolverPhase(Enum):
    IDLE = "idle"
    SWAPPING = "swapping"
    EVALUATING = "evaluating"
    RESOLVING = "resolving"
    FALLING = "falling"


@dataclass(slots=True)
class ResolverState:
    """Tracks the cascade state machine shared across systems."""

    phase: ResolverPhase = ResolverPhase.IDLE
    combo_depth: int = 0
    swap_src: Optional[Tuple[int, int]] = None
    swap_dst: Optional[Tuple[int, int]] = None
    iterations: int = 0
