from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(slots=True)
class Selection:
    """Pending first click awaiting a second adjacent click."""

    pending: Optional[Tuple[int, int]] = None
