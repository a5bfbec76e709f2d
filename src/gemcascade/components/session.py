from dataclasses import dataclass


@dataclass(slots=True)
class Session:
    """In-memory counters for the running session."""

    score: int = 0
    combo: int = 0
    max_combo: int = 0
    move_count: int = 0
    high_score: int = 0

    def reset(self) -> None:
        self.score = 0
        self.combo = 0
        self.max_combo = 0
        self.move_count = 0
