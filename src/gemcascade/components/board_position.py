from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Logical slot of a cell entity. Row 0 is the top row; gravity pulls toward higher rows."""
    row: int
    col: int
