from dataclasses import dataclass


@dataclass(slots=True)
class Gem:
    """Gem record stored on a cell entity.

    The logical position is the owning cell's BoardPosition. ``visual_row`` is the
    continuous row used for fall interpolation and may lag behind the logical row
    while ``falling`` is set; ``target_row`` is where the fall ends. ``scale`` is the
    pop-in factor for freshly spawned gems and is purely presentational.
    """
    type_name: str
    visual_row: float = 0.0
    target_row: int = 0
    matched: bool = False
    falling: bool = False
    just_spawned: bool = False
    scale: float = 1.0

    def copy_from(self, other: "Gem") -> None:
        self.type_name = other.type_name
        self.visual_row = other.visual_row
        self.target_row = other.target_row
        self.matched = other.matched
        self.falling = other.falling
        self.just_spawned = other.just_spawned
        self.scale = other.scale
