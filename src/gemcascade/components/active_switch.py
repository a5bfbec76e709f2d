from dataclasses import dataclass

@dataclass(slots=True)
class ActiveSwitch:
    """Per-cell occupancy flag.

    active: True if the cell currently holds a gem; False while transiently empty during resolution.
    Gem data lives in a separate Gem component on the same cell entity.
    """
    active: bool = True
