from typing import Optional, Tuple

from gemcascade.constants import CELL_SIZE, GRID_OFFSET_X, GRID_OFFSET_Y


def board_origin(window_height: float, rows: int, cell_size: int = CELL_SIZE) -> Tuple[float, float]:
    """Return (left, bottom) of the board in Arcade coordinates (origin bottom-left)."""
    top = window_height - GRID_OFFSET_Y
    return GRID_OFFSET_X, top - rows * cell_size


def cell_at_point(
    x: float,
    y: float,
    window_height: float,
    rows: int,
    cols: int,
    cell_size: int = CELL_SIZE,
) -> Optional[Tuple[int, int]]:
    """Map a pointer position to (row, col) with row 0 at the top, or None outside the board."""
    gx = x - GRID_OFFSET_X
    gy = (window_height - y) - GRID_OFFSET_Y
    if gx < 0 or gy < 0:
        return None
    col = int(gx // cell_size)
    row = int(gy // cell_size)
    if 0 <= row < rows and 0 <= col < cols:
        return row, col
    return None


def cell_center(
    visual_row: float,
    visual_col: float,
    window_height: float,
    cell_size: int = CELL_SIZE,
) -> Tuple[float, float]:
    """Return the Arcade-space center for a (possibly fractional) grid coordinate."""
    cx = GRID_OFFSET_X + visual_col * cell_size + cell_size / 2
    cy = window_height - (GRID_OFFSET_Y + visual_row * cell_size + cell_size / 2)
    return cx, cy
