from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from gemcascade.constants import CELL_SIZE, GRID_OFFSET_X, GRID_OFFSET_Y, HEADER_HEIGHT
from gemcascade.snapshot import GridView
from gemcascade.ui.layout import board_origin, cell_center

BACKGROUND = (35, 25, 45)
HEADER = (55, 45, 65)
BOARD_BACKGROUND = (25, 20, 35)
GRID_LINE = (55, 45, 65)
SELECTION = (255, 255, 255, 100)
HIGHLIGHT = (255, 255, 255, 80)
TEXT = (255, 255, 255)


@dataclass(slots=True)
class GemDraw:
    row: int
    col: int
    x: float
    y: float
    radius: float
    color: Tuple[int, int, int]


class BoardRenderer:
    """Draws a GridView. The arcade module is passed in so tests can render headless."""

    def __init__(self, colors: Dict[str, Tuple[int, int, int]], cell_size: int = CELL_SIZE, padding: int = 4):
        self._colors = colors
        self._cell_size = cell_size
        self._padding = padding
        self.last_draws: List[GemDraw] = []

    def layout(self, view: GridView, window_height: float) -> List[GemDraw]:
        size = self._cell_size
        draws: List[GemDraw] = []
        for row in view.cells:
            for gem in row:
                if gem is None:
                    continue
                x, y = cell_center(gem.visual_row, gem.visual_col, window_height, size)
                radius = (size / 2 - self._padding) * gem.scale
                draws.append(GemDraw(gem.row, gem.col, x, y, radius, self._colors[gem.type_name]))
        return draws

    def render(self, arcade, view: GridView, window_width: float, window_height: float, headless: bool = False) -> None:
        self.last_draws = self.layout(view, window_height)
        if headless:
            return
        size = self._cell_size
        left, bottom = board_origin(window_height, view.rows, size)
        width = view.cols * size
        height = view.rows * size

        arcade.draw_lrbt_rectangle_filled(0, window_width, window_height - HEADER_HEIGHT, window_height, HEADER)
        arcade.draw_text("Match 3", 15, window_height - 20, TEXT, 12)
        arcade.draw_text(f"Score: {view.score}", 15, window_height - 40, TEXT, 12)
        arcade.draw_text(f"Moves: {view.move_count}", 15, window_height - 60, TEXT, 12)
        if view.combo > 1:
            arcade.draw_text(f"COMBO x{view.combo}!", 150, window_height - 40, TEXT, 12)
        arcade.draw_text(f"Best Combo: {view.max_combo}", 280, window_height - 20, TEXT, 12)
        arcade.draw_text(f"High: {view.high_score}", 280, window_height - 40, TEXT, 12)

        arcade.draw_lrbt_rectangle_filled(left, left + width, bottom, bottom + height, BOARD_BACKGROUND)

        if view.selection is not None:
            sel_row, sel_col = view.selection
            cx, cy = cell_center(sel_row, sel_col, window_height, size)
            half = size / 2 - 2
            arcade.draw_lrbt_rectangle_filled(cx - half, cx + half, cy - half, cy + half, SELECTION)

        for draw in self.last_draws:
            if draw.radius <= 0:
                continue
            arcade.draw_circle_filled(draw.x, draw.y, draw.radius, draw.color)
            if draw.radius >= (size / 2 - self._padding) * 0.8:
                arcade.draw_circle_filled(draw.x - 5, draw.y + 5, 5, HIGHLIGHT)

        for i in range(view.cols + 1):
            x = GRID_OFFSET_X + i * size
            arcade.draw_lrbt_rectangle_filled(x, x + 1, bottom, bottom + height, GRID_LINE)
        for i in range(view.rows + 1):
            y = window_height - GRID_OFFSET_Y - i * size
            arcade.draw_lrbt_rectangle_filled(left, left + width, y, y + 1, GRID_LINE)

        arcade.draw_text("Click gems to swap | ESC: Menu", 85, 15, TEXT, 12)
