"""Arcade front end for the cascade engine.

Maps pointer presses to grid cells, steps the engine at a fixed rate and draws its snapshot.
"""
import logging
import math

from arcade import Window, run, set_background_color, draw_circle_filled, draw_text, key, MOUSE_BUTTON_LEFT
import arcade
from rich.logging import RichHandler

from gemcascade.components.game_state import GameMode
from gemcascade.constants import FIXED_DT, SCREEN_HEIGHT, SCREEN_WIDTH
from gemcascade.engine import MatchEngine
from gemcascade.events.bus import EVENT_CASCADE_STEP
from gemcascade.rendering.board_renderer import BACKGROUND, TEXT, BoardRenderer
from gemcascade.ui.layout import cell_at_point

logger = logging.getLogger(__name__)


class GemCascadeWindow(Window):
    def __init__(self, engine: MatchEngine | None = None):
        super().__init__(SCREEN_WIDTH, SCREEN_HEIGHT, "Match 3", resizable=False)
        self.set_update_rate(FIXED_DT)
        self.engine = engine or MatchEngine()
        self.board_renderer = BoardRenderer(self.engine.config.gem_colors)
        self.title_pulse = 0.0
        self.engine.event_bus.subscribe(EVENT_CASCADE_STEP, self.on_cascade_step)
        set_background_color(BACKGROUND)

    def on_cascade_step(self, sender, **kwargs):
        logger.debug("cascade x%s scored %s", kwargs.get('depth'), kwargs.get('score_delta'))

    def on_draw(self):
        self.clear()
        if self.engine.mode == GameMode.MENU:
            self._draw_title()
            return
        self.board_renderer.render(arcade, self.engine.snapshot(), self.width, self.height)

    def on_update(self, delta_time: float):
        self.title_pulse += FIXED_DT * 2
        self.engine.step(FIXED_DT)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        if button != MOUSE_BUTTON_LEFT:
            return
        if self.engine.mode == GameMode.MENU:
            self.engine.start_session()
            return
        cell = cell_at_point(x, y, self.height, self.engine.grid.rows, self.engine.grid.cols)
        if cell is None:
            self.engine.validator.clear_selection(reason='outside_board')
            return
        self.engine.select(*cell)

    def on_key_press(self, symbol: int, modifiers: int):
        if self.engine.mode == GameMode.MENU:
            if symbol in (key.SPACE, key.ENTER):
                self.engine.start_session()
            return
        if symbol == key.ESCAPE:
            self.engine.return_to_menu()

    def _draw_title(self):
        colors = list(self.engine.config.gem_colors.values())
        for i, color in enumerate(colors[:5]):
            x = 100 + i * 60
            y = self.height - (60 + math.sin(self.title_pulse + i * 0.5) * 15)
            draw_circle_filled(x, y, 18, color)
        cx = self.width / 2
        cy = self.height / 2
        draw_text("M A T C H  3", cx, cy + 80, TEXT, 16, anchor_x="center")
        if self.engine.high_score > 0:
            draw_text(f"Best Score: {self.engine.high_score}", cx, cy + 40, TEXT, 12, anchor_x="center")
        if int(self.title_pulse * 2) % 2 == 0:
            draw_text("Click or SPACE to Start", cx, cy, TEXT, 12, anchor_x="center")
        draw_text("Click two adjacent gems to swap", cx, cy - 50, TEXT, 11, anchor_x="center")
        draw_text("Match 3+ of the same color!", cx, cy - 80, TEXT, 11, anchor_x="center")
        draw_text("Chain matches for combo bonus!", cx, cy - 110, TEXT, 11, anchor_x="center")


def main():
    logging.basicConfig(
        level="INFO", format="%(message)s", datefmt="[%X]", handlers=[RichHandler()]
    )
    GemCascadeWindow()
    run()


if __name__ == "__main__":
    main()
