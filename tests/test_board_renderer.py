import pytest

from gemcascade.constants import CELL_SIZE, GEM_COLORS, SCREEN_HEIGHT, SCREEN_WIDTH
from gemcascade.engine import create_engine
from gemcascade.rendering.board_renderer import BoardRenderer
from gemcascade.ui.layout import cell_center
from tests.helpers import ScriptedRandom


class RecordingArcade:
    def __init__(self):
        self.calls = []

    def draw_lrbt_rectangle_filled(self, *args):
        self.calls.append(('rect', args))

    def draw_text(self, text, *args, **kwargs):
        self.calls.append(('text', text))

    def draw_circle_filled(self, *args):
        self.calls.append(('circle', args))


def test_headless_layout_places_every_gem():
    engine = create_engine(rng=ScriptedRandom(1))
    renderer = BoardRenderer(GEM_COLORS)
    renderer.render(None, engine.snapshot(), SCREEN_WIDTH, SCREEN_HEIGHT, headless=True)
    assert len(renderer.last_draws) == 64
    first = next(d for d in renderer.last_draws if (d.row, d.col) == (0, 0))
    assert (first.x, first.y) == cell_center(0, 0, SCREEN_HEIGHT)
    assert first.radius == CELL_SIZE / 2 - 4
    assert first.color == GEM_COLORS[engine.grid.get(0, 0).type_name]


def test_spawned_gems_drawn_at_scale():
    engine = create_engine(rng=ScriptedRandom(1))
    engine.grid.get(2, 2).scale = 0.5
    engine.grid.get(2, 3).scale = 0.0
    renderer = BoardRenderer(GEM_COLORS)
    draws = {(d.row, d.col): d for d in renderer.layout(engine.snapshot(), SCREEN_HEIGHT)}
    assert draws[(2, 2)].radius == pytest.approx((CELL_SIZE / 2 - 4) * 0.5)
    assert draws[(2, 3)].radius == 0.0


def test_render_draws_header_and_gems():
    engine = create_engine(rng=ScriptedRandom(1))
    engine.grid.get(0, 0).scale = 0.0
    fake = RecordingArcade()
    BoardRenderer(GEM_COLORS).render(fake, engine.snapshot(), SCREEN_WIDTH, SCREEN_HEIGHT)
    texts = [args for kind, args in fake.calls if kind == 'text']
    assert "Score: 0" in texts
    assert "Moves: 0" in texts
    gem_circles = [args for kind, args in fake.calls if kind == 'circle' and args[3] in GEM_COLORS.values()]
    # The zero-scale gem is skipped.
    assert len(gem_circles) == 63
