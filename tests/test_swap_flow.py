import pytest

from gemcascade.components.resolver_state import ResolverPhase
from gemcascade.engine import create_engine
from gemcascade.events.bus import (EVENT_TILE_SELECTED, EVENT_TILE_SWAP_REQUEST, EVENT_ANIMATION_START,
                                   EVENT_ANIMATION_COMPLETE, EVENT_PHASE_CHANGED)
from tests.helpers import ScriptedRandom, filler_layout, drive_ticks, named


def make_engine():
    engine = create_engine(rng=ScriptedRandom(9))
    engine.grid.load_layout(filler_layout(8, 8))
    return engine


def test_second_adjacent_click_issues_swap():
    engine = make_engine()
    engine.select(5, 5)
    assert engine.select(5, 6) is True
    events = engine.drain_events()
    assert named(events, EVENT_TILE_SWAP_REQUEST) == [{'src': (5, 5), 'dst': (5, 6)}]
    assert named(events, EVENT_ANIMATION_START) == [{'kind': 'swap', 'items': [(5, 5), (5, 6)]}]
    assert named(events, EVENT_PHASE_CHANGED)[-1]['phase'] == ResolverPhase.SWAPPING
    assert engine.validator.selected is None


def test_input_dropped_while_swap_animates():
    engine = make_engine()
    engine.request_swap((0, 0), (1, 0))
    drive_ticks(engine, 3)
    assert not engine.is_input_enabled()
    assert engine.select(6, 6) is False
    assert engine.request_swap((6, 6), (6, 7)) is False
    events = engine.drain_events()
    assert not named(events, EVENT_TILE_SELECTED)
    assert not named(events, EVENT_TILE_SWAP_REQUEST)
    # The dropped click is not remembered once input re-opens.
    engine.run_until_idle()
    assert engine.is_input_enabled()
    assert engine.validator.selected is None


def test_swap_takes_fixed_duration():
    engine = make_engine()
    engine.request_swap((2, 2), (2, 3))
    engine.drain_events()
    events = drive_ticks(engine, 11)
    assert not named(events, EVENT_ANIMATION_COMPLETE)
    events = drive_ticks(engine, 2)
    assert named(events, EVENT_ANIMATION_COMPLETE)[0]['kind'] == 'swap'


def test_snapshot_interpolates_swapping_gems():
    engine = make_engine()
    layout = filler_layout(8, 8)
    engine.request_swap((3, 3), (3, 4))
    view = engine.snapshot()
    assert view.swap_progress == 0.0
    moving = view.cell(3, 3)
    assert moving.type_name == layout[3][4]
    assert moving.visual_col == 4.0
    engine.step(0.1)
    view = engine.snapshot()
    assert view.swap_progress == pytest.approx(0.5)
    assert view.cell(3, 3).visual_col == pytest.approx(3.5)
    assert view.cell(3, 4).visual_col == pytest.approx(3.5)
    assert view.cell(3, 3).visual_row == 3.0
    assert view.cell(0, 0).visual_col == 0.0


def test_snapshot_is_immutable():
    engine = make_engine()
    view = engine.snapshot()
    with pytest.raises(AttributeError):
        view.score = 5
    engine.grid.set(0, 0, None)
    assert view.cell(0, 0) is not None
    assert engine.snapshot().cell(0, 0) is None
