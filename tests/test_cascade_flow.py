import random

from gemcascade.components.resolver_state import ResolverPhase
from gemcascade.config import EngineConfig
from gemcascade.engine import create_engine
from gemcascade.events.bus import (EVENT_MATCH_FOUND, EVENT_GEM_REMOVED, EVENT_GRAVITY_APPLIED,
                                   EVENT_REFILL_COMPLETED, EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE,
                                   EVENT_TILE_SWAP_COMMITTED, EVENT_TILE_SWAP_REVERTED, EVENT_SCORE_CHANGED)
from gemcascade.systems.board_ops import find_runs, find_valid_swaps
from tests.helpers import ScriptedRandom, filler_layout, with_overrides, step_until, named

# Row 3 reads yellow red red purple red yellow red blue; swapping (3,3) and (3,4)
# completes red at cols 1-3.
SCENARIO = with_overrides(filler_layout(8, 8), {(3, 1): 'red', (3, 2): 'red', (3, 4): 'red'})

# 6x6: the first swap clears row 4 cols 0-2, compaction then lines up green at row 4 cols 1-3.
CHAIN = with_overrides(filler_layout(6, 6), {
    (3, 1): 'green', (3, 2): 'green',
    (4, 0): 'red', (4, 1): 'red', (4, 2): 'purple', (4, 3): 'green',
    (5, 2): 'red',
})


def test_single_match_removes_run_and_refills():
    rng = ScriptedRandom(7)
    engine = create_engine(rng=rng)
    engine.grid.load_layout(SCENARIO)
    assert not find_runs(engine.grid.type_map(), 8, 8)
    rng.queue(['green', 'blue', 'red'])

    assert engine.select(3, 3) is False
    assert engine.select(3, 4) is True
    assert engine.phase == ResolverPhase.SWAPPING
    events = engine.drain_events() + step_until(engine, EVENT_CASCADE_STEP)

    assert named(events, EVENT_TILE_SWAP_COMMITTED) == [{'src': (3, 3), 'dst': (3, 4)}]
    found = named(events, EVENT_MATCH_FOUND)
    assert found[0]['positions'] == [(3, 1), (3, 2), (3, 3)]
    assert found[0]['depth'] == 1
    removed = named(events, EVENT_GEM_REMOVED)
    assert [p['cell'] for p in removed] == [(3, 1), (3, 2), (3, 3)]
    assert all(p['gem_type'] == 'red' and p['points'] == 10 for p in removed)
    assert named(events, EVENT_CASCADE_STEP) == [{'depth': 1, 'positions': [(3, 1), (3, 2), (3, 3)], 'score_delta': 30}]
    assert named(events, EVENT_GRAVITY_APPLIED)[0]['columns'] == [1, 2, 3]
    assert named(events, EVENT_REFILL_COMPLETED)[0]['new_tiles'] == [(0, 1), (0, 2), (0, 3)]

    # Gems above the run dropped one row and are still travelling there.
    for col in (1, 2, 3):
        for row in (1, 2, 3):
            gem = engine.grid.get(row, col)
            assert gem.falling and gem.target_row == row and gem.visual_row == row - 1
        spawned = engine.grid.get(0, col)
        assert spawned.just_spawned and spawned.visual_row == -1.0
    assert [engine.grid.get(0, c).type_name for c in (1, 2, 3)] == ['green', 'blue', 'red']
    assert engine.grid.get(1, 1).type_name == SCENARIO[0][1]
    assert engine.grid.get(3, 3).type_name == SCENARIO[2][3]
    assert not engine.is_input_enabled()

    events = engine.run_until_idle()
    assert named(events, EVENT_CASCADE_COMPLETE) == [{'depth': 1, 'move_count': 1}]
    assert engine.score == 30
    assert engine.max_combo == 1
    assert engine.combo == 0
    assert engine.move_count == 1
    assert engine.is_input_enabled()


def test_two_level_cascade_scales_points_by_depth():
    rng = ScriptedRandom(11)
    engine = create_engine(EngineConfig(rows=6, cols=6), rng=rng)
    engine.grid.load_layout(CHAIN)
    assert not find_runs(engine.grid.type_map(), 6, 6)
    rng.queue(['purple', 'red', 'yellow', 'green', 'blue', 'red'])
    scores = []
    engine.event_bus.subscribe(EVENT_SCORE_CHANGED, lambda s, **k: scores.append(k['delta']))

    assert engine.request_swap((4, 2), (5, 2))
    events = engine.run_until_idle()

    steps = named(events, EVENT_CASCADE_STEP)
    assert [s['depth'] for s in steps] == [1, 2]
    assert steps[0]['positions'] == [(4, 0), (4, 1), (4, 2)]
    assert steps[1]['positions'] == [(4, 1), (4, 2), (4, 3)]
    assert [s['score_delta'] for s in steps] == [30, 60]
    assert scores == [30, 60]
    assert all(p['points'] == 20 for p in named(events, EVENT_GEM_REMOVED) if p['combo_depth'] == 2)
    assert named(events, EVENT_CASCADE_COMPLETE)[0]['depth'] == 2
    assert len(named(events, EVENT_TILE_SWAP_COMMITTED)) == 1
    assert engine.score == 90
    assert engine.max_combo == 2
    assert engine.move_count == 1


def test_swap_without_match_reverts():
    engine = create_engine(rng=ScriptedRandom(5))
    layout = filler_layout(8, 8)
    engine.grid.load_layout(layout)
    assert engine.request_swap((0, 0), (0, 1))
    # Provisionally swapped while the animation plays.
    assert engine.grid.get(0, 0).type_name == layout[0][1]

    events = engine.run_until_idle()
    assert named(events, EVENT_TILE_SWAP_REVERTED) == [{'src': (0, 0), 'dst': (0, 1)}]
    assert not named(events, EVENT_CASCADE_STEP)
    assert not named(events, EVENT_CASCADE_COMPLETE)
    assert engine.grid.type_rows() == layout
    assert engine.score == 0
    assert engine.combo == 0
    assert engine.move_count == 0
    assert engine.phase == ResolverPhase.IDLE


def test_random_play_always_settles():
    for seed in range(4):
        engine = create_engine(rng=random.Random(seed))
        grid = engine.grid
        for move in range(5):
            swaps = find_valid_swaps(grid.type_map(), grid.rows, grid.cols)
            assert swaps, f"seed {seed}: no legal swap before move {move}"
            src, dst = swaps[len(swaps) // 2]
            assert engine.request_swap(src, dst)
            events = engine.run_until_idle()
            assert len(named(events, EVENT_CASCADE_STEP)) <= grid.rows * grid.cols
            assert len(named(events, EVENT_CASCADE_COMPLETE)) == 1
            assert not find_runs(grid.type_map(), grid.rows, grid.cols)
            assert all(not grid.is_empty(r, c) for r, c in grid.positions())
            assert not grid.has_falling()
            assert not grid.matched_positions()
            assert engine.move_count == move + 1
        assert engine.score > 0
