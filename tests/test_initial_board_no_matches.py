import random

import pytest

from gemcascade.config import EngineConfig
from gemcascade.engine import create_engine
from gemcascade.systems.board_ops import find_runs, find_valid_swaps, generate_layout, layout_type_map


@pytest.mark.parametrize('seed', range(6))
def test_initial_board_has_no_matches_and_a_legal_swap(seed):
    engine = create_engine(rng=random.Random(seed))
    grid = engine.grid
    assert all(not grid.is_empty(r, c) for r, c in grid.positions())
    assert not find_runs(grid.type_map(), grid.rows, grid.cols)
    assert find_valid_swaps(grid.type_map(), grid.rows, grid.cols)
    for _, gem in grid.occupied():
        assert not gem.falling and not gem.matched and gem.scale == 1.0


def test_same_seed_gives_same_board():
    first = create_engine(rng=random.Random(42)).grid.type_rows()
    second = create_engine(rng=random.Random(42)).grid.type_rows()
    assert first == second


def test_small_board_with_three_types():
    config = EngineConfig(rows=4, cols=5, gem_colors={'red': (255, 0, 0), 'green': (0, 255, 0), 'blue': (0, 0, 255)})
    engine = create_engine(config, rng=random.Random(3))
    assert len(engine.grid.type_rows()) == 4
    assert set(engine.grid.type_map().values()) <= {'red', 'green', 'blue'}
    assert not find_runs(engine.grid.type_map(), 4, 5)


def test_generate_layout_uses_only_given_types():
    layout = generate_layout(random.Random(1), 6, 7, ['red', 'blue', 'green', 'yellow'])
    assert len(layout) == 6 and all(len(row) == 7 for row in layout)
    assert {t for row in layout for t in row} <= {'red', 'blue', 'green', 'yellow'}
    assert not find_runs(layout_type_map(layout), 6, 7)


def test_generate_layout_without_choices_fails():
    with pytest.raises(RuntimeError):
        generate_layout(random.Random(1), 3, 3, [])


def test_generate_layout_gives_up_when_unsatisfiable():
    with pytest.raises(RuntimeError):
        generate_layout(random.Random(1), 3, 3, ['red'], max_attempts=5)
