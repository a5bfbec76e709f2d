from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Set, Tuple

Position = Tuple[int, int]
TypeMap = Dict[Position, str]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    type_name: str


def _lines(rows: int, cols: int) -> Iterator[List[Position]]:
    """Yield every row left-to-right, then every column top-to-bottom."""
    for r in range(rows):
        yield [(r, c) for c in range(cols)]
    for c in range(cols):
        yield [(r, c) for r in range(rows)]


def find_runs(types: TypeMap, rows: int, cols: int, min_run: int = 3) -> List[List[Position]]:
    """Return every maximal horizontal or vertical run of at least ``min_run`` equal types.

    Horizontal runs come first, then vertical ones. Empty cells (absent from
    ``types``) break runs.
    """
    runs: List[List[Position]] = []
    for line in _lines(rows, cols):
        run: List[Position] = []
        for pos in line:
            tval = types.get(pos)
            if run and tval is not None and tval == types[run[0]]:
                run.append(pos)
                continue
            if len(run) >= min_run:
                runs.append(run)
            run = [pos] if tval is not None else []
        if len(run) >= min_run:
            runs.append(run)
    return runs


def merge_runs(runs: Sequence[Sequence[Position]]) -> List[List[Position]]:
    """Union runs that share a cell (L/T/plus shapes) into connected groups."""
    groups: List[Set[Position]] = []
    for run in runs:
        cells = set(run)
        for group in [g for g in groups if g & cells]:
            cells |= group
            groups.remove(group)
        groups.append(cells)
    return sorted(sorted(group) for group in groups)


def find_all_matches(types: TypeMap, rows: int, cols: int, min_run: int = 3) -> List[List[Position]]:
    """Detect all contiguous horizontal or vertical matches, merged into shape groups."""
    runs = find_runs(types, rows, cols, min_run)
    if not runs:
        return []
    return merge_runs(runs)


def _span(types: TypeMap, pos: Position, step: Position) -> int:
    """Count equal neighbours of pos walking in direction ``step`` and its opposite."""
    tval = types[pos]
    total = 1
    for dr, dc in (step, (-step[0], -step[1])):
        row, col = pos[0] + dr, pos[1] + dc
        while types.get((row, col)) == tval:
            total += 1
            row, col = row + dr, col + dc
    return total


def _has_line_match(types: TypeMap, pos: Position, min_run: int) -> bool:
    """Return True if a horizontal or vertical run of ``min_run`` passes through pos."""
    if pos not in types:
        return False
    return _span(types, pos, (0, 1)) >= min_run or _span(types, pos, (1, 0)) >= min_run


def predict_swap_creates_match(types: TypeMap, src: Position, dst: Position, min_run: int = 3) -> bool:
    """Return True if swapping src/dst would create a new match."""
    if src not in types or dst not in types:
        return False
    swapped = types.copy()
    swapped[src], swapped[dst] = swapped[dst], swapped[src]
    return _has_line_match(swapped, src, min_run) or _has_line_match(swapped, dst, min_run)


def find_valid_swaps(types: TypeMap, rows: int, cols: int, min_run: int = 3) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent (right or down) swaps that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for row in range(rows):
        for col in range(cols):
            for neighbour in ((row, col + 1), (row + 1, col)):
                if predict_swap_creates_match(types, (row, col), neighbour, min_run):
                    swaps.append(((row, col), neighbour))
    return swaps


def compute_gravity_moves(types: TypeMap, rows: int, cols: int) -> List[GravityMove]:
    """Plan per-column compaction toward the bottom row, preserving vertical order.

    Moves are listed column by column, bottom-up, so applying them in order never
    overwrites a gem that has not moved yet.
    """
    moves: List[GravityMove] = []
    for col in range(cols):
        write_row = rows - 1
        for row in range(rows - 1, -1, -1):
            tval = types.get((row, col))
            if tval is None:
                continue
            if write_row != row:
                moves.append(GravityMove(source=(row, col), target=(write_row, col), type_name=tval))
            write_row -= 1
    return moves


def _allowed_types(layout: List[List[str]], row: int, col: int, choices: List[str], min_run: int) -> List[str]:
    """Types that do not complete a run with the cells already placed left of and above (row, col)."""
    banned: Set[str] = set()
    if col >= min_run - 1:
        left = {layout[row][col - k] for k in range(1, min_run)}
        if len(left) == 1:
            banned |= left
    if row >= min_run - 1:
        up = {layout[row - k][col] for k in range(1, min_run)}
        if len(up) == 1:
            banned |= up
    return [t for t in choices if t not in banned]


def _fill_candidate(rng: random.Random, rows: int, cols: int, choices: List[str], min_run: int) -> List[List[str]] | None:
    layout: List[List[str]] = []
    for row in range(rows):
        layout.append([])
        for col in range(cols):
            allowed = _allowed_types(layout, row, col, choices, min_run)
            if not allowed:
                return None
            layout[row].append(rng.choice(allowed))
    return layout


def generate_layout(
    rng: random.Random,
    rows: int,
    cols: int,
    choices: Sequence[str],
    *,
    min_run: int = 3,
    max_attempts: int = 200,
    require_valid_swap: bool = True,
) -> List[List[str]]:
    """Build a rows x cols layout with no matches and, optionally, at least one legal swap.

    Each cell is drawn from the types that cannot complete a run with its left and
    upper neighbours; candidates are re-checked with the detector and retried up to
    ``max_attempts`` times.
    """
    choices = list(choices)
    if not choices:
        raise RuntimeError("No spawnable gem types configured")
    for _ in range(max_attempts):
        layout = _fill_candidate(rng, rows, cols, choices, min_run)
        if layout is None:
            continue
        types = layout_type_map(layout)
        if find_runs(types, rows, cols, min_run):
            continue
        if require_valid_swap and not find_valid_swaps(types, rows, cols, min_run):
            continue
        return layout
    raise RuntimeError(f"Unable to generate a {rows}x{cols} board without matches and valid swaps")


def layout_type_map(layout: Sequence[Sequence[str | None]]) -> TypeMap:
    return {
        (row, col): tval
        for row, values in enumerate(layout)
        for col, tval in enumerate(values)
        if tval is not None
    }
