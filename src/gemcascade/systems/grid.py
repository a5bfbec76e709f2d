from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from esper import World

from gemcascade.components.active_switch import ActiveSwitch
from gemcascade.components.board import Board
from gemcascade.components.board_position import BoardPosition
from gemcascade.components.gem import Gem
from gemcascade.systems.board_ops import (
    GravityMove,
    Position,
    TypeMap,
    compute_gravity_moves,
    generate_layout,
)
from gemcascade.utils.resources import get_config, get_gem_registry, get_rng

logger = logging.getLogger(__name__)


class GridState:
    """Authoritative rows x cols matrix of gem records.

    One entity per slot carries BoardPosition, ActiveSwitch and Gem. The cell entities
    are created once and never change; swaps, removals and refills rewrite the Gem
    values in place, so the grid is the sole owner of every gem.
    """

    def __init__(self, world: World, rows: int | None = None, cols: int | None = None):
        self.world = world
        config = get_config(world)
        self.rows = rows if rows is not None else config.rows
        self.cols = cols if cols is not None else config.cols
        self.board_entity = self.world.create_entity()
        board = Board(rows=self.rows, cols=self.cols)
        self.world.add_component(self.board_entity, board)
        for r in range(self.rows):
            for c in range(self.cols):
                ent = self.world.create_entity(
                    BoardPosition(row=r, col=c),
                    ActiveSwitch(active=False),
                    Gem(type_name="", visual_row=float(r), target_row=r),
                )
                board.cells[(r, c)] = ent
        self._cells: Dict[Position, int] = board.cells

    # ------------------------------------------------------------------
    # Bounds and lookup
    # ------------------------------------------------------------------
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    @staticmethod
    def is_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        ar, ac = a
        br, bc = b
        return abs(ar - br) + abs(ac - bc) == 1

    def entity_at(self, row: int, col: int) -> Optional[int]:
        return self._cells.get((row, col))

    def positions(self) -> Iterator[Position]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def get(self, row: int, col: int) -> Optional[Gem]:
        """Return the gem occupying (row, col), or None when empty or out of bounds."""
        ent = self.entity_at(row, col)
        if ent is None:
            return None
        try:
            switch = self.world.component_for_entity(ent, ActiveSwitch)
            if not switch.active:
                return None
            return self.world.component_for_entity(ent, Gem)
        except KeyError:
            return None

    def set(self, row: int, col: int, gem: Optional[Gem]) -> bool:
        """Replace the occupant of a slot; ``None`` empties it."""
        ent = self.entity_at(row, col)
        if ent is None:
            return False
        switch = self.world.component_for_entity(ent, ActiveSwitch)
        if gem is None:
            switch.active = False
            return True
        slot = self.world.component_for_entity(ent, Gem)
        slot.copy_from(gem)
        switch.active = True
        return True

    def is_empty(self, row: int, col: int) -> bool:
        return self.get(row, col) is None

    def occupied(self) -> Iterator[Tuple[Position, Gem]]:
        for pos in self.positions():
            gem = self.get(*pos)
            if gem is not None:
                yield pos, gem

    def type_map(self) -> TypeMap:
        """Return mapping of occupied positions to their gem type names."""
        return {pos: gem.type_name for pos, gem in self.occupied()}

    def type_rows(self) -> List[List[Optional[str]]]:
        rows: List[List[Optional[str]]] = []
        for r in range(self.rows):
            row_values: List[Optional[str]] = []
            for c in range(self.cols):
                gem = self.get(r, c)
                row_values.append(gem.type_name if gem is not None else None)
            rows.append(row_values)
        return rows

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def swap(self, a: Position, b: Position) -> bool:
        """Exchange the contents of two orthogonally adjacent, occupied cells.

        Returns False (and changes nothing) for out-of-bounds, non-adjacent or empty cells.
        """
        if not (self.in_bounds(*a) and self.in_bounds(*b)):
            return False
        if not self.is_adjacent(a, b):
            return False
        gem_a = self.get(*a)
        gem_b = self.get(*b)
        if gem_a is None or gem_b is None:
            return False
        held = Gem(type_name=gem_a.type_name)
        held.copy_from(gem_a)
        gem_a.copy_from(gem_b)
        gem_b.copy_from(held)
        # Visual rows follow the logical slot; the swap tween is driven by SwapAnimation.
        for (row, _), gem in ((a, gem_a), (b, gem_b)):
            gem.visual_row = float(row)
            gem.target_row = row
        logger.debug("swapped %s <-> %s", a, b)
        return True

    def load_layout(self, layout: Sequence[Sequence[Optional[str]]]) -> None:
        """Overwrite every slot from a rows x cols layout of type names (None for empty)."""
        if len(layout) != self.rows or any(len(values) != self.cols for values in layout):
            raise ValueError(f"Layout must be {self.rows}x{self.cols}")
        for r, values in enumerate(layout):
            for c, type_name in enumerate(values):
                if type_name is None:
                    self.set(r, c, None)
                else:
                    self.set(r, c, Gem(type_name=type_name, visual_row=float(r), target_row=r))

    def generate(self, *, require_valid_swap: bool = True) -> None:
        """Fill the whole board with a fresh match-free layout using the world generator."""
        config = get_config(self.world)
        registry = get_gem_registry(self.world)
        layout = generate_layout(
            get_rng(self.world),
            self.rows,
            self.cols,
            registry.spawnable_types(),
            min_run=config.min_run,
            max_attempts=config.max_layout_attempts,
            require_valid_swap=require_valid_swap,
        )
        self.load_layout(layout)

    def remove(self, row: int, col: int) -> Optional[Gem]:
        """Empty a slot, returning a detached copy of the removed gem."""
        gem = self.get(row, col)
        if gem is None:
            return None
        removed = Gem(type_name=gem.type_name)
        removed.copy_from(gem)
        self.set(row, col, None)
        return removed

    def apply_gravity(self) -> List[GravityMove]:
        """Compact every column toward the bottom, tagging moved gems as falling."""
        moves = compute_gravity_moves(self.type_map(), self.rows, self.cols)
        for move in moves:
            src_row, src_col = move.source
            dst_row, dst_col = move.target
            gem = self.get(src_row, src_col)
            assert gem is not None, f"gravity source {move.source} is empty"
            assert self.get(dst_row, dst_col) is None, f"gravity target {move.target} is occupied"
            self.set(dst_row, dst_col, gem)
            moved = self.get(dst_row, dst_col)
            moved.visual_row = float(src_row)
            moved.target_row = dst_row
            moved.falling = True
            self.set(src_row, src_col, None)
        return moves

    def refill(self) -> List[Position]:
        """Spawn random gems into every empty slot, stacked directly above the board."""
        registry = get_gem_registry(self.world)
        choices = registry.spawnable_types()
        rng = get_rng(self.world)
        spawned: List[Position] = []
        for col in range(self.cols):
            empty_rows = [row for row in range(self.rows) if self.is_empty(row, col)]
            count = len(empty_rows)
            for index, row in enumerate(empty_rows):
                gem = Gem(
                    type_name=rng.choice(choices),
                    visual_row=float(index - count),
                    target_row=row,
                    falling=True,
                    just_spawned=True,
                    scale=0.0,
                )
                self.set(row, col, gem)
                spawned.append((row, col))
        return spawned

    def matched_positions(self) -> List[Position]:
        return [pos for pos, gem in self.occupied() if gem.matched]

    def clear_matched(self) -> None:
        for _, gem in self.occupied():
            gem.matched = False

    def has_falling(self) -> bool:
        return any(gem.falling for _, gem in self.occupied())
