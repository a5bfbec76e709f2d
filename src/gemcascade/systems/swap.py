import logging
from typing import Tuple

from esper import World

from gemcascade.components.game_state import GameMode
from gemcascade.components.resolver_state import ResolverPhase
from gemcascade.events.bus import (
    EventBus,
    EVENT_TILE_CLICK,
    EVENT_TILE_SELECTED,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_REJECTED,
    EVENT_TILE_SWAP_REVERTED,
)
from gemcascade.systems.animation import AnimationClock
from gemcascade.systems.grid import GridState
from gemcascade.utils.resources import get_game_state, get_resolver_state, get_selection

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class SwapValidator:
    """Turns cell selections into swap requests and reverts swaps that did not match."""

    def __init__(self, world: World, event_bus: EventBus, grid: GridState, clock: AnimationClock):
        self.world = world
        self.event_bus = event_bus
        self.grid = grid
        self.clock = clock
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    @property
    def selected(self) -> Position | None:
        return get_selection(self.world).pending

    def input_enabled(self) -> bool:
        if get_game_state(self.world).mode != GameMode.PLAYING:
            return False
        if get_resolver_state(self.world).phase != ResolverPhase.IDLE:
            return False
        return not self.clock.is_animating()

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.select(row, col)

    def select(self, row: int, col: int) -> bool:
        """Handle a "cell selected" event; returns True if a swap was issued."""
        if not self.input_enabled():
            # Dropped, never queued.
            return False
        selection = get_selection(self.world)
        if not self.grid.in_bounds(row, col) or self.grid.is_empty(row, col):
            self.clear_selection(reason='out_of_bounds' if not self.grid.in_bounds(row, col) else 'empty_cell')
            return False
        if selection.pending is None:
            selection.pending = (row, col)
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
            return False
        src = selection.pending
        dst = (row, col)
        if not self.grid.is_adjacent(src, dst):
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason='not_adjacent')
            self.clear_selection(reason='not_adjacent')
            return False
        selection.pending = None
        return self.request_swap(src, dst)

    def clear_selection(self, reason: str) -> None:
        selection = get_selection(self.world)
        prev = selection.pending
        if prev is None:
            return
        selection.pending = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])

    def request_swap(self, src: Position, dst: Position) -> bool:
        """Validate and provisionally perform a swap, then hand over to the swap animation."""
        if not self.input_enabled():
            return False
        reason = self._rejection_reason(src, dst)
        if reason is not None:
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason=reason)
            self.clear_selection(reason=reason)
            return False
        assert not self.grid.matched_positions(), "matched flags must be cleared before a swap"
        swapped = self.grid.swap(src, dst)
        assert swapped, f"validated swap {src} <-> {dst} was refused by the grid"
        get_selection(self.world).pending = None
        logger.debug("swap accepted %s -> %s", src, dst)
        self.clock.start_swap(src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)
        return True

    def revert(self, src: Position, dst: Position) -> None:
        """Undo a provisional swap that produced no match."""
        reverted = self.grid.swap(src, dst)
        assert reverted, f"revert of {src} <-> {dst} failed"
        logger.debug("swap reverted %s -> %s", src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_REVERTED, src=src, dst=dst)

    def _rejection_reason(self, src: Position, dst: Position) -> str | None:
        if not (self.grid.in_bounds(*src) and self.grid.in_bounds(*dst)):
            return 'out_of_bounds'
        if not self.grid.is_adjacent(src, dst):
            return 'not_adjacent'
        if self.grid.is_empty(*src) or self.grid.is_empty(*dst):
            return 'empty_cell'
        return None
