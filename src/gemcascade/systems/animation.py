import logging
from typing import List, Tuple

from esper import World

from gemcascade.animation_factory import AnimationFactory
from gemcascade.components.animation_swap import SwapAnimation
from gemcascade.events.bus import (EVENT_TICK, EventBus, EVENT_ANIMATION_START, EVENT_ANIMATION_COMPLETE)
from gemcascade.systems.grid import GridState
from gemcascade.utils.resources import get_config

logger = logging.getLogger(__name__)


class AnimationClock:
    """Paces swap and fall interpolation and gates input while anything is in flight.

    Fall state lives on the Gem records themselves (``falling``, ``visual_row``,
    ``target_row``); only the swap tween has its own entity.
    """

    def __init__(self, world: World, event_bus: EventBus, grid: GridState):
        self.world = world
        self.event_bus = event_bus
        self.grid = grid
        config = get_config(world)
        self.swap_duration = config.swap_duration
        self.fall_speed = config.fall_speed
        self.spawn_scale_speed = config.spawn_scale_speed
        self.swap_entity: int | None = None
        self.factory = AnimationFactory(world)
        self._fall_active = False
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    def _active_swap(self) -> SwapAnimation | None:
        return self.factory.swap_for(self.swap_entity)

    @property
    def swap(self) -> SwapAnimation | None:
        return self._active_swap()

    def start_swap(self, src: Tuple[int, int], dst: Tuple[int, int]) -> None:
        if self._active_swap() is not None:
            self._end_swap()
        self.swap_entity = self.factory.create_swap(src, dst, duration=self.swap_duration)
        self.event_bus.emit(EVENT_ANIMATION_START, kind='swap', items=[src, dst])

    def start_fall(self) -> None:
        """Arm fall tracking after the resolver tagged gems as falling."""
        falling = self._falling_positions()
        if not falling:
            return
        self._fall_active = True
        logger.debug("fall started for %d gems", len(falling))
        self.event_bus.emit(EVENT_ANIMATION_START, kind='fall', items=falling)

    def is_animating(self) -> bool:
        return self._active_swap() is not None or self.grid.has_falling()

    def on_tick(self, sender, **kwargs):
        self.advance(kwargs.get('dt', 1/60))

    def advance(self, dt: float) -> None:
        if dt <= 0:
            return
        self._advance_scale(dt)
        self._advance_falls(dt)
        self._advance_swap(dt)

    def cancel(self) -> None:
        """Drop every in-flight animation; gems snap to their logical rows."""
        self._end_swap()
        for (row, _), gem in self.grid.occupied():
            gem.falling = False
            gem.visual_row = float(row)
            gem.target_row = row
            gem.scale = 1.0
            gem.just_spawned = False
        self._fall_active = False

    def _advance_scale(self, dt: float) -> None:
        for _, gem in self.grid.occupied():
            if gem.scale < 1.0:
                gem.scale += dt * self.spawn_scale_speed
                if gem.scale >= 1.0:
                    gem.scale = 1.0
                    gem.just_spawned = False

    def _advance_falls(self, dt: float) -> None:
        for (row, _), gem in self.grid.occupied():
            if not gem.falling:
                continue
            assert gem.target_row == row, f"falling gem at row {row} targets {gem.target_row}"
            gem.visual_row += self.fall_speed * dt
            if gem.visual_row >= gem.target_row:
                gem.visual_row = float(gem.target_row)
                gem.falling = False
        if self._fall_active and not self.grid.has_falling():
            self._fall_active = False
            self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='fall', items=[])

    def _advance_swap(self, dt: float) -> None:
        swap = self._active_swap()
        if swap is None:
            return
        if swap.advance(dt):
            src, dst = swap.src, swap.dst
            self._end_swap()
            self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='swap', items=[src, dst])

    def _falling_positions(self) -> List[Tuple[int, int]]:
        return [pos for pos, gem in self.grid.occupied() if gem.falling]

    def _end_swap(self):
        self.factory.dispose(self.swap_entity)
        self.swap_entity = None
