"""Engine facade wiring the world, the event bus and the cascade systems together.

The facade replaces an update/draw callback pair with two plain calls:
``step(dt)`` advances the simulation and returns the state changes it produced,
``snapshot()`` returns an immutable view of the grid for whoever draws it.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from gemcascade.components.game_state import GameMode
from gemcascade.components.resolver_state import ResolverPhase
from gemcascade.config import EngineConfig
from gemcascade.events.bus import (
    ENGINE_EVENTS,
    EVENT_SESSION_ABORTED,
    EVENT_SESSION_STARTED,
    EVENT_TICK,
    EventBus,
)
from gemcascade.snapshot import GemView, GridView, StateChange
from gemcascade.systems.animation import AnimationClock
from gemcascade.systems.cascade import CascadeResolver
from gemcascade.systems.grid import GridState
from gemcascade.systems.match import MatchDetector
from gemcascade.systems.score import ScoreTracker
from gemcascade.systems.swap import SwapValidator
from gemcascade.utils.resources import (
    get_game_state,
    get_resolver_state,
    get_selection,
    get_session,
    set_game_mode,
)
from gemcascade.world import create_world

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class MatchEngine:
    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        rng: random.Random | None = None,
        event_bus: EventBus | None = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, config=config, rng=rng)
        self.config: EngineConfig = self.world.config
        self.grid = GridState(self.world)
        self.clock = AnimationClock(self.world, self.event_bus, self.grid)
        self.detector = MatchDetector(self.grid, min_run=self.config.min_run)
        self.score_tracker = ScoreTracker(self.world, self.event_bus)
        self.validator = SwapValidator(self.world, self.event_bus, self.grid, self.clock)
        self.resolver = CascadeResolver(
            self.world,
            self.event_bus,
            self.grid,
            self.detector,
            self.validator,
            self.score_tracker,
            self.clock,
        )
        self._pending: List[StateChange] = []
        self._recorded = frozenset(ENGINE_EVENTS)
        self.event_bus.tap(self._record)

    def _record(self, name: str, payload: dict) -> None:
        if name in self._recorded:
            self._pending.append(StateChange(name=name, payload=dict(payload)))

    def drain_events(self) -> List[StateChange]:
        events, self._pending = self._pending, []
        return events

    # ------------------------------------------------------------------
    # Session flow
    # ------------------------------------------------------------------
    def start_session(self) -> None:
        self.clock.cancel()
        self.resolver.reset()
        get_selection(self.world).pending = None
        get_session(self.world).reset()
        self.grid.generate()
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        logger.info("session started on a %dx%d board", self.grid.rows, self.grid.cols)
        self.event_bus.emit(EVENT_SESSION_STARTED, rows=self.grid.rows, cols=self.grid.cols)

    def return_to_menu(self) -> None:
        """Abort the session immediately, discarding any in-progress resolution."""
        if get_game_state(self.world).mode != GameMode.PLAYING:
            return
        session = get_session(self.world)
        if session.score > session.high_score:
            session.high_score = session.score
        self.clock.cancel()
        self.resolver.reset()
        get_selection(self.world).pending = None
        set_game_mode(self.world, self.event_bus, GameMode.MENU)
        logger.info("session aborted with score %d (best %d)", session.score, session.high_score)
        self.event_bus.emit(EVENT_SESSION_ABORTED, score=session.score, high_score=session.high_score)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def is_input_enabled(self) -> bool:
        return self.validator.input_enabled()

    def select(self, row: int, col: int) -> bool:
        return self.validator.select(row, col)

    def request_swap(self, a: Position, b: Position) -> bool:
        return self.validator.request_swap(a, b)

    # ------------------------------------------------------------------
    # Frame stepping
    # ------------------------------------------------------------------
    def step(self, dt: float) -> List[StateChange]:
        """Advance animations by ``dt`` and return every state change since the last call."""
        if get_game_state(self.world).mode == GameMode.PLAYING:
            self.event_bus.emit(EVENT_TICK, dt=dt)
        return self.drain_events()

    def run_until_idle(self, dt: float = 1 / 60, max_steps: int = 10_000) -> List[StateChange]:
        """Step until the resolver is idle and nothing animates."""
        events: List[StateChange] = []
        for _ in range(max_steps):
            if self.phase == ResolverPhase.IDLE and not self.clock.is_animating():
                break
            events.extend(self.step(dt))
        else:
            raise RuntimeError(f"engine did not settle within {max_steps} steps")
        events.extend(self.drain_events())
        return events

    def snapshot(self) -> GridView:
        swap = self.clock.swap
        cells = []
        for r in range(self.grid.rows):
            row_views: List[Optional[GemView]] = []
            for c in range(self.grid.cols):
                gem = self.grid.get(r, c)
                if gem is None:
                    row_views.append(None)
                    continue
                visual_row = gem.visual_row
                visual_col = float(c)
                if swap is not None and (r, c) in (swap.src, swap.dst):
                    # The gem now at this slot travels from the other swap slot.
                    origin = swap.dst if (r, c) == swap.src else swap.src
                    p = swap.progress
                    visual_row = origin[0] + (r - origin[0]) * p
                    visual_col = origin[1] + (c - origin[1]) * p
                row_views.append(GemView(
                    type_name=gem.type_name,
                    row=r,
                    col=c,
                    visual_row=visual_row,
                    visual_col=visual_col,
                    scale=gem.scale,
                    matched=gem.matched,
                    falling=gem.falling,
                    just_spawned=gem.just_spawned,
                ))
            cells.append(tuple(row_views))
        session = get_session(self.world)
        return GridView(
            rows=self.grid.rows,
            cols=self.grid.cols,
            cells=tuple(cells),
            selection=get_selection(self.world).pending,
            phase=self.phase,
            mode=self.mode,
            score=session.score,
            combo=session.combo,
            max_combo=session.max_combo,
            move_count=session.move_count,
            high_score=session.high_score,
            swap_progress=swap.progress if swap is not None else None,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def phase(self) -> ResolverPhase:
        return get_resolver_state(self.world).phase

    @property
    def mode(self) -> GameMode:
        return get_game_state(self.world).mode

    @property
    def score(self) -> int:
        return get_session(self.world).score

    @property
    def combo(self) -> int:
        return get_session(self.world).combo

    @property
    def max_combo(self) -> int:
        return get_session(self.world).max_combo

    @property
    def move_count(self) -> int:
        return get_session(self.world).move_count

    @property
    def high_score(self) -> int:
        return get_session(self.world).high_score


def create_engine(
    config: EngineConfig | None = None,
    *,
    rng: random.Random | None = None,
    event_bus: EventBus | None = None,
    start: bool = True,
) -> MatchEngine:
    engine = MatchEngine(config, rng=rng, event_bus=event_bus)
    if start:
        engine.start_session()
        engine.drain_events()
    return engine
