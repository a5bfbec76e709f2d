import logging
from typing import List, Tuple

from esper import World

from gemcascade.components.resolver_state import ResolverPhase, ResolverState
from gemcascade.events.bus import (EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_COMMITTED,
                                   EVENT_MATCH_FOUND, EVENT_GEM_REMOVED, EVENT_MATCH_CLEARED,
                                   EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED, EVENT_CASCADE_STEP,
                                   EVENT_CASCADE_COMPLETE, EVENT_ANIMATION_COMPLETE, EVENT_PHASE_CHANGED,
                                   EVENT_BOARD_RESHUFFLED)
from gemcascade.systems.animation import AnimationClock
from gemcascade.systems.board_ops import find_valid_swaps
from gemcascade.systems.grid import GridState
from gemcascade.systems.match import MatchDetector
from gemcascade.systems.score import ScoreTracker
from gemcascade.systems.swap import SwapValidator
from gemcascade.utils.resources import get_config, get_resolver_state, get_session

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class CascadeResolver:
    """Drives Idle -> Swapping -> Evaluating -> Resolving -> Falling -> Evaluating ... -> Idle.

    All grid mutation for a step (remove, compact, refill) happens synchronously inside
    one handler; only the visual interpolation spans frames. Detection runs only once
    the clock reports nothing in flight.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        grid: GridState,
        detector: MatchDetector,
        validator: SwapValidator,
        score: ScoreTracker,
        clock: AnimationClock,
    ):
        self.world = world
        self.event_bus = event_bus
        self.grid = grid
        self.detector = detector
        self.validator = validator
        self.score = score
        self.clock = clock
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)

    @property
    def state(self) -> ResolverState:
        return get_resolver_state(self.world)

    @property
    def phase(self) -> ResolverPhase:
        return self.state.phase

    def _set_phase(self, phase: ResolverPhase) -> None:
        state = self.state
        previous = state.phase
        if previous == phase:
            return
        state.phase = phase
        logger.debug("phase %s -> %s (depth=%d)", previous.value, phase.value, state.combo_depth)
        self.event_bus.emit(EVENT_PHASE_CHANGED, previous=previous, phase=phase)

    def reset(self) -> None:
        """Discard in-progress resolution; the grid is consistent at every phase boundary."""
        state = self.state
        state.combo_depth = 0
        state.iterations = 0
        state.swap_src = None
        state.swap_dst = None
        self.grid.clear_matched()
        get_session(self.world).combo = 0
        self._set_phase(ResolverPhase.IDLE)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        state = self.state
        assert state.phase == ResolverPhase.IDLE, f"swap requested while {state.phase.value}"
        state.swap_src = src
        state.swap_dst = dst
        state.combo_depth = 0
        state.iterations = 0
        self._set_phase(ResolverPhase.SWAPPING)

    def on_animation_complete(self, sender, **kwargs):
        kind = kwargs.get('kind')
        if kind == 'swap' and self.phase == ResolverPhase.SWAPPING:
            self._evaluate()
        elif kind == 'fall' and self.phase == ResolverPhase.FALLING:
            self._evaluate()

    def _evaluate(self) -> None:
        assert not self.clock.is_animating(), "match detection requires a settled board"
        state = self.state
        self._set_phase(ResolverPhase.EVALUATING)
        found = self.detector.mark()
        if not found:
            if state.combo_depth == 0:
                self._revert_swap()
            else:
                self._finish_cascade()
            return
        if state.combo_depth == 0 and state.swap_src is not None:
            self.event_bus.emit(EVENT_TILE_SWAP_COMMITTED, src=state.swap_src, dst=state.swap_dst)
        state.combo_depth += 1
        get_session(self.world).combo = state.combo_depth
        self._resolve()

    def _revert_swap(self) -> None:
        state = self.state
        if state.swap_src is not None and state.swap_dst is not None:
            self.validator.revert(state.swap_src, state.swap_dst)
        state.swap_src = None
        state.swap_dst = None
        get_session(self.world).combo = 0
        self._set_phase(ResolverPhase.IDLE)

    def _resolve(self) -> None:
        state = self.state
        depth = state.combo_depth
        state.iterations += 1
        self._set_phase(ResolverPhase.RESOLVING)
        positions = sorted(self.grid.matched_positions())
        self.event_bus.emit(
            EVENT_MATCH_FOUND,
            positions=positions,
            runs=[list(run) for run in self.detector.last_runs],
            depth=depth,
        )
        points = self.score.points_for(1, depth)
        typed: List[Tuple[int, int, str]] = []
        for row, col in positions:
            gem = self.grid.get(row, col)
            assert gem is not None and gem.matched
            assert not gem.falling, f"cell {(row, col)} both matched and falling"
            self.event_bus.emit(
                EVENT_GEM_REMOVED,
                gem_type=gem.type_name,
                cell=(row, col),
                combo_depth=depth,
                points=points,
            )
            typed.append((row, col, gem.type_name))
            self.grid.remove(row, col)
        delta = self.score.award(len(positions), depth)
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, types=typed)
        moves = self.grid.apply_gravity()
        self.event_bus.emit(
            EVENT_GRAVITY_APPLIED,
            moves=[{'from': m.source, 'to': m.target, 'type_name': m.type_name} for m in moves],
            columns=sorted({m.source[1] for m in moves}),
        )
        new_tiles = self.grid.refill()
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
        logger.debug("cascade step depth=%d removed=%d fell=%d spawned=%d",
                     depth, len(positions), len(moves), len(new_tiles))
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=positions, score_delta=delta)
        self._set_phase(ResolverPhase.FALLING)
        if self.grid.has_falling():
            self.clock.start_fall()
        else:
            self._evaluate()

    def _finish_cascade(self) -> None:
        state = self.state
        depth = state.combo_depth
        session = get_session(self.world)
        self.score.record_combo(depth)
        session.move_count += 1
        session.combo = 0
        state.combo_depth = 0
        state.swap_src = None
        state.swap_dst = None
        logger.info("cascade complete depth=%d iterations=%d score=%d", depth, state.iterations, session.score)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth, move_count=session.move_count)
        self._reshuffle_if_stalemate()
        self._set_phase(ResolverPhase.IDLE)

    def _reshuffle_if_stalemate(self) -> None:
        config = get_config(self.world)
        if not config.reshuffle_on_stalemate:
            return
        if find_valid_swaps(self.grid.type_map(), self.grid.rows, self.grid.cols, config.min_run):
            return
        logger.info("no legal swaps left; reshuffling board")
        self.grid.generate()
        self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason='stalemate')
