from esper import World

from gemcascade.events.bus import EventBus, EVENT_SCORE_CHANGED
from gemcascade.utils.resources import get_config, get_session


class ScoreTracker:
    """Accumulates points for removed gems scaled by combo depth."""

    def __init__(self, world: World, event_bus: EventBus, base_points: int | None = None):
        self.world = world
        self.event_bus = event_bus
        self.base_points = base_points if base_points is not None else get_config(world).base_points

    @property
    def score(self) -> int:
        return get_session(self.world).score

    @property
    def max_combo(self) -> int:
        return get_session(self.world).max_combo

    def points_for(self, gem_count: int, combo_depth: int) -> int:
        return self.base_points * combo_depth * gem_count

    def award(self, gem_count: int, combo_depth: int) -> int:
        if gem_count < 0 or combo_depth < 0:
            raise ValueError(f"award needs non-negative inputs, got {gem_count=} {combo_depth=}")
        delta = self.points_for(gem_count, combo_depth)
        session = get_session(self.world)
        session.score += delta
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=delta, combo_depth=combo_depth)
        return delta

    def record_combo(self, combo_depth: int) -> None:
        session = get_session(self.world)
        if combo_depth > session.max_combo:
            session.max_combo = combo_depth
