import random

from esper import World
from gemcascade.events.bus import EventBus
from gemcascade.components.game_state import GameMode, GameState
from gemcascade.components.gem_type_registry import GemTypeRegistry
from gemcascade.components.gem_types import GemTypes
from gemcascade.components.resolver_state import ResolverState
from gemcascade.components.selection import Selection
from gemcascade.components.session import Session
from gemcascade.config import EngineConfig


def create_world(
    event_bus: EventBus,
    initial_mode: GameMode = GameMode.MENU,
    *,
    config: EngineConfig | None = None,
    rng: random.Random | None = None,
) -> World:
    """Create the world with its singleton resources; the grid itself is built by GridState."""
    config = (config or EngineConfig()).validate()
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "config", config)

    # Register the global game state and session resources.
    world.create_entity(GameState(mode=initial_mode), Session(), ResolverState(), Selection())

    # Create single registry entity with canonical types
    world.create_entity(
        GemTypeRegistry(),
        GemTypes(types=dict(config.gem_colors)),
    )
    return world
