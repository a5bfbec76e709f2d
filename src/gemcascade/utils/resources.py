"""Accessors for the singleton components created by ``create_world``."""
from __future__ import annotations

import random

from esper import World

from gemcascade.components.game_state import GameMode, GameState
from gemcascade.components.gem_type_registry import GemTypeRegistry
from gemcascade.components.gem_types import GemTypes
from gemcascade.components.resolver_state import ResolverState
from gemcascade.components.selection import Selection
from gemcascade.components.session import Session
from gemcascade.config import EngineConfig
from gemcascade.events.bus import EVENT_GAME_MODE_CHANGED, EventBus


def _get_or_create(world: World, component_type):
    existing = list(world.get_component(component_type))
    if existing:
        return existing[0][1]
    world.create_entity(component_type())
    return list(world.get_component(component_type))[0][1]


def get_session(world: World) -> Session:
    """Return the shared Session component, creating it if absent."""
    return _get_or_create(world, Session)


def get_resolver_state(world: World) -> ResolverState:
    return _get_or_create(world, ResolverState)


def get_selection(world: World) -> Selection:
    return _get_or_create(world, Selection)


def get_game_state(world: World) -> GameState:
    return _get_or_create(world, GameState)


def get_gem_registry(world: World) -> GemTypes:
    for entity, _ in world.get_component(GemTypeRegistry):
        return world.component_for_entity(entity, GemTypes)
    raise RuntimeError("GemTypes definitions not found")


def get_config(world: World) -> EngineConfig:
    config = getattr(world, "config", None)
    if isinstance(config, EngineConfig):
        return config
    config = EngineConfig()
    setattr(world, "config", config)
    return config


def get_rng(world: World) -> random.Random:
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode) -> None:
    """Update the global game mode and emit a change event when it differs."""
    state = get_game_state(world)
    previous_mode = state.mode
    if previous_mode == mode:
        return
    state.mode = mode
    event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous_mode, new_mode=mode)
