import logging
from typing import Optional, Tuple

from esper import World

from gemcascade.components.animation_swap import SwapAnimation

logger = logging.getLogger(__name__)


class AnimationFactory:
    """Creates and disposes of the short-lived entities that carry tween state."""

    def __init__(self, world: World):
        self.world = world

    def create_swap(self, src: Tuple[int, int], dst: Tuple[int, int], duration: float) -> int:
        return self.world.create_entity(SwapAnimation(src=src, dst=dst, duration=duration))

    def swap_for(self, entity: Optional[int]) -> Optional[SwapAnimation]:
        if entity is None or not self.world.entity_exists(entity):
            return None
        try:
            return self.world.component_for_entity(entity, SwapAnimation)
        except KeyError:
            return None

    def dispose(self, entity: Optional[int]) -> None:
        if entity is None:
            return
        if not self.world.entity_exists(entity):
            logger.debug("animation entity %s already gone", entity)
            return
        self.world.delete_entity(entity, immediate=True)
