# evoql/sim/perception.py
from __future__ import annotations
import weakref
from typing import TYPE_CHECKING, Iterator, Optional

from .rng import RNG

if TYPE_CHECKING:
    from .creature import Creature
    from .world import World

FOOD_BIT = 1
PREDATOR_BIT = 2

# used only when a creature has no view of the world
FALLBACK_FOOD_PROB = 0.08
FALLBACK_PREDATOR_PROB = 0.05


class EntityView:
    """
    Read-only, non-owning window onto a World's entity list.
    Holds a weak reference, so a creature never keeps its world alive.
    """
    def __init__(self, world: World):
        self._ref = weakref.ref(world)

    def is_live(self) -> bool:
        return self._ref() is not None

    def __iter__(self) -> Iterator:
        world = self._ref()
        if world is None:
            return iter(())
        return iter(world.entities)


def observe_state(me: Creature, view: Optional[EntityView], rng: RNG) -> int:
    """
    Encode surroundings as a 2-bit state:
      bit0: a plant, or a creature with lower attack, within sense range
      bit1: a creature with higher attack within sense range
    Equal attack counts as neither.
    """
    food_near = False
    predator_near = False

    if view is None or not view.is_live():
        food_near = rng.chance(FALLBACK_FOOD_PROB)
        predator_near = rng.chance(FALLBACK_PREDATOR_PROB)
    else:
        sr2 = me.genome.sense_range ** 2
        my_attack = me.genome.attack
        for e in view:
            if e is me or not e.alive:
                continue
            d2 = (e.x - me.x) ** 2 + (e.y - me.y) ** 2
            if d2 > sr2:
                continue
            if e.kind == "plant":
                food_near = True
            elif e.kind == "creature":
                other_attack = e.genome.attack
                if other_attack < my_attack:
                    food_near = True
                elif other_attack > my_attack:
                    predator_near = True
            if food_near and predator_near:
                break

    state = 0
    if food_near:
        state |= FOOD_BIT
    if predator_near:
        state |= PREDATOR_BIT
    return state
