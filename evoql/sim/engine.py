# evoql/sim/engine.py
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, List
import math

from .creature import Creature

if TYPE_CHECKING:
    from .world import World

@dataclass
class FrameEvents:
    """What happened during one frame (for logging / tests)."""
    frame: int = 0
    plants_eaten: int = 0
    kills: int = 0
    poisonings: int = 0
    births: int = 0
    partnered_births: int = 0
    starved: int = 0
    reaped: int = 0
    plants_added: int = 0

def _overlaps(a, b) -> bool:
    return math.hypot(a.x - b.x, a.y - b.y) < (a.radius + b.radius)

# ------------------------------------------------------------
# (a) advance
# ------------------------------------------------------------
def advance(world: World, dt: float, ev: FrameEvents) -> None:
    for e in world.entities:
        was_alive = e.alive
        e.step(dt)
        if was_alive and not e.alive:
            ev.starved += 1

# ------------------------------------------------------------
# (b) contact: feeding + predation
# ------------------------------------------------------------
def _devour(winner: Creature, prey: Creature, world: World, ev: FrameEvents) -> None:
    en, rw = world.cfg.energy, world.cfg.reward
    prey.on_eaten()
    ev.kills += 1
    winner.add_energy(en.prey_gain)
    winner.update_q(rw.kill)
    if prey.genome.poison:
        ev.poisonings += 1
        winner.add_energy(-en.poison_damage * (1.0 - winner.genome.poison_resistance))
        if not winner.alive:
            ev.starved += 1

def resolve_contact(c1: Creature, e2, world: World, ev: FrameEvents) -> None:
    """Apply the outcome of creature `c1` touching `e2` (both alive, overlapping)."""
    if e2.kind == "plant":
        e2.on_eaten()
        ev.plants_eaten += 1
        c1.add_energy(world.cfg.energy.plant_gain)
        c1.update_q(world.cfg.reward.plant)
        return

    a1, a2 = c1.genome.attack, e2.genome.attack
    if a1 > a2:
        _devour(c1, e2, world, ev)
    elif a1 < a2:
        _devour(e2, c1, world, ev)
    # equal attack: nothing happens

def interaction_pass(world: World, ev: FrameEvents) -> None:
    """
    Ordered-pair sweep over (creature, any entity). Both orderings are
    visited, but a consumed entity is dead for every later pair, so the
    weaker of two creatures is eaten at most once.
    """
    ents = world.entities
    for e1 in ents:
        if e1.kind != "creature" or not e1.alive:
            continue
        for e2 in ents:
            if not e1.alive:
                break
            if e2 is e1 or not e2.alive:
                continue
            if _overlaps(e1, e2):
                resolve_contact(e1, e2, world, ev)

# ------------------------------------------------------------
# (c) reproduction
# ------------------------------------------------------------
def reproduction_pass(world: World, ev: FrameEvents) -> List[Creature]:
    """Returns the children; the caller appends them after the pass."""
    p_accept = world.cfg.repro.partner_prob
    children: List[Creature] = []
    for c in world.entities:
        if c.kind != "creature" or not c.alive or not c.can_reproduce():
            continue

        partner = None
        for o in world.entities:
            if o is c or o.kind != "creature" or not o.alive:
                continue
            if o.can_reproduce() and world.rng.chance(p_accept):
                partner = o
                break

        if partner is not None:
            children.append(c.reproduce_with(partner))
            partner.reset_cooldown()
            ev.partnered_births += 1
        else:
            children.append(c.reproduce_with(c))  # self-pollination
        c.reset_cooldown()
        ev.births += 1
    return children

# ------------------------------------------------------------
# (d) reap / (e) refill
# ------------------------------------------------------------
def reap(world: World, ev: FrameEvents) -> None:
    before = len(world.entities)
    # in place, so the list object seen through EntityView never changes
    world.entities[:] = [e for e in world.entities if e.alive]
    ev.reaped = before - len(world.entities)

def refill_plants(world: World, ev: FrameEvents) -> None:
    wc = world.cfg.world
    if world.plant_count() < wc.refill_trigger:
        world.spawn_plants(wc.refill_batch)
        ev.plants_added = wc.refill_batch

# ------------------------------------------------------------
# full frame
# ------------------------------------------------------------
def step_frame(world: World, dt: float) -> FrameEvents:
    ev = FrameEvents(frame=world.frame + 1)
    advance(world, dt, ev)
    interaction_pass(world, ev)
    children = reproduction_pass(world, ev)
    world.entities.extend(children)
    reap(world, ev)
    refill_plants(world, ev)
    world.frame += 1
    world.elapsed += dt
    return ev
