# evoql/sim/genome.py
from __future__ import annotations
from dataclasses import dataclass, replace

from .config import MUTATION, TRAITS, MutationConfig, TraitConfig
from .rng import RNG

@dataclass(frozen=True)
class Genome:
    speed: float
    attack: float
    poison: bool
    legs: int
    sense_range: float
    poison_resistance: float

def _clamp(val: float, min_v: float, max_v: float) -> float:
    return min(max(val, min_v), max_v)

def clamp_genome(g: Genome, traits: TraitConfig = TRAITS) -> Genome:
    return replace(
        g,
        speed=_clamp(g.speed, traits.min_speed, traits.max_speed),
        attack=_clamp(g.attack, traits.min_attack, traits.max_attack),
        legs=max(int(g.legs), traits.min_legs),
        sense_range=_clamp(g.sense_range, traits.min_sense, traits.max_sense),
        poison_resistance=_clamp(g.poison_resistance, traits.min_resistance, traits.max_resistance),
    )

def random_genome(rng: RNG, traits: TraitConfig = TRAITS) -> Genome:
    """Founder genome drawn from the initial ranges."""
    return clamp_genome(Genome(
        speed=rng.uniform(*traits.init_speed),
        attack=rng.uniform(*traits.init_attack),
        poison=rng.chance(traits.init_poison_prob),
        legs=rng.randint(*traits.init_legs),
        sense_range=rng.uniform(*traits.init_sense),
        poison_resistance=rng.uniform(*traits.init_resistance),
    ), traits)

def crossover_and_mutate(
    g1: Genome,
    g2: Genome,
    rng: RNG,
    mutation: MutationConfig = MUTATION,
    traits: TraitConfig = TRAITS,
) -> Genome:
    """
    Uniform crossover (each field from either parent, 50/50), then independent
    per-field mutation draws, then a hard clamp into the trait bounds.
    Draw order is fixed so a seeded RNG reproduces the same child.
    """
    speed = g1.speed if rng.coin() else g2.speed
    attack = g1.attack if rng.coin() else g2.attack
    poison = g1.poison if rng.coin() else g2.poison
    legs = g1.legs if rng.coin() else g2.legs
    sense = g1.sense_range if rng.coin() else g2.sense_range
    resist = g1.poison_resistance if rng.coin() else g2.poison_resistance

    if rng.chance(mutation.speed_prob):
        speed += rng.uniform(-mutation.speed_delta, mutation.speed_delta)
    if rng.chance(mutation.attack_prob):
        attack += rng.uniform(-mutation.attack_delta, mutation.attack_delta)
    if rng.chance(mutation.sense_prob):
        sense += rng.uniform(-mutation.sense_delta, mutation.sense_delta)
    if rng.chance(mutation.legs_prob):
        legs = max(legs + rng.randint(-1, 1), traits.min_legs)
    if rng.chance(mutation.poison_prob):
        poison = not poison
    if rng.chance(mutation.resistance_prob):
        resist += rng.uniform(-mutation.resistance_delta, mutation.resistance_delta)

    return clamp_genome(Genome(
        speed=speed, attack=attack, poison=poison, legs=legs,
        sense_range=sense, poison_resistance=resist,
    ), traits)

def in_bounds(g: Genome, traits: TraitConfig = TRAITS) -> bool:
    return (traits.min_speed <= g.speed <= traits.max_speed
            and traits.min_attack <= g.attack <= traits.max_attack
            and g.legs >= traits.min_legs
            and traits.min_sense <= g.sense_range <= traits.max_sense
            and traits.min_resistance <= g.poison_resistance <= traits.max_resistance)

def species_label(g: Genome) -> str:
    """Coarse bucket name, e.g. Mid_MedAtk_Poison_Leg3_MidRes."""
    if g.speed < 60.0:
        speed_cat = "Slow"
    elif g.speed < 120.0:
        speed_cat = "Mid"
    else:
        speed_cat = "Fast"

    if g.attack < 10.0:
        attack_cat = "LowAtk"
    elif g.attack < 30.0:
        attack_cat = "MedAtk"
    else:
        attack_cat = "HighAtk"

    poison_cat = "Poison" if g.poison else "NonPois"

    if g.poison_resistance < 0.33:
        res_cat = "LowRes"
    elif g.poison_resistance < 0.66:
        res_cat = "MidRes"
    else:
        res_cat = "HighRes"

    return f"{speed_cat}_{attack_cat}_{poison_cat}_Leg{g.legs}_{res_cat}"
