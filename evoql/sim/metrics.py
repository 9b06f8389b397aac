# evoql/sim/metrics.py
from __future__ import annotations
from collections import Counter
from typing import Dict, Iterable

from .world import World

def species_histogram(entities: Iterable) -> Counter:
    return Counter(e.species_label() for e in entities if e.kind == "creature" and e.alive)

def summarize_frame(world: World) -> Dict[str, float]:
    pop = world.creatures()
    n = len(pop)
    d = max(n, 1)
    return dict(
        frame=world.frame,
        time=round(world.elapsed, 4),
        creatures=n,
        plants=world.plant_count(),
        max_gen=world.max_generation(),
        avg_q=world.mean_average_q(),
        avg_energy=sum(c.energy for c in pop) / d,
        avg_speed=sum(c.genome.speed for c in pop) / d,
        avg_attack=sum(c.genome.attack for c in pop) / d,
        avg_sense=sum(c.genome.sense_range for c in pop) / d,
        avg_legs=sum(c.genome.legs for c in pop) / d,
        avg_resistance=sum(c.genome.poison_resistance for c in pop) / d,
        poison_frac=sum(1 for c in pop if c.genome.poison) / d,
    )
