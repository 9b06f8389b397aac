# evoql/sim/world.py
from __future__ import annotations
from typing import List, Optional, Tuple, Union

from .config import CONFIG, Config, check_config
from .creature import Creature
from .engine import FrameEvents, step_frame
from .genome import Genome, random_genome
from .perception import EntityView
from .plant import Plant
from .rng import RNG

Entity = Union[Plant, Creature]


class World:
    """
    Owns every entity, the shared RNG and the frame clock.
    Creatures only ever see the list through an EntityView.
    """
    def __init__(self, cfg: Config = CONFIG, rng: Optional[RNG] = None, seed: Optional[int] = None):
        check_config(cfg)
        self.cfg = cfg
        self.width = cfg.world.width
        self.height = cfg.world.height
        self.rng = rng if rng is not None else RNG(seed)
        self.entities: List[Entity] = []
        self.frame = 0
        self.elapsed = 0.0
        self._view = EntityView(self)

    @property
    def view(self) -> EntityView:
        return self._view

    # --- spawning ---
    def populate(self) -> None:
        """Initial founders + plants."""
        for _ in range(self.cfg.world.initial_creatures):
            self.spawn_random_creature()
        self.spawn_plants(self.cfg.world.initial_plants)

    def spawn_random_creature(self) -> Creature:
        m = self.cfg.world.spawn_margin
        g = random_genome(self.rng, self.cfg.traits)
        x = self.rng.uniform(m, self.width - m)
        y = self.rng.uniform(m, self.height - m)
        lo, hi = self.cfg.traits.init_color
        color = (self.rng.randint(lo, hi), self.rng.randint(lo, hi), self.rng.randint(lo, hi))
        return self.add_creature(g, x, y, color)

    def add_creature(self, genome: Genome, x: float, y: float,
                     color: Tuple[int, ...] = (180, 180, 180), **kwargs) -> Creature:
        c = Creature(genome, x, y, color, self.rng, view=self._view, cfg=self.cfg, **kwargs)
        self.entities.append(c)
        return c

    def add_plant(self, x: float, y: float) -> Plant:
        p = Plant(x, y, radius=self.cfg.world.plant_radius, color=self.cfg.world.plant_color)
        self.entities.append(p)
        return p

    def spawn_plants(self, n: int) -> List[Plant]:
        m = self.cfg.world.plant_margin
        out = []
        for _ in range(n):
            x = self.rng.uniform(m, self.width - m)
            y = self.rng.uniform(m, self.height - m)
            out.append(self.add_plant(x, y))
        return out

    # --- queries ---
    def creatures(self) -> List[Creature]:
        return [e for e in self.entities if e.kind == "creature" and e.alive]

    def plants(self) -> List[Plant]:
        return [e for e in self.entities if e.kind == "plant" and e.alive]

    def plant_count(self) -> int:
        return sum(1 for e in self.entities if e.kind == "plant" and e.alive)

    def creature_count(self) -> int:
        return sum(1 for e in self.entities if e.kind == "creature" and e.alive)

    def max_generation(self) -> int:
        return max((c.generation for c in self.creatures()), default=0)

    def mean_average_q(self) -> float:
        cs = self.creatures()
        return sum(c.average_q() for c in cs) / len(cs) if cs else 0.0

    def contains(self, x: float, y: float) -> bool:
        return 0.0 <= x <= self.width and 0.0 <= y <= self.height

    # --- stepping ---
    def step(self, dt: Optional[float] = None) -> FrameEvents:
        return step_frame(self, self.cfg.world.dt if dt is None else dt)
