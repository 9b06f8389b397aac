# evoql/sim/plant.py
from dataclasses import dataclass
from typing import Tuple

from .config import WORLD

@dataclass(eq=False)  # identity semantics: two plants at one spot are still two plants
class Plant:
    x: float
    y: float
    radius: float = WORLD.plant_radius
    color: Tuple[int, int, int, int] = WORLD.plant_color
    alive: bool = True

    kind = "plant"

    def step(self, dt: float) -> None:
        pass

    def on_eaten(self) -> None:
        self.alive = False
