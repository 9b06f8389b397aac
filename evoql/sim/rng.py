# evoql/sim/rng.py
import random
from typing import Optional

class RNG:
    """Single shared random source; one instance per World, passed to whoever draws."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def uniform(self, a: float, b: float) -> float:
        return self._rng.uniform(a, b)

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def chance(self, p: float) -> bool:
        return self.random() < p

    def coin(self) -> bool:
        return self.random() < 0.5
