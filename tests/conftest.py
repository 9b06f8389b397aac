import sys
import os
from dataclasses import replace

import pytest

# Make the repo root importable when running pytest without an install
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from evoql.sim.config import CONFIG
from evoql.sim.genome import Genome
from evoql.sim.rng import RNG
from evoql.sim.world import World


def tuned(cfg=CONFIG, **sections):
    """Copy of cfg with per-section overrides, e.g. tuned(learning=dict(epsilon=0.0))."""
    return replace(cfg, **{name: replace(getattr(cfg, name), **kw) for name, kw in sections.items()})


NO_MUTATION = dict(speed_prob=0.0, attack_prob=0.0, sense_prob=0.0,
                   legs_prob=0.0, poison_prob=0.0, resistance_prob=0.0)

# no exploration, no mutation, empty world that never refills
QUIET = tuned(
    world=dict(initial_creatures=0, initial_plants=0, refill_trigger=0),
    learning=dict(epsilon=0.0),
    mutation=NO_MUTATION,
)

# same, but creatures never become eligible to reproduce
NO_REPRO = tuned(QUIET, repro=dict(threshold=1e9))


class ScriptedRNG(RNG):
    """RNG whose random() replays a fixed list (then falls back to the seeded stream)."""
    def __init__(self, values, seed=0):
        super().__init__(seed)
        self.values = list(values)

    def random(self):
        if self.values:
            return self.values.pop(0)
        return super().random()


def genome(speed=50.0, attack=5.0, poison=False, legs=2, sense_range=100.0, poison_resistance=0.0):
    return Genome(speed=speed, attack=attack, poison=poison, legs=legs,
                  sense_range=sense_range, poison_resistance=poison_resistance)


@pytest.fixture
def rng():
    return RNG(1234)

@pytest.fixture
def quiet_world():
    return World(QUIET, seed=7)

@pytest.fixture
def still_world():
    return World(NO_REPRO, seed=7)

@pytest.fixture
def record_rewards():
    """Wrap creature.update_q so every reward it receives is recorded."""
    def _wrap(creature):
        calls = []
        original = creature.update_q
        def spy(reward):
            calls.append(reward)
            original(reward)
        creature.update_q = spy
        return calls
    return _wrap
