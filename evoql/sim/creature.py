# evoql/sim/creature.py
from __future__ import annotations
import math
from typing import Optional, Tuple

from .config import CONFIG, Config
from .genome import Genome, crossover_and_mutate, species_label
from .perception import EntityView, observe_state
from .policy import FORWARD, TURN_LEFT, TURN_RIGHT, QPolicy
from .rng import RNG

Color = Tuple[int, int, int, int]

TURN_RATE_DEG = 90.0  # degrees per second for left/right actions

def _clamp_channel(v: int) -> int:
    return min(max(int(v), 0), 255)


class Creature:
    """
    Mobile agent: genome + Q-policy + energy budget.

    Compared by identity. Holds a non-owning EntityView for perception and
    the world's shared RNG for every draw it makes.
    """
    kind = "creature"

    def __init__(
        self,
        genome: Genome,
        x: float,
        y: float,
        color: Tuple[int, ...],
        rng: RNG,
        view: Optional[EntityView] = None,
        generation: int = 0,
        heading: Optional[float] = None,
        energy: Optional[float] = None,
        cfg: Config = CONFIG,
    ):
        self.cfg = cfg
        self.genome = genome
        self.generation = generation
        self.x = x
        self.y = y
        self.rng = rng
        self.view = view
        self.heading = rng.uniform(0.0, 360.0) if heading is None else heading
        self.alive = True
        self.energy = cfg.energy.initial if energy is None else energy
        self.cooldown = 0.0
        self.lifetime = 0.0
        self.offspring_count = 0
        self.radius = cfg.world.creature_radius
        r, g, b = color[:3]
        self.color: Color = (r, g, b, cfg.repro.alpha)
        self.policy = QPolicy(cfg.learning)

    def __repr__(self):
        state = "alive" if self.alive else "dead"
        return (f"Creature(gen={self.generation}, pos=({self.x:.1f},{self.y:.1f}), "
                f"energy={self.energy:.2f}, {state})")

    # ---------------- learning ----------------
    def observe(self) -> int:
        return observe_state(self, self.view, self.rng)

    def update_q(self, reward: float) -> None:
        self.policy.update(reward, self.observe())

    def _terminal_reward(self, base: float) -> float:
        rw = self.cfg.reward
        return base + rw.per_offspring * self.offspring_count + rw.per_second * self.lifetime

    def _starve(self, carried_reward: float = 0.0) -> None:
        self.alive = False
        self.update_q(carried_reward + self._terminal_reward(self.cfg.reward.starved))

    # ---------------- per-frame ----------------
    def step(self, dt: float) -> None:
        if not self.alive:
            return

        self.lifetime += dt
        reward = self.cfg.reward.step

        self.energy -= self.cfg.energy.drain_per_sec * dt
        if self.energy <= 0.0:
            # last learning event for this creature
            self._starve(carried_reward=reward)
            return

        self.update_q(reward)

        pol = self.policy
        pol.last_state = self.observe()
        pol.last_action = pol.select_action(pol.last_state, self.rng)
        self._perform(pol.last_action, dt)
        self._bounce()

        if self.cooldown > 0.0:
            self.cooldown -= dt

    def _perform(self, action: int, dt: float) -> None:
        if action == FORWARD:
            rad = math.radians(self.heading)
            self.x += math.cos(rad) * self.genome.speed * dt
            self.y += math.sin(rad) * self.genome.speed * dt
        elif action == TURN_LEFT:
            self.heading -= TURN_RATE_DEG * dt
        elif action == TURN_RIGHT:
            self.heading += TURN_RATE_DEG * dt
        # STOP: nothing

    def _bounce(self) -> None:
        """Clamp into the world rect; flip heading once per clamped axis."""
        w, h = self.cfg.world.width, self.cfg.world.height
        if self.x < 0.0:
            self.x = 0.0
            self.heading += 180.0
        elif self.x > w:
            self.x = w
            self.heading += 180.0
        if self.y < 0.0:
            self.y = 0.0
            self.heading += 180.0
        elif self.y > h:
            self.y = h
            self.heading += 180.0
        self.heading %= 360.0

    # ---------------- interactions ----------------
    def add_energy(self, amount: float) -> None:
        self.energy += amount
        if self.alive and self.energy <= 0.0:
            self._starve()

    def on_eaten(self) -> None:
        self.alive = False
        self.update_q(self._terminal_reward(self.cfg.reward.eaten))

    def can_reproduce(self) -> bool:
        return self.energy > self.cfg.repro.threshold and self.cooldown <= 0.0

    def reset_cooldown(self) -> None:
        self.cooldown = self.cfg.repro.cooldown

    def reproduce_with(self, other: Creature) -> Creature:
        """
        Spawn one child at this creature's position. This parent pays the
        child's energy; the partner's energy is untouched. Cooldowns are the
        caller's job.
        """
        rp = self.cfg.repro
        child_energy = self.energy * rp.child_share
        self.energy *= (1.0 - rp.child_share)

        genome = crossover_and_mutate(self.genome, other.genome, self.rng,
                                      self.cfg.mutation, self.cfg.traits)

        j = rp.color_jitter
        color = tuple(
            _clamp_channel((c1 + c2) // 2 + self.rng.randint(-j, j))
            for c1, c2 in zip(self.color[:3], other.color[:3])
        )

        child = Creature(
            genome, self.x, self.y, color, self.rng, view=self.view,
            generation=max(self.generation, other.generation) + 1,
            energy=child_energy, cfg=self.cfg,
        )
        child.policy.inherit(self.policy, other.policy, self.rng)

        self.offspring_count += 1
        if other is not self:
            other.offspring_count += 1
        return child

    # ---------------- read-outs ----------------
    def average_q(self) -> float:
        return self.policy.average_q()

    def species_label(self) -> str:
        return species_label(self.genome)
