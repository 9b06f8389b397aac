# evoql/sim/policy.py
from __future__ import annotations
import math
import sys

import numpy as np

from .config import LEARN, LearningConfig
from .rng import RNG

NUM_STATES = 4   # bit0 = food sensed, bit1 = predator sensed
NUM_ACTIONS = 4

FORWARD, TURN_LEFT, TURN_RIGHT, STOP = range(NUM_ACTIONS)


class QPolicy:
    """
    Tabular epsilon-greedy Q-learner over the 4 perception states x 4 actions.
    `last_state` / `last_action` hold the previous step's (s, a), which the
    next update credits.
    """
    def __init__(self, cfg: LearningConfig = LEARN):
        self.cfg = cfg
        self.q = np.zeros((NUM_STATES, NUM_ACTIONS), dtype=np.float64)
        self.last_state = 0
        self.last_action = FORWARD

    def select_action(self, state: int, rng: RNG) -> int:
        if rng.random() < self.cfg.epsilon:
            return rng.randint(0, NUM_ACTIONS - 1)
        # np.argmax returns the first maximum -> ties go to the lowest action index
        return int(np.argmax(self.q[state]))

    def update(self, reward: float, next_state: int) -> float:
        """One-step TD update of Q[last_state, last_action]; returns the new value."""
        s, a = self.last_state, self.last_action
        best_next = float(np.max(self.q[next_state]))
        old = float(self.q[s, a])
        new = old + self.cfg.alpha * (reward + self.cfg.gamma * best_next - old)
        if not math.isfinite(new):
            print(f"[QPolicy] non-finite Q[{s}][{a}] ({new}) after reward={reward}; snapped to 0",
                  file=sys.stderr)
            new = 0.0
        elif self.cfg.clamp_runtime:
            new = min(max(new, -self.cfg.q_clamp), self.cfg.q_clamp)
        self.q[s, a] = new
        return new

    def inherit(self, p1: QPolicy, p2: QPolicy, rng: RNG) -> None:
        """Parents' mean plus small uniform jitter, clamped to +/- q_clamp."""
        j = self.cfg.inherit_jitter
        lim = self.cfg.q_clamp
        for s in range(NUM_STATES):
            for a in range(NUM_ACTIONS):
                val = 0.5 * (p1.q[s, a] + p2.q[s, a]) + rng.uniform(-j, j)
                self.q[s, a] = min(max(val, -lim), lim)

    def average_q(self) -> float:
        return float(self.q.mean())
