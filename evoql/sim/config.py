# evoql/sim/config.py
from dataclasses import dataclass, field
from typing import Optional, Tuple

# ------------------------------------------------------------
# WORLD / SPATIAL SETTINGS
# ------------------------------------------------------------
@dataclass(frozen=True)
class WorldConfig:
    width: float = 800.0
    height: float = 600.0
    dt: float = 1.0 / 60.0
    initial_creatures: int = 8
    initial_plants: int = 30
    # plants are topped up by `refill_batch` whenever fewer than `refill_trigger` remain
    refill_trigger: int = 15
    refill_batch: int = 5
    plant_margin: float = 50.0
    spawn_margin: float = 100.0
    plant_radius: float = 10.0
    creature_radius: float = 15.0
    plant_color: Tuple[int, int, int, int] = (120, 200, 120, 255)

# ------------------------------------------------------------
# ENERGY BUDGET
# ------------------------------------------------------------
@dataclass(frozen=True)
class EnergyConfig:
    initial: float = 60.0
    drain_per_sec: float = 0.4
    plant_gain: float = 15.0
    prey_gain: float = 25.0     # same for attacker and defender winners
    poison_damage: float = 12.0

# ------------------------------------------------------------
# REPRODUCTION
# ------------------------------------------------------------
@dataclass(frozen=True)
class ReproConfig:
    threshold: float = 50.0
    cooldown: float = 5.0
    child_share: float = 0.6
    partner_prob: float = 0.20
    color_jitter: int = 5
    alpha: int = 180

# ------------------------------------------------------------
# Q-LEARNING
# ------------------------------------------------------------
@dataclass(frozen=True)
class LearningConfig:
    epsilon: float = 0.2
    alpha: float = 0.1
    gamma: float = 0.9
    inherit_jitter: float = 0.1
    q_clamp: float = 50.0
    clamp_runtime: bool = False  # inherited entries are always clamped

# ------------------------------------------------------------
# REWARD SHAPE
# ------------------------------------------------------------
@dataclass(frozen=True)
class RewardConfig:
    step: float = -0.002
    starved: float = -10.0
    eaten: float = -40.0
    per_offspring: float = 5.0
    per_second: float = 0.1
    plant: float = 5.0
    kill: float = 10.0

# ------------------------------------------------------------
# MUTATION (probability, +/- delta)
# ------------------------------------------------------------
@dataclass(frozen=True)
class MutationConfig:
    speed_prob: float = 0.10
    speed_delta: float = 0.5
    attack_prob: float = 0.10
    attack_delta: float = 1.0
    sense_prob: float = 0.10
    sense_delta: float = 20.0
    legs_prob: float = 0.05
    poison_prob: float = 0.05
    resistance_prob: float = 0.10
    resistance_delta: float = 0.2

# ------------------------------------------------------------
# TRAIT BOUNDS + INITIAL DRAW RANGES
# ------------------------------------------------------------
@dataclass(frozen=True)
class TraitConfig:
    min_speed: float = 10.0
    max_speed: float = 200.0
    min_attack: float = 0.0
    max_attack: float = 50.0
    min_sense: float = 20.0
    max_sense: float = 300.0
    min_resistance: float = 0.0
    max_resistance: float = 1.0
    min_legs: int = 1
    # founders
    init_speed: Tuple[float, float] = (30.0, 70.0)
    init_attack: Tuple[float, float] = (0.0, 5.0)
    init_poison_prob: float = 0.30
    init_legs: Tuple[int, int] = (1, 4)
    init_sense: Tuple[float, float] = (50.0, 150.0)
    init_resistance: Tuple[float, float] = (0.0, 1.0)
    init_color: Tuple[int, int] = (100, 255)

# ------------------------------------------------------------
# HEADLESS SETTINGS
# ------------------------------------------------------------
@dataclass(frozen=True)
class SimConfig:
    seed: int = 42
    frames: int = 3600
    log_every: int = 300
    track_csv: Optional[str] = "runs/run_summary.csv"
    species_csv: Optional[str] = "runs/run_species.csv"
    enable_plot: bool = False

# ------------------------------------------------------------
# WINDOW
# ------------------------------------------------------------
@dataclass(frozen=True)
class UIConfig:
    width: int = 800
    height: int = 600
    fps_cap: int = 60
    max_dt: float = 0.25
    font_path: Optional[str] = None   # None -> pygame default font
    font_size: int = 14
    log_every: int = 600

@dataclass(frozen=True)
class Config:
    world: WorldConfig = field(default_factory=WorldConfig)
    energy: EnergyConfig = field(default_factory=EnergyConfig)
    repro: ReproConfig = field(default_factory=ReproConfig)
    learning: LearningConfig = field(default_factory=LearningConfig)
    reward: RewardConfig = field(default_factory=RewardConfig)
    mutation: MutationConfig = field(default_factory=MutationConfig)
    traits: TraitConfig = field(default_factory=TraitConfig)
    sim: SimConfig = field(default_factory=SimConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _require(ok: bool, msg: str) -> None:
    if not ok:
        raise ValueError(f"invalid config: {msg}")

def _is_prob(p: float) -> bool:
    return 0.0 <= p <= 1.0

def check_config(cfg: Config) -> None:
    """Raise ValueError if any tunable is outside the range the stepper can honour."""
    w, t, m = cfg.world, cfg.traits, cfg.mutation
    _require(w.width > 0 and w.height > 0, "world dimensions must be positive")
    _require(w.dt > 0, "dt must be positive")
    _require(w.initial_creatures >= 0 and w.initial_plants >= 0, "initial counts must be >= 0")
    _require(w.refill_trigger >= 0 and w.refill_batch >= 0, "refill counts must be >= 0")
    _require(0 <= w.plant_margin <= min(w.width, w.height) / 2, "plant_margin exceeds half the world")
    _require(0 <= w.spawn_margin <= min(w.width, w.height) / 2, "spawn_margin exceeds half the world")
    _require(w.plant_radius > 0 and w.creature_radius > 0, "radii must be positive")

    _require(cfg.energy.initial > 0, "initial energy must be positive")
    _require(cfg.energy.drain_per_sec >= 0, "drain must be >= 0")

    _require(0 < cfg.repro.child_share < 1, "child_share must be in (0, 1)")
    _require(_is_prob(cfg.repro.partner_prob), "partner_prob must be a probability")
    _require(0 <= cfg.repro.alpha <= 255, "repro alpha must be 0..255")

    lr = cfg.learning
    _require(_is_prob(lr.epsilon), "epsilon must be a probability")
    _require(0 < lr.alpha <= 1, "alpha must be in (0, 1]")
    _require(0 <= lr.gamma < 1, "gamma must be in [0, 1)")
    _require(lr.q_clamp > 0, "q_clamp must be positive")

    for name in ("speed_prob", "attack_prob", "sense_prob", "legs_prob", "poison_prob", "resistance_prob"):
        _require(_is_prob(getattr(m, name)), f"mutation.{name} must be a probability")

    _require(t.min_speed <= t.max_speed, "speed bounds inverted")
    _require(t.min_attack <= t.max_attack, "attack bounds inverted")
    _require(t.min_sense <= t.max_sense, "sense bounds inverted")
    _require(t.min_resistance <= t.max_resistance, "resistance bounds inverted")
    _require(t.min_legs >= 1, "min_legs must be >= 1")

# ------------------------------------------------------------
# EXPORT SINGLETONS
# ------------------------------------------------------------
CONFIG = Config()
WORLD = CONFIG.world
ENERGY = CONFIG.energy
REPRO = CONFIG.repro
LEARN = CONFIG.learning
REWARD = CONFIG.reward
MUTATION = CONFIG.mutation
TRAITS = CONFIG.traits
SIM = CONFIG.sim
UI = CONFIG.ui
