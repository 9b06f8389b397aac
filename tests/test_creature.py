import math

import pytest

from evoql.sim.creature import Creature
from evoql.sim.policy import FORWARD, STOP, TURN_LEFT, TURN_RIGHT
from evoql.sim.rng import RNG

from conftest import NO_REPRO, QUIET, genome

DT = 1.0 / 60.0
S1_GENOME = genome(speed=50, attack=5, poison=False, sense_range=100, poison_resistance=0.0)


def _loner(energy=None, heading=0.0, g=S1_GENOME, x=400.0, y=300.0, cfg=QUIET):
    return Creature(g, x, y, (150, 150, 150), RNG(21), view=None,
                    heading=heading, energy=energy, cfg=cfg)

def _force(c, action):
    c.policy.q[:, action] = 1.0


def test_solo_survival_energy_after_200_frames(still_world):
    c = still_world.add_creature(S1_GENOME, 400.0, 300.0, heading=0.0)
    for _ in range(200):
        still_world.step(DT)
        assert c.alive
        assert still_world.contains(c.x, c.y)
    assert c.energy == pytest.approx(60.0 - 200 * DT * 0.4, abs=1e-9)
    assert c.lifetime == pytest.approx(200 * DT)

def test_energy_runs_out_after_150_seconds():
    c = _loner(cfg=NO_REPRO)
    for _ in range(149):
        c.step(1.0)
    assert c.alive
    c.step(1.0)
    c.step(1.0)
    assert not c.alive

def test_starvation_sends_terminal_reward(record_rewards):
    c = _loner(energy=0.001)
    c.offspring_count = 2
    c.lifetime = 10.0
    rewards = record_rewards(c)
    c.step(DT)
    assert not c.alive
    expected = -0.002 - 10.0 + 5.0 * 2 + 0.1 * (10.0 + DT)
    assert rewards == [pytest.approx(expected)]

def test_dead_creature_step_is_noop(record_rewards):
    c = _loner()
    c.alive = False
    rewards = record_rewards(c)
    c.step(DT)
    assert rewards == []
    assert c.lifetime == 0.0
    assert c.energy == 60.0

def test_live_step_updates_then_acts(still_world, record_rewards):
    c = still_world.add_creature(S1_GENOME, 400.0, 300.0, heading=0.0)
    rewards = record_rewards(c)
    c.step(DT)
    assert rewards == [pytest.approx(-0.002)]
    # the update lands on the default (state 0, forward) before the new choice,
    # so forward is now slightly worse and the first tied maximum wins
    assert c.policy.q[0, FORWARD] == pytest.approx(0.1 * -0.002)
    assert c.policy.last_state == 0
    assert c.policy.last_action == TURN_LEFT

def test_forward_moves_along_heading():
    c = _loner(heading=90.0)
    _force(c, FORWARD)
    c.step(0.5)
    assert c.x == pytest.approx(400.0)
    assert c.y == pytest.approx(300.0 + 50 * 0.5)

@pytest.mark.parametrize("action,delta", [(TURN_LEFT, -45.0), (TURN_RIGHT, 45.0), (STOP, 0.0)])
def test_turns_and_stop(action, delta):
    c = _loner(heading=180.0)
    _force(c, action)
    c.step(0.5)
    assert c.heading == pytest.approx(180.0 + delta)
    assert (c.x, c.y) == (400.0, 300.0)

def test_bounce_off_right_wall():
    c = _loner(heading=0.0, g=genome(speed=200), x=799.0)
    _force(c, FORWARD)
    c.step(0.1)
    assert c.x == 800.0
    assert c.heading == pytest.approx(180.0)

def test_corner_bounce_flips_twice():
    c = _loner(heading=225.0, g=genome(speed=200), x=1.0, y=1.0)
    _force(c, FORWARD)
    c.step(0.1)
    assert (c.x, c.y) == (0.0, 0.0)
    assert c.heading == pytest.approx(225.0)

def test_cooldown_ticks_down():
    c = _loner()
    c.reset_cooldown()
    c.step(1.0)
    assert c.cooldown == pytest.approx(4.0)

def test_can_reproduce():
    c = _loner(energy=60.0)
    assert c.can_reproduce()
    c.energy = 50.0
    assert not c.can_reproduce()
    c.energy = 60.0
    c.cooldown = 0.5
    assert not c.can_reproduce()

def test_self_reproduction_conserves_energy():
    c = _loner(energy=80.0)
    c.generation = 3
    child = c.reproduce_with(c)
    assert c.energy + child.energy == pytest.approx(80.0)
    assert child.energy == pytest.approx(48.0)
    assert c.offspring_count == 1
    assert child.generation == 4
    assert (child.x, child.y) == (c.x, c.y)
    assert (child.cooldown, child.lifetime, child.offspring_count) == (0.0, 0.0, 0)
    assert child.genome == c.genome  # QUIET disables mutation

def test_reproduction_with_partner():
    a = _loner(energy=60.0)
    b = _loner(energy=60.0, g=genome(speed=120, attack=20))
    a.generation, b.generation = 1, 6
    child = a.reproduce_with(b)
    assert a.energy == pytest.approx(24.0)
    assert child.energy == pytest.approx(36.0)
    assert b.energy == 60.0
    assert (a.offspring_count, b.offspring_count) == (1, 1)
    assert child.generation == 7
    assert child.generation > max(a.generation, b.generation)
    assert child.view is a.view

def test_child_color_is_clamped_with_fixed_alpha():
    a = _loner()
    a.color = (255, 0, 128, 180)
    for _ in range(50):
        child = a.reproduce_with(a)
        r, g, b, alpha = child.color
        assert 250 <= r <= 255
        assert 0 <= g <= 5
        assert 123 <= b <= 133
        assert alpha == 180

def test_child_inherits_clamped_q_table():
    a, b = _loner(), _loner()
    a.policy.q[:] = 50.0
    b.policy.q[:] = 50.0
    a.policy.q[1] = -50.0
    b.policy.q[1] = -50.0
    child = a.reproduce_with(b)
    assert child.policy.q.max() <= 50.0
    assert child.policy.q.min() >= -50.0
    assert child.policy.q[0, 0] == pytest.approx(50.0, abs=0.1)

def test_on_eaten_terminal_reward(record_rewards):
    c = _loner()
    c.offspring_count = 1
    c.lifetime = 20.0
    rewards = record_rewards(c)
    c.on_eaten()
    assert not c.alive
    assert rewards == [pytest.approx(-40.0 + 5.0 + 2.0)]

def test_add_energy_to_zero_starves(record_rewards):
    c = _loner(energy=5.0)
    rewards = record_rewards(c)
    c.add_energy(-5.0)
    assert not c.alive
    assert rewards == [pytest.approx(-10.0)]

def test_creatures_compare_by_identity():
    a, b = _loner(), _loner()
    assert a != b
    assert a == a
    assert len({a, b}) == 2

def test_species_label_and_average_q():
    c = _loner()
    assert c.species_label() == "Slow_LowAtk_NonPois_Leg2_LowRes"
    c.policy.q[0, 0] = 16.0
    assert c.average_q() == pytest.approx(1.0)

def test_random_heading_when_not_given():
    c = Creature(S1_GENOME, 10.0, 10.0, (1, 2, 3), RNG(0), cfg=QUIET)
    assert 0.0 <= c.heading <= 360.0
    assert c.color == (1, 2, 3, 180)
    assert c.energy == 60.0
    assert math.isclose(c.radius, 15.0)
