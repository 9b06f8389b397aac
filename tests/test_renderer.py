import os

import pytest

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
import pygame

from evoql.sim.config import UI
from evoql.ui.renderer import Renderer, format_elapsed, panel_lines

from conftest import genome, tuned


@pytest.fixture(scope="module", autouse=True)
def headless_pygame():
    """Headless pygame display for render tests."""
    pygame.init()
    yield
    pygame.quit()

@pytest.fixture
def screen():
    return pygame.display.set_mode((800, 600))


def test_format_elapsed():
    assert format_elapsed(0) == "0h0m0s"
    assert format_elapsed(3725.9) == "1h2m5s"

def test_panel_lines(quiet_world):
    quiet_world.add_creature(genome(speed=80, attack=15, poison=True, legs=3, poison_resistance=0.5),
                             100.0, 100.0, heading=0.0, generation=2)
    quiet_world.add_plant(200.0, 200.0)
    lines = panel_lines(quiet_world, fps=59.7)
    assert lines[0] == "FPS: 59"
    assert "Creature: 1" in lines
    assert "Plant:    1" in lines
    assert "Max Gen:  2" in lines
    assert lines[-1] == "Mid_MedAtk_Poison_Leg3_MidRes: 1"

def test_renderer_draws_world_and_panel(screen, quiet_world):
    quiet_world.add_creature(genome(), 400.0, 300.0, heading=0.0)
    quiet_world.add_plant(600.0, 100.0)
    r = Renderer(screen)
    r.draw_world(quiet_world)
    r.draw_panel(quiet_world, fps=60.0, paused=True)
    # plant pixel is opaque green, background elsewhere
    assert screen.get_at((600, 100))[:3] == (120, 200, 120)
    assert screen.get_at((790, 590))[:3] == (220, 220, 220)

def test_missing_font_disables_text(screen, quiet_world, capsys):
    cfg = tuned(ui=dict(font_path="/nonexistent/Roboto.ttf")).ui
    r = Renderer(screen, cfg)
    assert r.font is None
    assert "[WARN]" in capsys.readouterr().err
    r.draw_panel(quiet_world, fps=30.0)

def test_world_to_screen_scales(screen, quiet_world):
    r = Renderer(screen, UI)
    assert r.world_to_screen(quiet_world, 400.0, 300.0) == (400, 300)
