# evoql/ui/renderer.py
from __future__ import annotations
import sys
from typing import List, Optional

import pygame

from ..sim.config import UI, UIConfig
from ..sim.metrics import species_histogram
from ..sim.world import World

# ---------- Colors / Theme ----------
BG_COLOR       = (220, 220, 220)
PANEL_BG       = (255, 255, 255, 180)
PANEL_TEXT     = (0, 0, 0)
PAUSED_COLOR   = (200, 40, 40)

# ---------- Layout knobs ----------
PANEL_X        = 20
PANEL_Y        = 20
PANEL_W        = 220
PANEL_H        = 340
TEXT_PAD_X     = 10
TEXT_PAD_Y     = 8
LINE_GAP       = 2


def format_elapsed(seconds: float) -> str:
    s = int(seconds)
    return f"{s // 3600}h{(s % 3600) // 60}m{s % 60}s"

def panel_lines(world: World, fps: float) -> List[str]:
    """Text shown in the overlay panel, top to bottom."""
    lines = [
        f"FPS: {int(fps)}",
        f"Creature: {world.creature_count()}",
        f"Plant:    {world.plant_count()}",
        f"Max Gen:  {world.max_generation()}",
        f"Avg Q:    {world.mean_average_q():.6f}",
        f"Time: {format_elapsed(world.elapsed)}",
        "",
        "--- Species Count ---",
    ]
    for label, n in sorted(species_histogram(world.entities).items()):
        lines.append(f"{label}: {n}")
    return lines


class Renderer:
    def __init__(self, screen: pygame.Surface, cfg: UIConfig = UI):
        self.screen = screen
        self.cfg = cfg
        # entities are translucent; draw them on an alpha layer
        self.layer = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        self.panel = pygame.Surface((PANEL_W, PANEL_H), pygame.SRCALPHA)
        self.font = self._load_font()

    def _load_font(self) -> Optional[pygame.font.Font]:
        try:
            return pygame.font.Font(self.cfg.font_path, self.cfg.font_size)
        except (OSError, FileNotFoundError) as e:
            print(f"[WARN] Failed to load font {self.cfg.font_path!r} ({e}); panel text disabled.",
                  file=sys.stderr)
            return None

    # ---------- world ----------
    def world_to_screen(self, world: World, x: float, y: float):
        w, h = self.screen.get_size()
        return int(x / world.width * w), int(y / world.height * h)

    def draw_entity(self, world: World, e) -> None:
        sx, sy = self.world_to_screen(world, e.x, e.y)
        pygame.draw.circle(self.layer, e.color, (sx, sy), int(e.radius))

    def draw_world(self, world: World) -> None:
        self.screen.fill(BG_COLOR)
        self.layer.fill((0, 0, 0, 0))
        for e in world.entities:
            if e.alive:
                self.draw_entity(world, e)
        self.screen.blit(self.layer, (0, 0))

    # ---------- overlay ----------
    def draw_panel(self, world: World, fps: float, paused: bool = False) -> None:
        self.panel.fill(PANEL_BG)
        self.screen.blit(self.panel, (PANEL_X, PANEL_Y))
        if self.font is None:
            return
        x = PANEL_X + TEXT_PAD_X
        y = PANEL_Y + TEXT_PAD_Y
        bottom = PANEL_Y + PANEL_H - self.font.get_linesize()
        for s in panel_lines(world, fps):
            if y > bottom:
                break
            self.screen.blit(self.font.render(s, True, PANEL_TEXT), (x, y))
            y += self.font.get_linesize() + LINE_GAP
        if paused:
            self.screen.blit(self.font.render("PAUSED", True, PAUSED_COLOR),
                             (PANEL_X + TEXT_PAD_X, PANEL_Y + PANEL_H + 4))
