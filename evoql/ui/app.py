# evoql/ui/app.py
from __future__ import annotations
import random
from typing import Optional

import pygame

from .renderer import Renderer
from .csv_writer import RunCsvLogger
from ..sim.config import CONFIG, Config
from ..sim.world import World

FPS_INTERVAL = 0.5  # seconds between FPS read-out refreshes


def _new_world(cfg: Config, seed: Optional[int]) -> World:
    world = World(cfg, seed=seed)
    world.populate()
    return world

def run_ui(cfg: Config = CONFIG, seed: Optional[int] = None,
           overall_path: Optional[str] = None, species_path: Optional[str] = None):
    """Interactive window. Logs CSV rows only when `overall_path` is given."""
    pygame.init()
    pygame.display.set_caption("GA + RL Evolution")
    screen = pygame.display.set_mode((cfg.ui.width, cfg.ui.height))
    clock = pygame.time.Clock()

    world = _new_world(cfg, seed)
    renderer = Renderer(screen, cfg.ui)
    logger = None
    if overall_path:
        logger = RunCsvLogger(overall_path, species_path, every=cfg.ui.log_every)
        print(f"[OK] Logging session {logger.session_id} to {overall_path}")

    paused = False
    frames_per_render = 1
    fps = 0.0
    fps_timer = 0.0
    frame_count = 0
    running = True

    while running:
        dt = clock.tick(cfg.ui.fps_cap) / 1000.0

        fps_timer += dt
        frame_count += 1
        if fps_timer >= FPS_INTERVAL:
            fps = frame_count / fps_timer
            frame_count = 0
            fps_timer = 0.0

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE: running = False
                elif e.key == pygame.K_SPACE: paused = not paused
                elif e.key == pygame.K_r:
                    world = _new_world(cfg, random.randint(0, 1_000_000))
                    paused = False
                elif e.key == pygame.K_LEFTBRACKET:
                    frames_per_render = max(1, frames_per_render - 1)
                elif e.key == pygame.K_RIGHTBRACKET:
                    frames_per_render = min(20, frames_per_render + 1)

        if not paused:
            step_dt = min(dt, cfg.ui.max_dt)
            for _ in range(frames_per_render):
                world.step(step_dt)
                if logger is not None:
                    logger.maybe_log(world)

        renderer.draw_world(world)
        renderer.draw_panel(world, fps, paused)
        pygame.display.flip()

    pygame.quit()
