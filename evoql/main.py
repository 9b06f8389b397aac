# evoql/main.py
from __future__ import annotations
import argparse
from dataclasses import replace

from .sim.config import CONFIG, SIM, WORLD
from .sim.metrics import summarize_frame
from .sim.world import World
from .ui.csv_writer import RunCsvLogger


def _status_line(s) -> str:
    return (
        f"Frame {s['frame']:6d} t={s['time']:8.2f}s | creatures={s['creatures']:3d} "
        f"plants={s['plants']:3d} max_gen={s['max_gen']:3d} avg_q={s['avg_q']:+.4f} "
        f"avg_speed={s['avg_speed']:.1f} avg_attack={s['avg_attack']:.2f} "
        f"avg_sense={s['avg_sense']:.1f} poison={s['poison_frac']:.2f}"
    )

def run_headless(world: World, frames: int, dt: float, log_every: int,
                 logger: RunCsvLogger | None = None) -> World:
    for _ in range(frames):
        world.step(dt)
        extinct = world.creature_count() == 0
        logged = False
        if logger is not None:
            logged = logger.maybe_log(world, notes="extinct" if extinct else None)
        if log_every and world.frame % log_every == 0:
            print(_status_line(summarize_frame(world)))
        if extinct:
            print(f"[INFO] Population extinct at frame {world.frame} (t={world.elapsed:.2f}s)")
            if logger is not None and not logged:
                logger.append(world, notes="extinct")
            break
    return world

def run():
    parser = argparse.ArgumentParser(description="GA + Q-learning evolution: plants, creatures, predation and poison")
    parser.add_argument("--frames", type=int, default=SIM.frames)
    parser.add_argument("--dt", type=float, default=WORLD.dt)
    parser.add_argument("--seed", type=int, default=SIM.seed)
    parser.add_argument("--creatures", type=int, default=WORLD.initial_creatures)
    parser.add_argument("--plants", type=int, default=WORLD.initial_plants)
    parser.add_argument("--log-every", type=int, default=SIM.log_every)
    parser.add_argument("--csv", type=str, default=SIM.track_csv,
                        help="overall CSV path ('' to disable)")
    parser.add_argument("--species-csv", type=str, default=SIM.species_csv,
                        help="per-species CSV path ('' to disable)")
    parser.add_argument("--plot", action="store_true", default=SIM.enable_plot)
    parser.add_argument("--ui", action="store_true", help="launch real-time UI")
    args = parser.parse_args()

    if args.dt <= 0:
        parser.error("--dt must be positive")

    cfg = replace(CONFIG, world=replace(CONFIG.world,
                                        initial_creatures=args.creatures,
                                        initial_plants=args.plants))

    if args.ui:
        from .ui.app import run_ui
        run_ui(cfg, seed=args.seed,
               overall_path=args.csv or None, species_path=args.species_csv or None)
        return

    world = World(cfg, seed=args.seed)
    world.populate()

    logger = None
    if args.csv:
        logger = RunCsvLogger(args.csv, args.species_csv or None, every=args.log_every)
        print(f"[OK] Logging session {logger.session_id} to {args.csv}")

    run_headless(world, args.frames, args.dt, args.log_every, logger)
    print(_status_line(summarize_frame(world)))

    if args.plot:
        from .sim.visualize import snapshot
        snapshot(world, title=f"Frame {world.frame} (seed {args.seed})")

if __name__ == "__main__":
    run()
