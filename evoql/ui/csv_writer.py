# evoql/ui/csv_writer.py
from __future__ import annotations
import csv
import os
import uuid
from typing import Dict, Iterable, List, Optional

from ..sim.creature import Creature
from ..sim.metrics import species_histogram, summarize_frame
from ..sim.world import World


def _ensure_parent(path: str) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)


class RunCsvLogger:
    """
    Append frame-level stats to CSV every `every` frames.
    - overall_path: one row per logged frame
    - species_path: one row per species label per logged frame (optional)
    Each run gets its own session_id so several runs can share a file.

    Usage from a run loop:
        logger = RunCsvLogger(every=300)
        ...
        world.step(dt)
        logger.maybe_log(world)
    """
    OVERALL_HEADER = [
        "session_id", "frame", "time", "creatures", "plants", "max_gen", "avg_q",
        "avg_energy", "avg_speed", "avg_attack", "avg_sense", "avg_legs",
        "avg_resistance", "poison_frac", "species", "notes",
    ]
    SPECIES_HEADER = [
        "session_id", "frame", "time", "species",
        "n", "avg_energy", "avg_generation", "avg_q",
    ]

    def __init__(self,
                 overall_path: Optional[str] = "runs/run_summary.csv",
                 species_path: Optional[str] = "runs/run_species.csv",
                 every: int = 300,
                 enable_species: bool = True):
        self.overall_path = overall_path
        self.species_path = species_path
        self.every = max(1, int(every))
        self.enable_species = enable_species and bool(species_path)
        self.session_id = uuid.uuid4().hex[:8]

        if self.overall_path:
            self._init_file(self.overall_path, self.OVERALL_HEADER)
        if self.enable_species:
            self._init_file(self.species_path, self.SPECIES_HEADER)

    @staticmethod
    def _init_file(path: str, header: List[str]) -> None:
        _ensure_parent(path)
        if not os.path.exists(path):
            with open(path, "w", newline="") as f:
                csv.DictWriter(f, fieldnames=header).writeheader()

    # ---------------- rows ----------------
    def _overall_row(self, world: World, notes: Optional[str]) -> Dict:
        row = summarize_frame(world)
        row["session_id"] = self.session_id
        row["species"] = len(species_histogram(world.entities))
        row["notes"] = notes or ""
        return row

    def _species_rows(self, world: World) -> Iterable[Dict]:
        by_label: Dict[str, List[Creature]] = {}
        for c in world.creatures():
            by_label.setdefault(c.species_label(), []).append(c)

        for label in sorted(by_label):
            members = by_label[label]
            n = len(members)
            yield dict(
                session_id=self.session_id,
                frame=world.frame,
                time=round(world.elapsed, 4),
                species=label,
                n=n,
                avg_energy=sum(c.energy for c in members) / n,
                avg_generation=sum(c.generation for c in members) / n,
                avg_q=sum(c.average_q() for c in members) / n,
            )

    # ---------------- public API ----------------
    def append(self, world: World, notes: Optional[str] = None) -> None:
        if self.overall_path:
            with open(self.overall_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=self.OVERALL_HEADER)
                w.writerow(self._overall_row(world, notes))

        if self.enable_species:
            with open(self.species_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=self.SPECIES_HEADER)
                for r in self._species_rows(world):
                    w.writerow(r)

    def maybe_log(self, world: World, notes: Optional[str] = None) -> bool:
        if world.frame % self.every != 0:
            return False
        self.append(world, notes)
        return True
