#!/usr/bin/env python3
"""
Run evoql once and chart that run.

The simulation appends to the run CSVs under a fresh session_id; the newest
session_id in the overall CSV is then handed to analyze_run_csv.py so older
runs in the same files are left out of the report.

  python run_sim_then_analyze.py --frames 7200 --seed 7 --tag long
  python run_sim_then_analyze.py --ui --overall runs/ui.csv --species runs/ui_species.csv
"""
import argparse
import csv
import os
import subprocess
import sys


def newest_session(summary_csv: str) -> str | None:
    if not os.path.exists(summary_csv):
        return None
    sid = None
    with open(summary_csv, newline="") as f:
        for row in csv.DictReader(f):
            sid = row.get("session_id") or sid
    return sid

def main():
    ap = argparse.ArgumentParser(description="simulate, then analyze the resulting session")
    ap.add_argument("--overall", default="runs/run_summary.csv")
    ap.add_argument("--species", default="runs/run_species.csv")
    ap.add_argument("--outdir", default="reports")
    ap.add_argument("--tag", default="")
    ap.add_argument("--frames", type=int, default=3600)
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--ui", action="store_true", help="watch the run in the pygame window")
    args = ap.parse_args()

    sim = [sys.executable, "-m", "evoql.main",
           "--frames", str(args.frames), "--seed", str(args.seed),
           "--csv", args.overall, "--species-csv", args.species]
    if args.ui:
        sim.append("--ui")
    print("[INFO] sim:", " ".join(sim))
    code = subprocess.call(sim)
    if code != 0:
        print(f"[WARN] evoql exited with status {code}; analyzing whatever was logged", file=sys.stderr)

    sid = newest_session(args.overall)
    if sid is None:
        print(f"[INFO] {args.overall} has no logged rows; nothing to analyze.")
        sys.exit(0)

    report = [sys.executable, "analyze_run_csv.py",
              "--overall", args.overall, "--species", args.species,
              "--outdir", args.outdir, "--tag", args.tag, "--session", sid]
    print(f"[INFO] analyze session {sid}:", " ".join(report))
    sys.exit(subprocess.call(report))

if __name__ == "__main__":
    main()
