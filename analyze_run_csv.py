#!/usr/bin/env python3
"""
Analyze run CSVs produced by RunCsvLogger.

Features:
  - --session latest|<id> filters to a single run (so you never need to delete runs/)
  - Saves timestamped CSV exports and PNG plots under --outdir
  - Overall plot:
      (1) creatures + plants over time
      (2) mean speed / attack / sense
      (3) mean Q value and max generation
  - Species plot: count per species label over time (top --top labels)
Usage examples:
  python analyze_run_csv.py --overall runs/run_summary.csv \
                            --species runs/run_species.csv \
                            --outdir reports \
                            --tag demo \
                            --session latest
"""
import argparse
import os
import sys
import time
import pandas as pd

# Use non-interactive backend for headless operation
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


OVERALL_NUMERIC = ("frame", "time", "creatures", "plants", "max_gen", "avg_q", "avg_energy",
                   "avg_speed", "avg_attack", "avg_sense", "avg_legs", "avg_resistance",
                   "poison_frac", "species")
SPECIES_NUMERIC = ("frame", "time", "n", "avg_energy", "avg_generation", "avg_q")


# ------------------------- utilities -------------------------
def ensure_dir(p: str) -> None:
    os.makedirs(p, exist_ok=True)

def timestamp(tag: str | None = None) -> str:
    t = time.strftime("%Y%m%d_%H%M%S")
    return f"{t}__{tag}" if tag else t

def exists(path: str | None) -> bool:
    return bool(path and os.path.exists(path))

def coerce_numeric(df: pd.DataFrame, cols) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


# ------------------------- loading ---------------------------
def load_csvs(overall_path: str, species_path: str | None):
    if not exists(overall_path):
        print(
            "\n[ERROR] Overall CSV not found.\n"
            f"  Expected: {overall_path}\n"
            "Hints:\n"
            "  • Run `python -m evoql.main --csv runs/run_summary.csv` first.\n"
            "  • Rows are written every --log-every frames; a very short run may write none.\n",
            file=sys.stderr
        )
        sys.exit(1)

    df_overall = pd.read_csv(overall_path)
    df_species = pd.read_csv(species_path) if (species_path and exists(species_path)) else None
    return df_overall, df_species


def latest_session_id(df: pd.DataFrame) -> str | None:
    """Return the last session_id in file order (used by --session latest)."""
    if "session_id" not in df.columns or len(df) == 0:
        return None
    s = df["session_id"].dropna()
    return str(s.iloc[-1]) if len(s) else None


def filter_session(df: pd.DataFrame | None, sid: str | None) -> pd.DataFrame | None:
    if df is None or not sid or "session_id" not in df.columns:
        return df
    return df[df["session_id"].astype(str) == sid].copy()


# ------------------------- cleaning --------------------------
def clean_overall(df_overall: pd.DataFrame) -> pd.DataFrame:
    df = coerce_numeric(df_overall.copy(), OVERALL_NUMERIC)
    keep = [c for c in OVERALL_NUMERIC if c in df.columns and c != "frame"]
    # several sessions -> mean per frame
    if "session_id" in df.columns and df["session_id"].nunique() > 1:
        df = df.groupby("frame", as_index=False)[keep].mean()
    return df.sort_values("frame") if "frame" in df.columns else df


def clean_species(df_species: pd.DataFrame | None) -> pd.DataFrame:
    if df_species is None or len(df_species) == 0:
        return pd.DataFrame()
    df = coerce_numeric(df_species.copy(), SPECIES_NUMERIC)
    keep = [c for c in SPECIES_NUMERIC if c in df.columns and c != "frame"]
    keys = [k for k in ("species", "frame") if k in df.columns]
    return df.groupby(keys, as_index=False)[keep].mean().sort_values(keys)


# ------------------------- plotting --------------------------
def plot_overall(df: pd.DataFrame, outdir: str, tag: str | None) -> str:
    ensure_dir(outdir)
    fig, ax = plt.subplots(3, 1, figsize=(10, 11), sharex=True)

    # (1) population
    for col, label, color in (("creatures", "Creatures", "black"), ("plants", "Plants", "tab:green")):
        if col in df.columns:
            ax[0].plot(df["frame"], df[col], label=label, color=color, linewidth=2.0)
    ax[0].set_ylabel("Count")
    ax[0].legend(loc="best")
    ax[0].grid(alpha=0.25)

    # (2) traits
    for col, label in (("avg_speed", "Avg speed"), ("avg_attack", "Avg attack"), ("avg_sense", "Avg sense")):
        if col in df.columns:
            ax[1].plot(df["frame"], df[col], label=label)
    ax[1].set_ylabel("Trait value")
    ax[1].legend(loc="best")
    ax[1].grid(alpha=0.25)

    # (3) learning / lineage
    if "avg_q" in df.columns:
        ax[2].plot(df["frame"], df["avg_q"], color="tab:purple", label="Avg Q")
    ax[2].set_ylabel("Avg Q")
    ax[2].set_xlabel("Frame")
    if "max_gen" in df.columns:
        ax2 = ax[2].twinx()
        ax2.plot(df["frame"], df["max_gen"], color="tab:orange", label="Max generation")
        ax2.set_ylabel("Max generation")
        ax2.legend(loc="lower right")
    ax[2].legend(loc="upper left")
    ax[2].grid(alpha=0.25)

    fig.tight_layout()
    png = os.path.join(outdir, f"overall_trends_{timestamp(tag)}.png")
    fig.savefig(png, dpi=160)
    plt.close(fig)
    print(f"[OK] Saved {png}")
    return png


def plot_species(df_species: pd.DataFrame, outdir: str, tag: str | None, top: int = 8) -> str | None:
    if df_species is None or len(df_species) == 0:
        print("[INFO] No species rows; skipping species plot.")
        return None
    needed = {"species", "frame", "n"}
    if not needed.issubset(df_species.columns):
        print(f"[WARN] species CSV missing columns {needed - set(df_species.columns)}; skipping species plot.")
        return None

    ensure_dir(outdir)
    totals = df_species.groupby("species")["n"].sum().sort_values(ascending=False)
    labels = list(totals.index[:top])

    fig, ax = plt.subplots(figsize=(10, 6))
    for label in labels:
        sub = df_species[df_species["species"] == label].sort_values("frame")
        ax.plot(sub["frame"], sub["n"], linewidth=1.6, label=label)
    ax.set_xlabel("Frame")
    ax.set_ylabel("Count")
    ax.set_title(f"Top {len(labels)} species labels")
    ax.legend(loc="best", fontsize=8)
    ax.grid(alpha=0.25)

    fig.tight_layout()
    png = os.path.join(outdir, f"species_trends_{timestamp(tag)}.png")
    fig.savefig(png, dpi=160)
    plt.close(fig)
    print(f"[OK] Saved {png}")
    return png


# ------------------------- exports ---------------------------
def export_csv(df: pd.DataFrame, outdir: str, base: str, tag: str | None) -> str:
    ensure_dir(outdir)
    path = os.path.join(outdir, f"{base}_{timestamp(tag)}.csv")
    df.to_csv(path, index=False)
    print(f"[OK] Wrote {path}")
    return path


# ------------------------- main ------------------------------
def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--overall", type=str, default="runs/run_summary.csv",
                    help="Path to overall CSV written by RunCsvLogger")
    ap.add_argument("--species", type=str, default="runs/run_species.csv",
                    help="Path to per-species CSV (pass '' to disable)")
    ap.add_argument("--outdir", type=str, default="reports",
                    help="Output directory for plots and exported CSVs")
    ap.add_argument("--tag", type=str, default="",
                    help="Optional label to append to filenames")
    ap.add_argument("--session", type=str, default="",
                    help="Session ID to analyze; use 'latest' for the most recent session.")
    ap.add_argument("--top", type=int, default=8, help="Species labels to plot")
    args = ap.parse_args(argv)

    df_overall, df_species = load_csvs(args.overall, args.species or None)

    if args.session:
        sid = latest_session_id(df_overall) if args.session == "latest" else args.session
        if sid:
            df_overall = filter_session(df_overall, sid)
            df_species = filter_session(df_species, sid)
            print(f"[OK] Filtering analysis to session_id={sid}")
        else:
            print("[WARN] Could not resolve session_id; analyzing all data.")

    print(f"[INFO] Overall rows after filter: {len(df_overall)}")
    tag = args.tag or None

    overall_clean = clean_overall(df_overall)
    export_csv(overall_clean, args.outdir, base="overall_summary", tag=tag)
    plot_overall(overall_clean, args.outdir, tag)

    species_clean = clean_species(df_species)
    if len(species_clean) > 0:
        export_csv(species_clean, args.outdir, base="species_summary", tag=tag)
        plot_species(species_clean, args.outdir, tag, top=args.top)
    else:
        print("[INFO] No per-species rows (after optional --session filter); skipping species outputs.")

    print(f"\nDone. Outputs are in: {args.outdir}")

if __name__ == "__main__":
    main()
