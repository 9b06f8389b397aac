import csv

import pytest

import analyze_run_csv as ana


def _write(path, header, rows):
    with open(path, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=header)
        w.writeheader()
        for r in rows:
            w.writerow(r)

@pytest.fixture
def run_csvs(tmp_path):
    overall = tmp_path / "summary.csv"
    species = tmp_path / "species.csv"
    header = ["session_id", "frame", "time", "creatures", "plants", "max_gen", "avg_q",
              "avg_speed", "avg_attack", "avg_sense"]
    rows = []
    for sid in ("aaaa", "bbbb"):
        for frame in (300, 600, 900):
            rows.append(dict(session_id=sid, frame=frame, time=frame / 60, creatures=frame // 100,
                             plants=20, max_gen=frame // 300, avg_q=-0.1,
                             avg_speed=50, avg_attack=3, avg_sense=100))
    _write(overall, header, rows)
    _write(species, ["session_id", "frame", "species", "n"], [
        dict(session_id="bbbb", frame=300, species="Slow_LowAtk_NonPois_Leg2_LowRes", n=3),
        dict(session_id="bbbb", frame=600, species="Slow_LowAtk_NonPois_Leg2_LowRes", n=5),
        dict(session_id="aaaa", frame=600, species="Mid_MedAtk_Poison_Leg3_MidRes", n=1),
    ])
    return overall, species


def test_latest_session_and_filter(run_csvs):
    overall, species = run_csvs
    df, dfs = ana.load_csvs(str(overall), str(species))
    sid = ana.latest_session_id(df)
    assert sid == "bbbb"
    assert len(ana.filter_session(df, sid)) == 3
    assert set(ana.filter_session(dfs, sid)["species"]) == {"Slow_LowAtk_NonPois_Leg2_LowRes"}

def test_clean_overall_averages_sessions(run_csvs):
    overall, _ = run_csvs
    df, _ = ana.load_csvs(str(overall), None)
    clean = ana.clean_overall(df)
    assert list(clean["frame"]) == [300, 600, 900]

def test_main_writes_reports(run_csvs, tmp_path):
    overall, species = run_csvs
    outdir = tmp_path / "reports"
    ana.main(["--overall", str(overall), "--species", str(species),
              "--outdir", str(outdir), "--session", "latest", "--tag", "t"])
    names = [p.name for p in outdir.iterdir()]
    assert any(n.startswith("overall_trends_") and n.endswith(".png") for n in names)
    assert any(n.startswith("species_trends_") for n in names)
    assert any(n.startswith("overall_summary_") for n in names)

def test_missing_overall_exits(tmp_path):
    with pytest.raises(SystemExit):
        ana.load_csvs(str(tmp_path / "nope.csv"), None)

def test_launcher_picks_newest_session(run_csvs, tmp_path):
    import run_sim_then_analyze as launcher
    overall, _ = run_csvs
    assert launcher.newest_session(str(overall)) == "bbbb"
    assert launcher.newest_session(str(tmp_path / "missing.csv")) is None
