import csv
import os

from dark_forest.metrics import BatchAggregator, Metrics
from dark_forest.plotting import plot_batch_summary, plot_galaxy, plot_run_metrics, plot_starfield
from dark_forest.starfield import generate_stars


def _read(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def test_metrics_csv_matches_snapshots(engine, tmp_path):
    metrics = Metrics()
    final = engine.run(25, metrics=metrics)
    path = metrics.export_csv(str(tmp_path))

    rows = _read(path)
    assert len(rows) == 25
    assert [int(r["step"]) for r in rows] == list(range(1, 26))
    assert int(rows[-1]["total_kills"]) == final.total_kills
    assert sum(int(r["kills_this_step"]) for r in rows) == final.total_kills
    assert int(rows[-1]["stars"]) == engine.star_count


def test_empty_metrics_writes_nothing(tmp_path):
    path = Metrics().export_csv(str(tmp_path / "out"))
    assert path.endswith("run_metrics.csv")
    assert not os.path.exists(path)


def test_batch_aggregator_adds_run_dir(tmp_path):
    agg = BatchAggregator()
    agg.add({"alive": 3, "total_civs": 5, "total_kills": 2, "reveals_s": 9}, "run_01")
    agg.add({"alive": 1, "total_civs": 4, "total_kills": 3, "reveals_s": 7}, "run_02")
    rows = _read(agg.export_csv(str(tmp_path)))
    assert [r["run_dir"] for r in rows] == ["run_01", "run_02"]

    plot_batch_summary(os.path.join(str(tmp_path), "batch_results.csv"), str(tmp_path))
    assert os.path.exists(tmp_path / "plot_batch_summary.png")


def test_run_plots_written(engine, tmp_path):
    metrics = Metrics()
    engine.run(30, metrics=metrics)
    metrics.export_csv(str(tmp_path))
    plot_run_metrics(str(tmp_path))
    for name in (
        "plot_radius_vs_time.png",
        "plot_stars_vs_time.png",
        "plot_alive_civs_vs_time.png",
        "plot_total_kills_vs_time.png",
        "plot_reveals_vs_time.png",
    ):
        assert os.path.exists(tmp_path / name)

    out = plot_galaxy(engine, str(tmp_path))
    assert os.path.exists(out)


def test_starfield_plot_written(tmp_path):
    out = plot_starfield(generate_stars(200, 100.0, 1337), str(tmp_path))
    assert out.endswith("plot_starfield.png")
    assert os.path.exists(out)
