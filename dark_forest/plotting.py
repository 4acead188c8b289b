from __future__ import annotations
import csv
import os
from typing import List, Dict

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .simulation import Engine
from .starfield import StarField
from .types import Strategy

STRATEGY_COLORS = {
    Strategy.SILENT: "tab:blue",
    Strategy.BROADCAST: "tab:orange",
    Strategy.CAUTIOUS: "tab:green",
    Strategy.PREEMPTIVE: "tab:red",
}


def _read_csv(path: str) -> List[Dict[str, str]]:
    with open(path, "r", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def plot_run_metrics(out_dir: str) -> None:
    """
    Generates:
      plot_radius_vs_time.png
      plot_stars_vs_time.png
      plot_alive_civs_vs_time.png
      plot_total_kills_vs_time.png
      plot_reveals_vs_time.png
    """
    csv_path = os.path.join(out_dir, "run_metrics.csv")
    if not os.path.exists(csv_path):
        return
    rows = _read_csv(csv_path)
    if not rows:
        return

    steps = [int(r["step"]) for r in rows]
    radius = [float(r["radius"]) for r in rows]
    stars = [int(r["stars"]) for r in rows]
    alive = [int(r["alive"]) for r in rows]
    total_civs = [int(r["total_civs"]) for r in rows]
    kills = [int(r["total_kills"]) for r in rows]
    reveals = [int(r["reveals_s"]) for r in rows]

    def _plot(x, y, xlabel, ylabel, title, filename):
        plt.figure()
        plt.plot(x, y)
        plt.xlabel(xlabel)
        plt.ylabel(ylabel)
        plt.title(title)
        plt.tight_layout()
        plt.savefig(os.path.join(out_dir, filename))
        plt.close()

    _plot(steps, radius, "Step", "Survey radius", "Survey Radius vs Time", "plot_radius_vs_time.png")
    _plot(steps, stars, "Step", "Stars", "Star Count vs Time", "plot_stars_vs_time.png")
    _plot(steps, kills, "Step", "Kills (cumulative)", "Kills vs Time", "plot_total_kills_vs_time.png")
    _plot(steps, reveals, "Step", "Reveals (cumulative)", "Reveals vs Time", "plot_reveals_vs_time.png")

    # alive vs ever spawned on one chart
    plt.figure()
    plt.plot(steps, total_civs, label="spawned")
    plt.plot(steps, alive, label="alive")
    plt.xlabel("Step")
    plt.ylabel("Civilizations")
    plt.title("Civilizations vs Time")
    plt.legend()
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "plot_alive_civs_vs_time.png"))
    plt.close()


def plot_batch_summary(batch_csv: str, out_dir: str) -> None:
    """
    plot_batch_summary.png
    Shows averages across runs (bar chart).
    """
    rows = _read_csv(batch_csv)
    if not rows:
        return

    avg_alive = sum(int(r["alive"]) for r in rows) / len(rows)
    avg_civs = sum(int(r["total_civs"]) for r in rows) / len(rows)
    avg_kills = sum(int(r["total_kills"]) for r in rows) / len(rows)
    avg_reveals = sum(int(r["reveals_s"]) for r in rows) / len(rows)

    labels = ["Alive", "Spawned", "Kills", "Reveals"]
    values = [avg_alive, avg_civs, avg_kills, avg_reveals]

    plt.figure()
    plt.bar(labels, values)
    plt.title("Batch Summary (Averages across runs)")
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "plot_batch_summary.png"))
    plt.close()


def plot_galaxy(engine: Engine, out_dir: str, max_stars: int = 5000) -> str:
    """
    plot_galaxy.png
    Static 3-D scatter: stars as faint points, living civs coloured by
    strategy, dead civs grey.
    """
    out = os.path.join(out_dir, "plot_galaxy.png")
    fig = plt.figure(figsize=(7, 7))
    ax = fig.add_subplot(projection="3d")

    n_stars = engine.star_count
    if n_stars:
        stride = max(1, n_stars // max_stars)
        sp = engine.star_pos[:n_stars * 3].reshape(-1, 3)[::stride]
        ax.scatter(sp[:, 0], sp[:, 1], sp[:, 2], s=1, c="0.75", alpha=0.4)

    n_civs = engine.civ_count
    if n_civs:
        cp = engine.civ_pos[:n_civs * 3].reshape(-1, 3)
        alive = engine.civ_alive[:n_civs].astype(bool)
        strat = engine.civ_strat[:n_civs]
        dead = ~alive
        if dead.any():
            ax.scatter(cp[dead, 0], cp[dead, 1], cp[dead, 2], s=8, c="0.4", marker="x", label="dead")
        for strategy, color in STRATEGY_COLORS.items():
            mask = alive & (strat == int(strategy))
            if mask.any():
                ax.scatter(cp[mask, 0], cp[mask, 1], cp[mask, 2], s=14, c=color,
                           label=strategy.name.lower())
        ax.legend(loc="upper right")

    ax.set_title(f"Survey volume r={engine.radius:.2f} (step {engine.step_index})")
    fig.tight_layout()
    fig.savefig(out)
    plt.close(fig)
    return out


def plot_starfield(field: StarField, out_dir: str) -> str:
    """plot_starfield.png: the static background field, brightness as grey level."""
    out = os.path.join(out_dir, "plot_starfield.png")
    fig = plt.figure(figsize=(7, 7))
    ax = fig.add_subplot(projection="3d")
    if field.count:
        ax.scatter(field.pos[:, 0], field.pos[:, 1], field.pos[:, 2],
                   s=1, c=field.lum, cmap="gray", vmin=0.0, vmax=1.0)
    ax.set_title(f"Background field: {field.count} stars, seed {field.seed}")
    fig.tight_layout()
    fig.savefig(out)
    plt.close(fig)
    return out
