from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List
import csv
import os

from .types import Snapshot
from .utils import ensure_dir


def _write_rows(out_dir: str, name: str, rows: List[Dict[str, Any]]) -> str:
    """Write rows to ``out_dir/name``; header comes from the first row. Nothing is written for no rows."""
    ensure_dir(out_dir)
    out = os.path.join(out_dir, name)
    if not rows:
        return out
    with open(out, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        w.writerows(rows)
    return out


@dataclass
class Metrics:
    """One row per engine step, taken from snapshots."""

    logs: List[Dict[str, Any]] = field(default_factory=list)

    def log_snapshot(self, snap: Snapshot, star_count: int) -> None:
        self.logs.append({
            "step": snap.step,
            "time": round(snap.time, 6),
            "radius": round(snap.radius, 6),
            "stars": star_count,
            "alive": snap.alive,
            "total_civs": snap.total_civs,
            "reveals_b": snap.reveals_b,
            "reveals_s": snap.reveals_s,
            "reveals_r": snap.reveals_r,
            "kills_this_step": snap.kills_this_step,
            "total_kills": snap.total_kills,
        })

    def export_csv(self, path: str) -> str:
        return _write_rows(path, "run_metrics.csv", self.logs)


@dataclass
class BatchAggregator:
    """Final outcome of each seeded run in a batch, tagged with its output dir."""

    rows: List[Dict[str, Any]] = field(default_factory=list)

    def add(self, outcome: Dict[str, Any], run_dir: str) -> None:
        self.rows.append({**outcome, "run_dir": run_dir})

    def export_csv(self, out_dir: str) -> str:
        return _write_rows(out_dir, "batch_results.csv", self.rows)
