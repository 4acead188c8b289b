"""
Points of interest over a running engine.

The host uses these to pick a civilization to focus on (camera targets,
minimap dots). They only read the engine buffers and return slot indices,
which stay valid for the whole run because dead civs are never removed.
"""
from __future__ import annotations
import math
from typing import Dict, List, Tuple

from .simulation import Engine
from .types import Vec3
from .utils import distance_sq


def _alive_indices(engine: Engine) -> List[int]:
    alive = engine.civ_alive
    return [i for i in range(engine.civ_count) if alive[i]]


def pick_strongest(engine: Engine) -> int:
    best, best_tech = -1, None
    tech = engine.civ_tech
    for i in _alive_indices(engine):
        t = float(tech[i])
        if best_tech is None or t > best_tech:
            best, best_tech = i, t
    return best


def pick_frontier(engine: Engine) -> int:
    origin = (0.0, 0.0, 0.0)
    best, best_d = -1, -1.0
    for i in _alive_indices(engine):
        d = distance_sq(engine.civs.position(i), origin)
        if d > best_d:
            best, best_d = i, d
    return best


def pick_nearest(engine: Engine, point: Vec3) -> int:
    best, best_d = -1, None
    for i in _alive_indices(engine):
        d = distance_sq(engine.civs.position(i), point)
        if best_d is None or d < best_d:
            best, best_d = i, d
    return best


def pick_densest(engine: Engine, cells: int = 8) -> int:
    """
    Bucket living civs into a ``cells``^3 voxel grid spanning the survey
    sphere's bounding cube and return the middle member of the fullest
    bucket (the first one found wins a tie).
    """
    half = engine.radius
    if half <= 0:
        return -1
    inv = cells / (2.0 * half)

    buckets: Dict[Tuple[int, int, int], List[int]] = {}
    for i in _alive_indices(engine):
        x, y, z = engine.civs.position(i)
        key = (math.floor((x + half) * inv), math.floor((y + half) * inv), math.floor((z + half) * inv))
        buckets.setdefault(key, []).append(i)

    best: List[int] = []
    for members in buckets.values():
        if len(members) > len(best):
            best = members
    if not best:
        return -1
    return best[len(best) // 2]


def sample_civs(engine: Engine, max_points: int = 800) -> List[Tuple[float, float]]:
    """Deterministic stride downsample of living civs on the XZ plane (top-down)."""
    out: List[Tuple[float, float]] = []
    n = engine.civ_count
    if n == 0 or max_points <= 0:
        return out
    stride = max(1, n // max_points)
    alive = engine.civ_alive
    pos = engine.civ_pos
    for i in range(0, n, stride):
        if len(out) >= max_points:
            break
        if not alive[i]:
            continue
        out.append((float(pos[i * 3]), float(pos[i * 3 + 2])))
    return out
