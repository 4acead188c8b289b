import math
import os

from .config import StrategyMix
from .rng import Xorshift32
from .types import Strategy, Vec3


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def sample_in_sphere(rng: Xorshift32, radius: float) -> Vec3:
    # cube root keeps volumetric density uniform; acos(1 - 2u) keeps latitude uniform
    r = radius * rng.random() ** (1.0 / 3.0)
    theta = math.acos(1.0 - 2.0 * rng.random())
    phi = 2.0 * math.pi * rng.random()
    sin_t = math.sin(theta)
    return (r * sin_t * math.cos(phi), r * sin_t * math.sin(phi), r * math.cos(theta))


def pick_strategy(u: float, mix: StrategyMix) -> Strategy:
    c0, c1, c2 = mix.cumulative()
    if u < c0:
        return Strategy.SILENT
    if u < c1:
        return Strategy.BROADCAST
    if u < c2:
        return Strategy.CAUTIOUS
    return Strategy.PREEMPTIVE


def distance_sq(a: Vec3, b: Vec3) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    dz = a[2] - b[2]
    return dx * dx + dy * dy + dz * dz
