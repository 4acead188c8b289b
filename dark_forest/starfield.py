"""
Static background star field.

Unlike the survey stars the engine fills in step by step, this field is built
once for the whole galaxy (``star_radius`` across, ``star_seed`` seeded) and
never changes. It draws from its own mulberry32 stream.
"""
from __future__ import annotations
from dataclasses import dataclass
import math

import numpy as np

from .config import EngineParams
from .rng import Mulberry32


@dataclass
class StarField:
    pos: np.ndarray   # (count, 3)
    lum: np.ndarray   # (count,)
    radius: float
    seed: int

    @property
    def count(self) -> int:
        return len(self.lum)


def generate_stars(count: int, radius: float, seed: int) -> StarField:
    rnd = Mulberry32(seed)
    pos = np.zeros((count, 3), dtype=np.float64)
    lum = np.zeros(count, dtype=np.float64)
    for i in range(count):
        u, v, w = rnd.random(), rnd.random(), rnd.random()
        theta = 2.0 * math.pi * u
        phi = math.acos(2.0 * v - 1.0)
        r = radius * w ** (1.0 / 3.0)
        sin_phi = math.sin(phi)
        pos[i] = (r * sin_phi * math.cos(theta), r * sin_phi * math.sin(theta), r * math.cos(phi))
        # mostly bright, 0.7 to 1.0
        lum[i] = 0.7 + rnd.random() * 0.3
    return StarField(pos=pos, lum=lum, radius=radius, seed=seed)


def build_starfield(params: EngineParams, count: int | None = None) -> StarField:
    n = params.max_stars if count is None else min(count, params.max_stars)
    return generate_stars(n, params.star_radius, params.star_seed)
