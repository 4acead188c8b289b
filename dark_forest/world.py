from __future__ import annotations
from typing import Optional

import numpy as np

from .types import Strategy, Vec3


class StarBuffers:
    """
    Fixed-capacity star storage. Only the first ``count`` entries are valid;
    the rest is leftover data from before the last clear().
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.pos = np.zeros(capacity * 3, dtype=np.float64)
        self.lum = np.zeros(capacity, dtype=np.float64)
        self.count = 0

    def full(self) -> bool:
        return self.count >= self.capacity

    def clear(self) -> None:
        self.count = 0

    def append(self, p: Vec3, lum: float) -> Optional[int]:
        if self.full():
            return None
        i = self.count
        self.pos[i * 3:i * 3 + 3] = p
        self.lum[i] = lum
        self.count += 1
        return i

    def position(self, i: int) -> Vec3:
        x, y, z = self.pos[i * 3:i * 3 + 3].tolist()
        return x, y, z


class CivBuffers:
    """
    Fixed-capacity civilization storage (struct of arrays).

    Slots are never compacted: a killed civilization keeps its index with
    ``alive == 0`` so indices held by the host stay valid for the whole run.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.pos = np.zeros(capacity * 3, dtype=np.float64)
        self.alive = np.zeros(capacity, dtype=np.uint8)
        self.strat = np.zeros(capacity, dtype=np.uint8)
        self.tech = np.zeros(capacity, dtype=np.float64)
        self.revealed = np.zeros(capacity, dtype=np.uint8)
        self.count = 0

    def full(self) -> bool:
        return self.count >= self.capacity

    def clear(self) -> None:
        self.count = 0

    def append(self, p: Vec3, strategy: Strategy, tech: float) -> Optional[int]:
        if self.full():
            return None
        i = self.count
        self.pos[i * 3:i * 3 + 3] = p
        self.strat[i] = int(strategy)
        self.tech[i] = tech
        self.alive[i] = 1
        self.revealed[i] = 0
        self.count += 1
        return i

    def position(self, i: int) -> Vec3:
        x, y, z = self.pos[i * 3:i * 3 + 3].tolist()
        return x, y, z

    def alive_count(self) -> int:
        return int(np.count_nonzero(self.alive[:self.count]))
