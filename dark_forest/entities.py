from __future__ import annotations
from dataclasses import dataclass
from .types import Strategy, Vec3


@dataclass(frozen=True)
class StarView:
    index: int
    pos: Vec3
    lum: float


@dataclass(frozen=True)
class CivView:
    """Copy of one civilization slot, taken at read time."""

    index: int
    pos: Vec3
    strategy: Strategy
    alive: bool
    tech: float
    revealed: bool

    def distance_from_origin(self) -> float:
        x, y, z = self.pos
        return (x * x + y * y + z * z) ** 0.5
