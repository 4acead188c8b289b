from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import IntEnum
from typing import Any, Dict, Tuple


Vec3 = Tuple[float, float, float]


class Strategy(IntEnum):
    SILENT = 0
    BROADCAST = 1
    CAUTIOUS = 2
    PREEMPTIVE = 3


@dataclass(frozen=True)
class Snapshot:
    step: int
    time: float
    radius: float
    alive: int
    total_civs: int
    reveals_b: int
    reveals_s: int
    reveals_r: int
    kills_this_step: int
    total_kills: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
