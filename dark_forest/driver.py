from __future__ import annotations
import logging
import math
from typing import Optional

from .simulation import Engine

logger = logging.getLogger(__name__)


class FixedRateDriver:
    """
    Host-side stepping policy: turns wall-clock frame deltas into a whole
    number of engine.step() calls so simulated time advances at ``rate_hz``
    regardless of the frame rate. The fractional remainder carries over.
    """

    def __init__(self, engine: Engine, rate_hz: float = 60.0, max_steps_per_advance: Optional[int] = None):
        if rate_hz <= 0:
            raise ValueError(f"rate_hz must be > 0, got {rate_hz}")
        self.engine = engine
        self.rate_hz = rate_hz
        self.max_steps_per_advance = max_steps_per_advance
        self._acc = 0.0

    @property
    def backlog(self) -> float:
        """Seconds accumulated but not yet turned into steps."""
        return self._acc

    def advance(self, dt: float) -> int:
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        if self.engine.controls.paused:
            return 0

        self._acc += dt
        steps = math.floor(self._acc * self.rate_hz)
        if steps <= 0:
            return 0
        self._acc -= steps / self.rate_hz

        cap = self.max_steps_per_advance
        if cap is not None and steps > cap:
            logger.debug("dropping %d steps of backlog", steps - cap)
            steps = cap
            self._acc = 0.0

        for _ in range(steps):
            self.engine.step()
        return steps
