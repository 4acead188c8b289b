from __future__ import annotations
import logging
import math
from typing import Optional, TYPE_CHECKING

import numpy as np

from .config import EngineParams, EngineControls
from .entities import CivView, StarView
from .rng import Xorshift32
from .types import Snapshot, Strategy
from .utils import clamp, pick_strategy, sample_in_sphere
from .world import CivBuffers, StarBuffers

if TYPE_CHECKING:
    from .metrics import Metrics

logger = logging.getLogger(__name__)


class Engine:
    """
    Dark Forest survey simulation:
    - a spherical survey volume that grows at a fixed rate per tick
    - stars filled in to a constant density inside the sphere
    - civilizations spawned by a per-tick Bernoulli draw, each with a strategy
    - every living civ tries to detect every other one; a detection may end
      in the target being destroyed (tombstoned, never removed)

    All randomness comes from one xorshift32 stream, consumed in a fixed
    order, so (params, seed) fully determines a run.
    """

    def __init__(self, params: EngineParams, seed: int, controls: Optional[EngineControls] = None):
        self.params = params.validate()
        self.controls = controls if controls is not None else EngineControls()
        self.seed = seed
        self.rng = Xorshift32(seed)

        self.stars = StarBuffers(params.max_stars)
        self.civs = CivBuffers(params.max_civs)

        logger.debug(
            "engine created seed=%s max_stars=%d max_civs=%d",
            seed, params.max_stars, params.max_civs,
        )
        self.reset()

    # --------------------- read-only surface ---------------------------------

    @property
    def star_count(self) -> int:
        return self.stars.count

    @property
    def civ_count(self) -> int:
        return self.civs.count

    @property
    def star_pos(self) -> np.ndarray:
        return self.stars.pos

    @property
    def star_lum(self) -> np.ndarray:
        return self.stars.lum

    @property
    def civ_pos(self) -> np.ndarray:
        return self.civs.pos

    @property
    def civ_alive(self) -> np.ndarray:
        return self.civs.alive

    @property
    def civ_strat(self) -> np.ndarray:
        return self.civs.strat

    @property
    def civ_tech(self) -> np.ndarray:
        return self.civs.tech

    @property
    def civ_revealed(self) -> np.ndarray:
        return self.civs.revealed

    def star(self, i: int) -> StarView:
        if not 0 <= i < self.stars.count:
            raise IndexError(f"star index {i} out of range (count={self.stars.count})")
        return StarView(index=i, pos=self.stars.position(i), lum=float(self.stars.lum[i]))

    def civ(self, i: int) -> CivView:
        if not 0 <= i < self.civs.count:
            raise IndexError(f"civ index {i} out of range (count={self.civs.count})")
        return CivView(
            index=i,
            pos=self.civs.position(i),
            strategy=Strategy(int(self.civs.strat[i])),
            alive=bool(self.civs.alive[i]),
            tech=float(self.civs.tech[i]),
            revealed=bool(self.civs.revealed[i]),
        )

    # --------------------- lifecycle -----------------------------------------

    def reset(self) -> None:
        """Return to the empty initial world and restart the seeded stream."""
        self.step_index = 0
        self.time = 0.0
        self.radius = self.params.radius_start

        self.stars.clear()
        self.civs.clear()

        self.reveals_b = 0
        self.reveals_s = 0
        self.reveals_r = 0
        self.kills_this_step = 0
        self.total_kills = 0

        self.rng.reseed(self.seed)
        self._saturation_logged = {"stars": False, "civs": False}
        logger.debug("engine reset radius=%.4f", self.radius)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            step=self.step_index,
            time=self.time,
            radius=self.radius,
            alive=self.civs.alive_count(),
            total_civs=self.civs.count,
            reveals_b=self.reveals_b,
            reveals_s=self.reveals_s,
            reveals_r=self.reveals_r,
            kills_this_step=self.kills_this_step,
            total_kills=self.total_kills,
        )

    def step(self) -> None:
        """
        Advance the survey by one tick.

        A paused call is not a step: it returns before anything changes,
        kills_this_step included, so that field still holds the last real
        step's count. Callers summing per-step kills should only count calls
        that advanced snapshot().step.
        """
        if self.controls.paused:
            return

        p = self.params
        self.kills_this_step = 0

        # 1) grow the survey sphere
        if self.controls.expansion:
            self.radius += p.radius_growth_per_sec / p.survey_tick_hz

        # 2) fill stars up to the density target
        volume = 4.0 / 3.0 * math.pi * self.radius ** 3
        desired = min(p.max_stars, math.floor(volume * p.star_density_per_vol))
        while self.stars.count < desired:
            self._spawn_star()

        # 3) maybe one new civilization
        if self.rng.random() < p.civ_spawn_prob:
            self._spawn_civ()

        # 4) detection and conflict
        if self.controls.violence:
            self._resolve_conflicts()

        self.step_index += 1
        self.time += 1.0 / p.survey_tick_hz

    def run(self, steps: int, metrics: Optional["Metrics"] = None) -> Snapshot:
        for _ in range(steps):
            self.step()
            if metrics is not None:
                metrics.log_snapshot(self.snapshot(), self.stars.count)
        return self.snapshot()

    # --------------------- spawning -----------------------------------------

    def spawn_random_civ(self) -> int:
        """Spawn one civ outside the per-tick gate. Returns -1 when full."""
        i = self._spawn_civ()
        return -1 if i is None else i

    def spawn_random_stars(self, n: int) -> None:
        for _ in range(max(0, n)):
            if self._spawn_star() is None:
                break

    def _spawn_star(self) -> Optional[int]:
        if self.stars.full():
            self._note_saturated("stars")
            return None
        pos = sample_in_sphere(self.rng, self.radius)
        lum = 0.7 + 0.3 * self.rng.random()
        return self.stars.append(pos, lum)

    def _spawn_civ(self) -> Optional[int]:
        if self.civs.full():
            self._note_saturated("civs")
            return None
        pos = sample_in_sphere(self.rng, self.radius)
        strategy = pick_strategy(self.rng.random(), self.params.mix)
        tech = self.rng.random()
        return self.civs.append(pos, strategy, tech)

    def _note_saturated(self, kind: str) -> None:
        if not self._saturation_logged[kind]:
            self._saturation_logged[kind] = True
            logger.debug("%s buffer saturated at step %d; further spawns dropped", kind, self.step_index)

    # --------------------- conflict -----------------------------------------

    def _resolve_conflicts(self) -> None:
        p = self.params
        n = self.civs.count

        # positions are fixed during the scan; alive flags are read live
        pos = self.civs.pos[:n * 3].tolist()
        alive = self.civs.alive
        strat = self.civs.strat
        tech = self.civs.tech
        revealed = self.civs.revealed
        extended = p.extended_conflict

        for i in range(n):
            if not alive[i]:
                continue
            ax, ay, az = pos[i * 3], pos[i * 3 + 1], pos[i * 3 + 2]
            for j in range(n):
                if i == j or not alive[j]:
                    continue
                if not self._detect(ax, ay, az, pos[j * 3], pos[j * 3 + 1], pos[j * 3 + 2],
                                    float(tech[i]) if extended else 0.0):
                    continue

                self.reveals_s += 1
                if int(strat[j]) == Strategy.BROADCAST:
                    self.reveals_b += 1
                revealed[j] = 1

                if self._kill(i, j):
                    continue
                if extended and self.rng.random() < p.p_retaliate:
                    # the target strikes back at the revealed attacker
                    self.reveals_r += 1
                    revealed[i] = 1
                    alive[i] = 0
                    self.kills_this_step += 1
                    self.total_kills += 1
                    break

        if extended:
            self._fade_reveals()

    def _detect(self, ax: float, ay: float, az: float,
                bx: float, by: float, bz: float, observer_tech: float) -> bool:
        p = self.params
        nav = p.nav_scale_rad
        dx = ax - bx + self.rng.symmetric(nav)
        dy = ay - by + self.rng.symmetric(nav)
        dz = az - bz + self.rng.symmetric(nav)
        dist = math.sqrt(dx * dx + dy * dy + dz * dz)
        prob = p.p_detect_base_min + (p.p_detect_base_max - p.p_detect_base_min) * math.exp(-dist * p.r_detect_base)
        if p.extended_conflict:
            prob = min(1.0, prob * (1.0 + p.detect_tech_inflation * observer_tech))
        return self.rng.random() < prob

    def _kill(self, attacker: int, target: int) -> bool:
        if not self.civs.alive[target]:
            return False
        p = self.params
        prob = p.p_kill_base
        if p.extended_conflict:
            swing = float(self.civs.tech[attacker] - self.civs.tech[target])
            prob = clamp(prob * (1.0 + p.rel_tech_swing * swing), 0.0, 1.0)
        if self.rng.random() < prob:
            self.civs.alive[target] = 0
            self.kills_this_step += 1
            self.total_kills += 1
            return True
        return False

    def _fade_reveals(self) -> None:
        revealed = self.civs.revealed
        fade = self.params.reveal_fade_prob
        for i in range(self.civs.count):
            if revealed[i] and self.rng.random() < fade:
                revealed[i] = 0
