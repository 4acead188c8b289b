from __future__ import annotations
from dataclasses import dataclass, field, fields, asdict, replace
from typing import Any, Dict, Mapping
import json
import logging
import math

logger = logging.getLogger(__name__)


class InvalidParamsError(ValueError):
    """Raised at construction time when EngineParams cannot drive a run."""


@dataclass(frozen=True)
class StrategyMix:
    silent: float = 0.4
    broadcast: float = 0.2
    cautious: float = 0.25
    preemptive: float = 0.15

    def cumulative(self) -> tuple[float, float, float]:
        # cut points for silent | broadcast | cautious | preemptive
        c0 = self.silent
        c1 = c0 + self.broadcast
        c2 = c1 + self.cautious
        return c0, c1, c2

    def total(self) -> float:
        return self.silent + self.broadcast + self.cautious + self.preemptive


@dataclass(frozen=True)
class EngineParams:
    # Volume growth
    radius_start: float = 1.0
    radius_growth_per_sec: float = 0.08

    # Density
    star_density_per_vol: float = 30.0
    civ_spawn_prob: float = 0.05

    # Survey cadence
    survey_tick_hz: float = 4.0
    survey_duty_cycle: float = 0.18
    cands_per_tick: int = 20

    # Survey instrument model (carried for hosts; not consumed by step())
    snr_thresh_angle: float = 6.0
    snr_thresh_parallax: float = 7.0
    geom_factor: float = 0.25
    zodi_min: float = 0.5
    zodi_max: float = 3.0
    star_noise_min: float = 0.2
    star_noise_max: float = 1.2
    t_cap: float = 1.5
    range_base: float = 0.1
    range_scale: float = 0.55
    budget_base: float = 2.0
    budget_scale: float = 8.0

    # Detection
    p_detect_base_min: float = 0.15
    p_detect_base_max: float = 0.7
    r_detect_base: float = 0.12
    detect_tech_inflation: float = 0.06
    p_detect_signal: float = 0.85

    # Conflict
    p_kill_base: float = 0.7
    p_retaliate: float = 0.55
    rel_tech_swing: float = 0.15

    # Kinematics / navigation error
    light_speed: float = 0.25
    target_vrms: float = 0.02
    nav_scale_ang: float = 0.015
    nav_scale_rad: float = 0.15

    reveal_fade_prob: float = 0.05

    mix: StrategyMix = field(default_factory=StrategyMix)

    # Hard capacities
    max_stars: int = 150_000
    max_civs: int = 20_000

    # Background star field (separate mulberry32 stream)
    star_seed: int = 1337
    star_radius: float = 200_000.0

    # tech-aware detection, retaliation and reveal fading
    extended_conflict: bool = False

    def validate(self) -> "EngineParams":
        """Check the params can drive a run; returns self so calls chain.

        A strategy mix that does not sum to 1 is tolerated (the preemptive
        bucket absorbs the difference) and only logged.
        """
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParamsError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidParamsError(f"{name} must be >= 0, got {value}")
        if not self.survey_tick_hz > 0:
            raise InvalidParamsError(f"survey_tick_hz must be > 0, got {self.survey_tick_hz}")

        for name in ("radius_start", "radius_growth_per_sec", "star_density_per_vol",
                     "r_detect_base", "nav_scale_rad", "star_radius"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidParamsError(f"{name} must be a finite value >= 0, got {value}")

        for name in ("civ_spawn_prob", "p_detect_base_min", "p_detect_base_max",
                     "p_kill_base", "p_retaliate", "reveal_fade_prob"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidParamsError(f"{name} must be within [0, 1], got {value}")

        if self.p_detect_base_min > self.p_detect_base_max:
            raise InvalidParamsError(
                f"p_detect_base_min ({self.p_detect_base_min}) exceeds "
                f"p_detect_base_max ({self.p_detect_base_max})"
            )

        for f in fields(StrategyMix):
            value = getattr(self.mix, f.name)
            if not (math.isfinite(value) and value >= 0):
                raise InvalidParamsError(f"mix.{f.name} must be a finite value >= 0, got {value}")

        total = self.mix.total()
        if abs(total - 1.0) > 1e-6:
            logger.warning("strategy mix sums to %.6f; preemptive absorbs the remainder", total)
        return self

    def with_overrides(self, **overrides: Any) -> "EngineParams":
        if isinstance(overrides.get("mix"), Mapping):
            overrides["mix"] = StrategyMix(**overrides["mix"])
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineParams":
        """Build params from snake_case or camelCase keys (``pKillBase``)."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise InvalidParamsError(f"unknown parameter: {key}")
            if name in _INT_FIELDS and isinstance(value, float) and value.is_integer():
                # JSON writers often emit 1e3 or 3000.0 for counts
                value = int(value)
            kwargs[name] = value

        mix = kwargs.get("mix")
        if isinstance(mix, Mapping):
            unknown = set(mix) - {f.name for f in fields(StrategyMix)}
            if unknown:
                raise InvalidParamsError(f"unknown strategy in mix: {sorted(unknown)}")
            kwargs["mix"] = StrategyMix(**mix)
        return cls(**kwargs)


_INT_FIELDS = ("max_stars", "max_civs", "cands_per_tick", "star_seed")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# camelCase aliases accepted by from_dict (radiusStart, pKillBase, ...)
_ALIASES: Dict[str, str] = {_camel(f.name): f.name for f in fields(EngineParams)}
_ALIASES["Tcap"] = "t_cap"


def load_params(path: str) -> EngineParams:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise InvalidParamsError(f"{path}: expected a JSON object of parameters")
    return EngineParams.from_dict(data)


@dataclass
class EngineControls:
    """Host-owned runtime switches. Each gates one named part of step()."""

    paused: bool = False     # whole step
    violence: bool = True    # detection / conflict resolution
    expansion: bool = True   # survey radius growth
