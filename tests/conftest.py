"""Shared fixtures for the dark forest engine tests."""

import pytest

from dark_forest.config import EngineParams, StrategyMix
from dark_forest.simulation import Engine


@pytest.fixture
def small_params():
    """Small capacities and a busy spawn rate so a few dozen steps see conflict."""
    return EngineParams(
        max_stars=2000,
        max_civs=40,
        radius_start=1.0,
        radius_growth_per_sec=0.08,
        survey_tick_hz=4,
        civ_spawn_prob=0.6,
        star_density_per_vol=30,
        p_kill_base=0.5,
    )


@pytest.fixture
def engine(small_params):
    """Engine seeded with 42."""
    return Engine(small_params, seed=42)


@pytest.fixture
def silent_params():
    """Scenario params: one civ per step, all silent, no kills."""
    return EngineParams(
        max_stars=1000,
        max_civs=50,
        radius_start=1.0,
        radius_growth_per_sec=0.08,
        survey_tick_hz=4,
        civ_spawn_prob=1.0,
        star_density_per_vol=30,
        mix=StrategyMix(silent=1.0, broadcast=0.0, cautious=0.0, preemptive=0.0),
        p_kill_base=0.0,
    )
