import pytest

from dark_forest.config import EngineParams
from dark_forest.poi import (
    pick_densest,
    pick_frontier,
    pick_nearest,
    pick_strongest,
    sample_civs,
)
from dark_forest.simulation import Engine


@pytest.fixture
def empty_engine():
    params = EngineParams(max_stars=0, max_civs=10, civ_spawn_prob=0.0)
    return Engine(params, seed=4)


def _place(engine, positions, techs=None):
    for k, p in enumerate(positions):
        i = engine.spawn_random_civ()
        engine.civ_pos[i * 3:i * 3 + 3] = p
        if techs is not None:
            engine.civ_tech[i] = techs[k]


def test_no_civs_gives_minus_one(empty_engine):
    assert pick_strongest(empty_engine) == -1
    assert pick_frontier(empty_engine) == -1
    assert pick_nearest(empty_engine, (0.0, 0.0, 0.0)) == -1
    assert pick_densest(empty_engine) == -1
    assert sample_civs(empty_engine) == []


def test_picks_skip_dead_civs(empty_engine):
    _place(empty_engine, [(1.0, 0.0, 0.0), (5.0, 0.0, 0.0), (0.0, 2.0, 0.0)], techs=[0.2, 0.9, 0.5])
    assert pick_strongest(empty_engine) == 1
    assert pick_frontier(empty_engine) == 1
    assert pick_nearest(empty_engine, (0.0, 1.5, 0.0)) == 2

    empty_engine.civ_alive[1] = 0
    assert pick_strongest(empty_engine) == 2
    assert pick_frontier(empty_engine) == 2
    assert pick_nearest(empty_engine, (5.0, 0.0, 0.0)) == 0


def test_strongest_tie_keeps_first(empty_engine):
    _place(empty_engine, [(0.1, 0.0, 0.0), (0.2, 0.0, 0.0)], techs=[0.5, 0.5])
    assert pick_strongest(empty_engine) == 0


def test_densest_returns_middle_of_fullest_cell(empty_engine):
    _place(empty_engine, [
        (-0.5, -0.5, -0.5),
        (0.5, 0.5, 0.5),
        (0.6, 0.6, 0.6),
        (0.7, 0.5, 0.5),
    ])
    # radius 1.0 and 2 cells per axis: indices 1..3 share the (1, 1, 1) cell
    assert pick_densest(empty_engine, cells=2) == 2


def test_sample_civs_strides_and_projects(empty_engine):
    _place(empty_engine, [(float(k), float(k) * 10, float(k) * 100) for k in range(10)])
    pts = sample_civs(empty_engine, max_points=5)
    assert pts == [(0.0, 0.0), (2.0, 200.0), (4.0, 400.0), (6.0, 600.0), (8.0, 800.0)]

    empty_engine.civ_alive[2] = 0
    pts = sample_civs(empty_engine, max_points=5)
    assert (2.0, 200.0) not in pts
    assert len(pts) == 4


def test_poi_helpers_do_not_mutate(engine):
    engine.run(30)
    before = engine.snapshot()
    pick_strongest(engine)
    pick_frontier(engine)
    pick_nearest(engine, (0.0, 0.0, 0.0))
    pick_densest(engine)
    sample_civs(engine)
    assert engine.snapshot() == before
