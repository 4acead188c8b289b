import numpy as np
import pytest

from dark_forest.config import EngineParams
from dark_forest.rng import Mulberry32
from dark_forest.simulation import Engine
from dark_forest.starfield import build_starfield, generate_stars


def test_mulberry32_is_deterministic_and_half_open():
    a, b = Mulberry32(1337), Mulberry32(1337)
    xs = [a.random() for _ in range(500)]
    assert xs == [b.random() for _ in range(500)]
    assert all(0.0 <= x < 1.0 for x in xs)
    assert xs != [Mulberry32(1338).random() for _ in range(500)]


def test_same_seed_gives_same_field():
    first = generate_stars(400, 200_000.0, 1337)
    second = generate_stars(400, 200_000.0, 1337)
    np.testing.assert_array_equal(first.pos, second.pos)
    np.testing.assert_array_equal(first.lum, second.lum)


def test_different_seeds_give_different_fields():
    a = generate_stars(50, 100.0, 1)
    b = generate_stars(50, 100.0, 2)
    assert not np.array_equal(a.pos, b.pos)


def test_field_lies_inside_radius_with_bright_stars():
    field = generate_stars(1000, 50.0, 7)
    assert field.count == 1000
    assert field.pos.shape == (1000, 3)
    dist = np.sqrt((field.pos ** 2).sum(axis=1))
    assert dist.max() <= 50.0 + 1e-9
    assert field.lum.min() >= 0.7
    assert field.lum.max() <= 1.0


def test_build_starfield_uses_params():
    params = EngineParams(max_stars=300, star_seed=99, star_radius=10.0)
    field = build_starfield(params)
    assert field.count == 300
    assert field.seed == 99
    assert field.radius == 10.0
    assert build_starfield(params, 5000).count == 300
    assert build_starfield(params, 20).count == 20


@pytest.mark.parametrize("overrides", [{"star_radius": -1.0}, {"star_seed": -3}])
def test_starfield_params_validated(overrides):
    with pytest.raises(ValueError):
        EngineParams(**overrides).validate()


def test_field_does_not_shift_engine_stream(small_params):
    plain = Engine(small_params, seed=42).run(30)
    engine = Engine(small_params, seed=42)
    build_starfield(small_params, 200)
    assert engine.run(30) == plain
