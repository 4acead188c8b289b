import pytest

from dark_forest.rng import Xorshift32


def test_first_output_for_seed_one():
    rng = Xorshift32(1)
    assert rng.next_u32() == 270369


def test_same_seed_same_stream():
    a = Xorshift32(42)
    b = Xorshift32(42)
    assert [a.random() for _ in range(200)] == [b.random() for _ in range(200)]


def test_different_seeds_diverge():
    a = Xorshift32(42)
    b = Xorshift32(43)
    assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]


def test_outputs_in_unit_interval():
    rng = Xorshift32(7)
    for _ in range(5000):
        u = rng.random()
        assert 0.0 <= u <= 1.0


def test_reseed_restores_stream():
    rng = Xorshift32(99)
    first = [rng.random() for _ in range(20)]
    rng.reseed(99)
    assert [rng.random() for _ in range(20)] == first
    assert rng.seed == 99


@pytest.mark.parametrize("seed", [0, 2 ** 32, -(2 ** 32)])
def test_zero_state_rejected(seed):
    with pytest.raises(ValueError):
        Xorshift32(seed)


def test_negative_seed_wraps_like_int32():
    assert Xorshift32(-1).seed == 0xFFFFFFFF


def test_symmetric_noise_bounded():
    rng = Xorshift32(5)
    values = [rng.symmetric(0.15) for _ in range(2000)]
    assert all(-0.15 <= v <= 0.15 for v in values)
    assert any(v < 0 for v in values) and any(v > 0 for v in values)
