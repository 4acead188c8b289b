from __future__ import annotations

_MASK32 = 0xFFFFFFFF


class Xorshift32:
    """
    Marsaglia xorshift32 stream (13, 17, 5).
    random() maps the 32-bit state onto [0, 1] by dividing by 2**32 - 1.
    """

    def __init__(self, seed: int):
        self.reseed(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reseed(self, seed: int) -> None:
        state = int(seed) & _MASK32
        if state == 0:
            # zero is the xorshift fixed point
            raise ValueError(f"seed {seed} reduces to a zero xorshift state")
        self._seed = state
        self._state = state

    def next_u32(self) -> int:
        x = self._state
        x ^= (x << 13) & _MASK32
        x ^= x >> 17
        x ^= (x << 5) & _MASK32
        self._state = x
        return x

    def random(self) -> float:
        return self.next_u32() / _MASK32

    def symmetric(self, scale: float) -> float:
        return (self.random() * 2.0 - 1.0) * scale


class Mulberry32:
    """
    Mulberry32 stream used for the static background star field. It is kept
    apart from the engine's xorshift stream so building the field never
    shifts a simulation run. random() is in [0, 1).
    """

    def __init__(self, seed: int):
        self._state = int(seed) & _MASK32

    def random(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return (t ^ (t >> 14)) / 4294967296.0


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32
