"""Bit source implementations."""

from __future__ import annotations

import numpy as np

from ring_trng.sources.base import BitSource
from ring_trng.sources.fallback import FallbackSource
from ring_trng.sources.oscillator import RingOscillatorSource

ALL_SOURCES: list[type[BitSource]] = [
    RingOscillatorSource,
    FallbackSource,
]


def make_source(
    length: int,
    use_fallback: bool = False,
    rng: np.random.Generator | None = None,
    steps_per_tick: float = 16.0,
) -> BitSource:
    """Build the bit source selected by *use_fallback*."""
    if use_fallback:
        return FallbackSource(length)
    return RingOscillatorSource(length, rng=rng, steps_per_tick=steps_per_tick)


__all__ = ["BitSource", "FallbackSource", "RingOscillatorSource", "ALL_SOURCES", "make_source"]
