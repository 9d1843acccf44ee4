"""Bit combining and de-biasing.

Both run inside the pipeline once per clock tick.
"""

from __future__ import annotations

from functools import reduce
from operator import xor
from typing import Iterable


def xor_combine(bits: Iterable[int]) -> int:
    """XOR-reduce the current cell outputs into one raw bit."""
    return reduce(xor, bits, 0) & 1


class VonNeumannExtractor:
    """Two-sample von Neumann de-biaser over a serial bit stream.

    ``samples`` holds ``(previous, latest)`` raw bits. ``phase`` toggles on
    every tick while the last cell is enabled and is held at 0 otherwise,
    so each pair of adjacent samples is looked at exactly once. A pair is
    accepted when ``phase`` is set and the two samples differ (0→1 or
    1→0); the emitted bit is the latest sample. Equal pairs are dropped.
    """

    def __init__(self) -> None:
        self.previous = 0
        self.latest = 0
        self.phase = 0

    @property
    def samples(self) -> tuple[int, int]:
        return (self.previous, self.latest)

    @property
    def valid(self) -> bool:
        return bool(self.phase and self.previous != self.latest)

    @property
    def bit(self) -> int:
        return self.latest

    def clock(self, raw_bit: int, last_cell_enabled: int) -> None:
        self.previous, self.latest = self.latest, raw_bit & 1
        self.phase = (self.phase ^ 1) & (1 if last_cell_enabled else 0)

    def reset(self) -> None:
        self.previous = self.latest = self.phase = 0

