"""Deterministic fallback source for simulation and regression tests.

Never use this as a production entropy source: its output is a fixed
function of the enable timing.
"""

from __future__ import annotations

from ring_trng.sources.base import BitSource


class FallbackSource(BitSource):
    """Shift register with XNOR feedback of the top bit and bit 0."""

    name = "fallback_lfsr"
    description = "Deterministic XNOR shift register (simulation only)"
    deterministic = True

    def clock(self, enable: int, stage_enables: tuple[int, ...]) -> None:
        if not enable:
            self.reset()
            return
        feedback = (self._stages[-1] ^ self._stages[0]) ^ 1
        self._stages = [feedback] + self._stages[:-1]

    def settle(self, enable: int, stage_enables: tuple[int, ...]) -> None:
        if not enable:
            self.reset()
