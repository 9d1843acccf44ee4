"""Entropy cell: bit source, enable shift register and output synchronizer."""

from __future__ import annotations

import numpy as np

from ring_trng.config import CellConfig
from ring_trng.sources import BitSource, make_source


class EntropyCell:
    """One replicated cell of the enable chain.

    The enable input is shifted into ``enable_register`` bit 0 on every
    edge. Bit *k* of that register releases oscillator stage *k*, and the
    top bit is the cell's :attr:`enable_out`: the enable needs ``length``
    ticks to reach the next cell and ``length`` ticks to release every
    stage here.

    The oscillator's top stage goes through a two-flop synchronizer before
    leaving the cell as :attr:`output`.
    """

    def __init__(
        self,
        config: CellConfig,
        rng: np.random.Generator | None = None,
        steps_per_tick: float = 16.0,
    ) -> None:
        config.validate()
        self.config = config
        self.length = config.length
        self.source: BitSource = make_source(
            config.length, config.use_fallback, rng=rng, steps_per_tick=steps_per_tick
        )
        self._enable_sreg = [0] * self.length
        self._sync = [0, 0]

    # ── outputs (current register values) ──

    @property
    def enable_out(self) -> int:
        return self._enable_sreg[-1]

    @property
    def output(self) -> int:
        return self._sync[1]

    @property
    def enable_register(self) -> tuple[int, ...]:
        return tuple(self._enable_sreg)

    @property
    def sync_register(self) -> tuple[int, ...]:
        return tuple(self._sync)

    # ── per-tick update ──

    def clock(self, enable_in: int) -> None:
        """Rising edge. *enable_in* is the input value before the edge."""
        stage_enables = tuple(self._enable_sreg)
        sampled = self.source.top
        self._sync = [sampled, self._sync[0]]
        self._enable_sreg = [enable_in] + self._enable_sreg[:-1]
        self.source.clock(enable_in, stage_enables)

    def settle(self, enable_in: int) -> None:
        """Between edges. *enable_in* is the input value after the edge."""
        self.source.settle(enable_in, tuple(self._enable_sreg))

    def reset(self) -> None:
        self._enable_sreg = [0] * self.length
        self._sync = [0, 0]
        self.source.reset()

    def __repr__(self) -> str:
        return f"<EntropyCell length={self.length} source={self.source.name!r}>"
