"""Free-running ring oscillator model."""

from __future__ import annotations

import numpy as np

from ring_trng.sources.base import BitSource


class RingOscillatorSource(BitSource):
    """Ring of ``length`` inverting latches.

    Stage 0 inverts the last stage, stage *k* inverts stage *k-1*. A latch
    is transparent only while the cell enable and its own stage enable are
    both set, otherwise it holds; a low cell enable clears it. Stages are
    released one tick apart by the cell's enable shift register, so the ring
    cannot start in a symmetric all-equal state.

    The ring is not clocked: between two clock edges it runs for a random
    number of evaluations. The draw stands in for the phase noise of a real
    oscillator against the sampling clock, so the output is only
    reproducible when a seeded generator is passed in.
    """

    name = "ring_oscillator"
    description = "Free-running inverter ring sampled by the system clock"
    deterministic = False

    def __init__(
        self,
        length: int,
        rng: np.random.Generator | None = None,
        steps_per_tick: float = 16.0,
    ) -> None:
        super().__init__(length)
        self._rng = rng if rng is not None else np.random.default_rng()
        self.steps_per_tick = steps_per_tick

    def clock(self, enable: int, stage_enables: tuple[int, ...]) -> None:
        # Latches have no clock input; only the async clear applies here.
        if not enable:
            self.reset()

    def settle(self, enable: int, stage_enables: tuple[int, ...]) -> None:
        if not enable:
            self.reset()
            return
        if not any(stage_enables):
            return
        steps = max(1, int(self._rng.poisson(self.steps_per_tick)))
        for _ in range(steps):
            self._evaluate(stage_enables)

    def _evaluate(self, stage_enables: tuple[int, ...]) -> None:
        cur = self._stages
        self._stages = [
            (cur[k - 1] ^ 1) if stage_enables[k] else cur[k]
            for k in range(self.length)
        ]
