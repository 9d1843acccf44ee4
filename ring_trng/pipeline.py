"""Top-level TRNG pipeline.

Architecture, leaf to root:
1. N entropy cells with distinct odd oscillator lengths
2. Chained enables: each cell wakes the next once its own chain is full
3. XOR-combine the synchronized cell outputs into one raw bit
4. Von Neumann de-biasing over non-overlapping pairs of raw bits
5. LFSR-style mixing of accepted bits, one byte per 64 of them

All state is owned by one :class:`TrngPipeline`; :meth:`TrngPipeline.advance`
is one rising clock edge. Every register value is read before any is
written, so the tick order of components does not matter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from ring_trng.cell import EntropyCell
from ring_trng.conditioning import VonNeumannExtractor, xor_combine
from ring_trng.config import TrngConfig
from ring_trng.log import get_logger
from ring_trng.sampling import BATCH_BITS, SamplingController

logger = get_logger(__name__)

# Tick budget per requested byte for collect(); a healthy pipeline needs
# about 2 * BATCH_BITS / acceptance rate.
TICKS_PER_BYTE_BUDGET = 64 * BATCH_BITS


class PipelineStalled(RuntimeError):
    """Raised when :meth:`TrngPipeline.collect` runs out of ticks."""


@dataclass(frozen=True)
class TickResult:
    """Outputs after one clock edge. ``byte`` is meaningful only if ``valid``."""

    byte: int
    valid: bool


@dataclass(frozen=True)
class CellState:
    length: int
    enable_register: tuple[int, ...]
    oscillator: tuple[int, ...]
    sync: tuple[int, ...]
    enable_out: int
    output: int


@dataclass(frozen=True)
class PipelineState:
    """Read-only copy of every register in the pipeline."""

    tick: int
    enable: int
    cells: tuple[CellState, ...]
    raw_bit: int
    extractor_samples: tuple[int, int]
    extractor_phase: int
    extractor_valid: bool
    mix_register: int
    accepted_count: int
    valid: bool


class TrngPipeline:
    """Cycle-accurate model of the oscillator-to-byte pipeline.

    Usage::

        pipe = TrngPipeline(TrngConfig(use_fallback_source=True))
        for _ in range(5):
            pipe.advance(reset=True, enable=False)
        data = pipe.collect(16)
    """

    def __init__(self, config: TrngConfig | None = None) -> None:
        config = config if config is not None else TrngConfig()
        config.validate()
        self.config = config

        # One independent jitter stream per cell
        seeds = np.random.SeedSequence(config.seed).spawn(config.cell_count)
        self.cells = [
            EntropyCell(cc, rng=np.random.default_rng(s), steps_per_tick=config.steps_per_tick)
            for cc, s in zip(config.cell_configs(), seeds)
        ]
        self.extractor = VonNeumannExtractor()
        self.sampler = SamplingController()

        self._ticks = 0
        self._bytes_out = 0
        self._accepted_bits = 0
        self._discarded_pairs = 0

        logger.debug(
            "pipeline built: %d cell(s), lengths %s, source %s",
            config.cell_count,
            config.cell_lengths,
            self.cells[0].source.name,
        )

    # ── wiring ──

    def _enable_inputs(self) -> list[int]:
        """Cell 0 takes the delayed global enable, cell i+1 takes cell i's output."""
        return [self.sampler.enable] + [c.enable_out for c in self.cells[:-1]]

    @property
    def last_cell_enabled(self) -> int:
        return self.cells[-1].enable_out

    @property
    def raw_bit(self) -> int:
        return xor_combine(c.output for c in self.cells)

    @property
    def ticks(self) -> int:
        return self._ticks

    # ── clocking ──

    def reset(self) -> None:
        """Asynchronous reset: every register back to zero."""
        for cell in self.cells:
            cell.reset()
        self.extractor.reset()
        self.sampler.reset()

    def advance(self, reset: bool = False, enable: bool = True) -> TickResult:
        """Apply one clock tick with the given *reset* and *enable* levels."""
        self._ticks += 1
        if reset:
            self.reset()
            return TickResult(byte=0, valid=False)

        # Read phase: sample every current register value.
        enables_before = self._enable_inputs()
        outs_before = [c.enable_out for c in self.cells]
        raw_bit = self.raw_bit
        last_enabled = self.last_cell_enabled
        bit_valid = self.extractor.valid
        bit = self.extractor.bit
        evaluating = self.extractor.phase
        folds = bit_valid and enable and self.sampler.enable and not self.sampler.valid

        # Write phase: every register takes its next value.
        for cell, en in zip(self.cells, enables_before):
            cell.clock(en)
        self.extractor.clock(raw_bit, last_enabled)
        self.sampler.clock(1 if enable else 0, bit_valid, bit)

        # Between edges: oscillators run with the new enables.
        for cell, en in zip(self.cells, self._enable_inputs()):
            cell.settle(en)

        if folds:
            self._accepted_bits += 1
        elif evaluating:
            self._discarded_pairs += 1
        self._log_transitions(outs_before)

        result = TickResult(byte=self.sampler.byte, valid=self.sampler.valid)
        if result.valid:
            self._bytes_out += 1
            logger.debug("tick %d: output byte 0x%02x", self._ticks, result.byte)
        return result

    def _log_transitions(self, outs_before: list[int]) -> None:
        for i, (cell, before) in enumerate(zip(self.cells, outs_before)):
            if cell.enable_out != before:
                logger.debug(
                    "tick %d: cell %d (length %d) enable chain %s",
                    self._ticks,
                    i,
                    cell.length,
                    "full" if cell.enable_out else "drained",
                )
        if self.last_cell_enabled and not outs_before[-1]:
            logger.info("tick %d: all %d cell(s) enabled, extractor running", self._ticks, len(self.cells))

    # ── driving helpers ──

    def run(self, ticks: int, enable: bool = True, reset: bool = False) -> Iterator[TickResult]:
        """Advance *ticks* times with constant inputs, yielding each result."""
        for _ in range(ticks):
            yield self.advance(reset=reset, enable=enable)

    def collect(self, n_bytes: int, max_ticks: int | None = None) -> np.ndarray:
        """Hold enable high until *n_bytes* valid bytes have been produced.

        Returns
        -------
        numpy.ndarray
            1-D uint8 array of length *n_bytes*.

        Raises
        ------
        ValueError
            If *n_bytes* is negative.
        PipelineStalled
            If *max_ticks* elapse first (default scales with *n_bytes*).
        """
        if n_bytes < 0:
            raise ValueError(f"n_bytes must be non-negative, got {n_bytes}")
        if max_ticks is None:
            max_ticks = TICKS_PER_BYTE_BUDGET * max(n_bytes, 1) + sum(self.config.cell_lengths)
        out = np.empty(n_bytes, dtype=np.uint8)
        count = 0
        spent = 0
        while count < n_bytes:
            if spent >= max_ticks:
                raise PipelineStalled(f"only {count}/{n_bytes} bytes after {spent} ticks")
            r = self.advance(reset=False, enable=True)
            spent += 1
            if r.valid:
                out[count] = r.byte
                count += 1
        return out

    # ── introspection ──

    def snapshot(self) -> PipelineState:
        return PipelineState(
            tick=self._ticks,
            enable=self.sampler.enable,
            cells=tuple(
                CellState(
                    length=c.length,
                    enable_register=c.enable_register,
                    oscillator=c.source.register,
                    sync=c.sync_register,
                    enable_out=c.enable_out,
                    output=c.output,
                )
                for c in self.cells
            ),
            raw_bit=self.raw_bit,
            extractor_samples=self.extractor.samples,
            extractor_phase=self.extractor.phase,
            extractor_valid=self.extractor.valid,
            mix_register=self.sampler.mix_register,
            accepted_count=self.sampler.accepted_count,
            valid=self.sampler.valid,
        )

    def health_report(self) -> dict:
        return {
            "ticks": self._ticks,
            "output_bytes": self._bytes_out,
            "accepted_bits": self._accepted_bits,
            "discarded_pairs": self._discarded_pairs,
            "enabled_cells": sum(1 for c in self.cells if c.enable_out),
            "total_cells": len(self.cells),
            "config": self.config.as_dict(),
        }
