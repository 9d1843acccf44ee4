"""Tests for a single entropy cell."""

import numpy as np
import pytest

from ring_trng.cell import EntropyCell
from ring_trng.config import CellConfig, ConfigurationError


def _tick(cell, enable_in):
    cell.clock(enable_in)
    cell.settle(enable_in)


class TestCellConfig:
    @pytest.mark.parametrize("length", [0, 2, 4, 10, -3])
    def test_rejects_bad_length(self, length):
        with pytest.raises(ConfigurationError):
            EntropyCell(CellConfig(length=length, use_fallback=True))

    def test_accepts_odd(self):
        cell = EntropyCell(CellConfig(length=7, use_fallback=True))
        assert cell.length == 7
        assert cell.enable_register == (0,) * 7


class TestEnableChain:
    def test_enable_out_after_length_ticks(self):
        cell = EntropyCell(CellConfig(length=5, use_fallback=True))
        outs = []
        for _ in range(6):
            _tick(cell, 1)
            outs.append(cell.enable_out)
        assert outs == [0, 0, 0, 0, 1, 1]

    def test_stages_released_one_per_tick(self):
        cell = EntropyCell(CellConfig(length=5, use_fallback=True))
        _tick(cell, 1)
        _tick(cell, 1)
        assert cell.enable_register == (1, 1, 0, 0, 0)

    def test_disable_drains_chain(self):
        cell = EntropyCell(CellConfig(length=5, use_fallback=True))
        for _ in range(5):
            _tick(cell, 1)
        assert cell.enable_out == 1
        for _ in range(5):
            _tick(cell, 0)
        assert cell.enable_register == (0,) * 5
        assert cell.enable_out == 0


class TestSynchronizer:
    def test_output_lags_oscillator_by_two_ticks(self):
        cell = EntropyCell(CellConfig(length=5, use_fallback=True))
        tops = []
        outs = []
        for _ in range(40):
            _tick(cell, 1)
            tops.append(cell.source.top)
            outs.append(cell.output)
        assert outs[2:] == tops[:-2]

    def test_disabled_source_is_cleared(self):
        cell = EntropyCell(CellConfig(length=5, use_fallback=True))
        for _ in range(8):
            _tick(cell, 1)
        _tick(cell, 0)
        assert cell.source.register == (0,) * 5


class TestPhysicalCell:
    def test_produces_both_values(self):
        cell = EntropyCell(CellConfig(length=5), rng=np.random.default_rng(3))
        outs = set()
        for _ in range(200):
            _tick(cell, 1)
            outs.add(cell.output)
        assert outs == {0, 1}

    def test_reset(self):
        cell = EntropyCell(CellConfig(length=5), rng=np.random.default_rng(3))
        for _ in range(20):
            _tick(cell, 1)
        cell.reset()
        assert cell.enable_register == (0,) * 5
        assert cell.sync_register == (0, 0)
        assert cell.source.register == (0,) * 5
