"""Tests for configuration loading and validation."""

import logging

import pytest

from ring_trng.config import CellConfig, ConfigurationError, TrngConfig, load_config
from ring_trng.log import get_logger
from ring_trng.pipeline import TrngPipeline


class TestTrngConfig:
    def test_defaults_valid(self):
        cfg = TrngConfig()
        cfg.validate()
        assert cfg.cell_lengths == [5, 7, 9]

    def test_cell_configs(self):
        cfg = TrngConfig(cell_count=2, first_cell_length=11, use_fallback_source=True)
        assert cfg.cell_configs() == [CellConfig(11, True), CellConfig(13, True)]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"cell_count": 0},
            {"first_cell_length": 0},
            {"first_cell_length": 8},
            {"steps_per_tick": 0.0},
            {"first_cell_length": 5.0},
            {"first_cell_length": 2.0},
            {"cell_count": 2.0},
            {"cell_count": True},
            {"steps_per_tick": "16"},
            {"seed": "abc"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            TrngConfig(**kwargs).validate()

    @pytest.mark.parametrize("length", [5.0, "5", None])
    def test_cell_length_must_be_int(self, length):
        with pytest.raises(ConfigurationError):
            CellConfig(length=length).validate()

    def test_pipeline_rejects_float_length(self):
        with pytest.raises(ConfigurationError):
            TrngPipeline(TrngConfig(first_cell_length=5.0, use_fallback_source=True))

    def test_from_dict_rejects_unknown(self):
        with pytest.raises(ConfigurationError, match="cells"):
            TrngConfig.from_dict({"cells": 3})

    def test_from_dict_none(self):
        assert TrngConfig.from_dict(None) == TrngConfig()


class TestLoadConfig:
    def test_yaml(self, tmp_path):
        path = tmp_path / "trng.yaml"
        path.write_text(
            "trng:\n"
            "  cell_count: 4\n"
            "  first_cell_length: 3\n"
            "  use_fallback_source: true\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        cfg = load_config(path)
        assert cfg.cell_lengths == [3, 5, 7, 9]
        assert cfg.use_fallback_source is True
        assert cfg.logging == {"level": "DEBUG"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            load_config(path)


class TestLogger:
    def test_level_from_config(self):
        logger = get_logger("ring_trng.test_config", {"level": "debug"})
        assert logger.level == logging.DEBUG

    def test_single_handler(self):
        a = get_logger("ring_trng.test_config.handlers")
        b = get_logger("ring_trng.test_config.handlers")
        assert a is b
        assert len(b.handlers) == 1

    def test_pipeline_leaves_logger_alone(self):
        logger = logging.getLogger("ring_trng.pipeline")
        before = logger.level
        TrngPipeline(TrngConfig(use_fallback_source=True, logging={"level": "DEBUG"}))
        assert logger.level == before
