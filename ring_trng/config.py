"""Pipeline configuration.

The parameters are fixed at construction, the way synthesis-time generics
are. They can be built in code or read from a YAML file::

    trng:
      cell_count: 3
      first_cell_length: 5
      use_fallback_source: true
    logging:
      level: DEBUG
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml


class ConfigurationError(ValueError):
    """Raised when a pipeline configuration can never become operational."""


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class CellConfig:
    """Per-cell parameters derived from :class:`TrngConfig`."""

    length: int
    use_fallback: bool = False

    def validate(self) -> None:
        if not _is_int(self.length) or self.length < 1 or self.length % 2 == 0:
            raise ConfigurationError(
                f"cell length must be an odd positive integer, got {self.length}"
            )


@dataclass
class TrngConfig:
    """Top-level pipeline parameters.

    Parameters
    ----------
    cell_count:
        Number of entropy cells in the enable chain.
    first_cell_length:
        Oscillator length of cell 0; cell *i* uses ``first_cell_length + 2*i``.
    use_fallback_source:
        Use the deterministic fallback bit source in every cell. Simulation
        and regression testing only.
    steps_per_tick:
        Mean number of ring evaluations between two clock edges for the
        physical oscillator model.
    seed:
        Seed for the physical model's jitter generator. ``None`` draws from
        the operating system.
    logging:
        The ``logging`` section of a config file. :class:`TrngPipeline` does
        not read it; the CLI applies it to the process-wide pipeline logger.
    """

    cell_count: int = 3
    first_cell_length: int = 5
    use_fallback_source: bool = False
    steps_per_tick: float = 16.0
    seed: int | None = None
    logging: dict = field(default_factory=dict, compare=False)

    def validate(self) -> None:
        if not _is_int(self.cell_count) or self.cell_count < 1:
            raise ConfigurationError(f"cell_count must be an integer >= 1, got {self.cell_count}")
        if (
            not _is_int(self.first_cell_length)
            or self.first_cell_length < 1
            or self.first_cell_length % 2 == 0
        ):
            raise ConfigurationError(
                f"first_cell_length must be an odd positive integer, got {self.first_cell_length}"
            )
        if not isinstance(self.steps_per_tick, (int, float)) or isinstance(self.steps_per_tick, bool):
            raise ConfigurationError(f"steps_per_tick must be a number, got {self.steps_per_tick!r}")
        if self.steps_per_tick <= 0:
            raise ConfigurationError(f"steps_per_tick must be positive, got {self.steps_per_tick}")
        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            raise ConfigurationError(f"seed must be a non-negative integer, got {self.seed!r}")
        for cell in self.cell_configs():
            cell.validate()

    def cell_configs(self) -> list[CellConfig]:
        return [
            CellConfig(length=self.first_cell_length + 2 * i, use_fallback=self.use_fallback_source)
            for i in range(self.cell_count)
        ]

    @property
    def cell_lengths(self) -> list[int]:
        return [c.length for c in self.cell_configs()]

    @classmethod
    def from_dict(cls, data: dict | None, logging_cfg: dict | None = None) -> TrngConfig:
        data = dict(data or {})
        known = {f.name for f in fields(cls)} - {"logging"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown configuration key(s): {', '.join(unknown)}")
        return cls(**data, logging=dict(logging_cfg or {}))

    def as_dict(self) -> dict:
        return {
            "cell_count": self.cell_count,
            "first_cell_length": self.first_cell_length,
            "cell_lengths": self.cell_lengths,
            "use_fallback_source": self.use_fallback_source,
            "steps_per_tick": self.steps_per_tick,
        }


def load_config(config_path: str | Path) -> TrngConfig:
    """Load a YAML configuration file into a :class:`TrngConfig`.

    The ``trng`` section holds pipeline parameters, the optional ``logging``
    section holds ``level`` and ``format`` for :func:`ring_trng.log.get_logger`.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{config_path}: top level must be a mapping")
    return TrngConfig.from_dict(raw.get("trng"), raw.get("logging"))
