"""
ring-trng: cycle-accurate model of a ring-oscillator TRNG pipeline.

Free-running oscillator cells with a chained enable, XOR combining,
von Neumann de-biasing and an LFSR-style mixing register that emits one
byte per 64 accepted bits.
"""

__version__ = "0.3.0"

from ring_trng.cell import EntropyCell
from ring_trng.config import CellConfig, ConfigurationError, TrngConfig, load_config
from ring_trng.pipeline import PipelineStalled, TickResult, TrngPipeline
from ring_trng.sources.base import BitSource

__all__ = [
    "BitSource",
    "CellConfig",
    "ConfigurationError",
    "EntropyCell",
    "PipelineStalled",
    "TickResult",
    "TrngConfig",
    "TrngPipeline",
    "load_config",
    "__version__",
]
