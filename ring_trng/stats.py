"""Quick diagnostic statistics for pipeline output.

These are sanity checks for the ``probe`` command, not a certification
of the output's entropy.
"""

from __future__ import annotations

import zlib
from collections import Counter

import numpy as np


def shannon_entropy(data: np.ndarray) -> float:
    """Shannon entropy in bits for uint8 data."""
    data = np.asarray(data).flatten()
    if len(data) == 0:
        return 0.0
    counts = np.array(list(Counter(data.tolist()).values()))
    probs = counts / len(data)
    return float(-np.sum(probs * np.log2(probs + 1e-15)))


def min_entropy(data: np.ndarray) -> float:
    """Min-entropy (NIST SP 800-90B) — most conservative estimate."""
    data = np.asarray(data).flatten()
    if len(data) == 0:
        return 0.0
    p_max = max(Counter(data.tolist()).values()) / len(data)
    return float(-np.log2(p_max + 1e-15))


def compression_ratio(data: bytes | np.ndarray) -> float:
    """Compression ratio via zlib level 9.  ≈1.0 means incompressible."""
    if isinstance(data, np.ndarray):
        data = data.astype(np.uint8).tobytes()
    if len(data) < 10:
        return 0.0
    return len(zlib.compress(data, 9)) / len(data)


def serial_correlation(data: np.ndarray, lag: int = 1) -> float:
    """Serial autocorrelation at given lag."""
    data = np.asarray(data, dtype=float).flatten()
    if len(data) < lag + 2:
        return 0.0
    mean = np.mean(data)
    var = np.var(data)
    if var < 1e-15:
        return 0.0
    return float(np.mean((data[:-lag] - mean) * (data[lag:] - mean)) / var)


def bit_bias(data: np.ndarray) -> float:
    """Fraction of one bits across all bytes, minus 0.5."""
    data = np.asarray(data, dtype=np.uint8).flatten()
    if len(data) == 0:
        return 0.0
    return float(np.mean(np.unpackbits(data)) - 0.5)


def quick_quality(data: np.ndarray, label: str = "") -> dict:
    """Run lightweight quality metrics on uint8 data."""
    data = np.asarray(data, dtype=np.uint8).flatten()
    if len(data) < 16:
        return {"label": label, "grade": "F", "error": "insufficient data", "samples": len(data)}

    shannon = shannon_entropy(data)
    comp = compression_ratio(data)
    n_unique = int(len(np.unique(data)))

    eff = shannon / 8.0
    score = eff * 60 + min(comp, 1.0) * 20 + min(n_unique / 256, 1.0) * 20
    grade = (
        "A" if score >= 80 else
        "B" if score >= 60 else
        "C" if score >= 40 else
        "D" if score >= 20 else "F"
    )
    return {
        "label": label,
        "samples": len(data),
        "unique_values": n_unique,
        "shannon_entropy": round(shannon, 4),
        "min_entropy": round(min_entropy(data), 4),
        "compression_ratio": round(comp, 4),
        "serial_correlation": round(serial_correlation(data), 6),
        "bit_bias": round(bit_bias(data), 6),
        "quality_score": round(score, 1),
        "grade": grade,
    }
