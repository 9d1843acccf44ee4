#!/usr/bin/env python3
"""Basic byte generation with ring-trng.

Builds a three-cell pipeline in fallback mode, drives reset then enable,
and prints output bytes and pipeline health.

Usage:
    pip install -e .
    python examples/basic.py
"""

from ring_trng import TrngConfig, TrngPipeline, __version__

print(f"ring-trng v{__version__}")

cfg = TrngConfig(cell_count=3, first_cell_length=5, use_fallback_source=True)
pipe = TrngPipeline(cfg)
print(f"\nPipeline with cell lengths {cfg.cell_lengths}")

# Hold reset for a few ticks, then enable
for _ in range(5):
    pipe.advance(reset=True, enable=False)

tick = 0
for r in pipe.run(2000):
    tick += 1
    if r.valid:
        print(f"  tick {tick:5d}: 0x{r.byte:02x}")

report = pipe.health_report()
print(f"\nTicks: {report['ticks']}, bytes: {report['output_bytes']}")
print(f"Accepted bits: {report['accepted_bits']}, discarded pairs: {report['discarded_pairs']}")
