"""Sampling controller: mixing register and batch counter."""

from __future__ import annotations

BATCH_BITS = 64
BYTE_MASK = 0xFF


class SamplingController:
    """Fold de-biased bits into an 8-bit mixing register, 64 bits per byte.

    Each accepted bit shifts the register left; the bit entering at the
    bottom is the old top bit XOR the new bit, so one input spreads over
    every output position after a few shifts. :attr:`valid` is high for the
    single tick on which ``accepted_count`` reads 64; the next edge clears
    both registers. They are also held at zero while either the delayed
    enable or the live enable input is low, so a batch that saw the enable
    drop is never presented.
    """

    def __init__(self) -> None:
        self.enable = 0
        self.mix_register = 0
        self.accepted_count = 0

    @property
    def valid(self) -> bool:
        return self.accepted_count >= BATCH_BITS

    @property
    def byte(self) -> int:
        return self.mix_register

    def clock(self, enable_in: int, bit_valid: bool, bit: int) -> None:
        if not (self.enable and enable_in) or self.valid:
            self.accepted_count = 0
            self.mix_register = 0
        elif bit_valid:
            top = (self.mix_register >> 7) & 1
            self.mix_register = ((self.mix_register << 1) | (top ^ (bit & 1))) & BYTE_MASK
            self.accepted_count += 1
        self.enable = 1 if enable_in else 0

    def reset(self) -> None:
        self.enable = 0
        self.mix_register = 0
        self.accepted_count = 0
