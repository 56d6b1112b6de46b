"""Extracting bit fields from unsigned integers."""


def bits(value: int, lo: int, hi: int, width: int = 32) -> int:
    """Return the bits of ``value`` in the range [lo, hi) shifted down to bit 0.

    ``value`` is treated as an unsigned integer of ``width`` bits.
    """
    if lo > hi:
        raise ValueError(f"bit range start {lo} is past its end {hi}")
    if hi > width:
        raise ValueError(f"bit range end {hi} exceeds width {width}")
    value &= (1 << width) - 1
    return (value >> lo) & ((1 << (hi - lo)) - 1)