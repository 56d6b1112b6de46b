"""Fixed-point to float conversions."""

from .bits import bits


def fix32(x: int, sign_bits: int, int_bits: int, frac_bits: int) -> float:
    """Decode the low bits of ``x`` as a fixed-point number.

    The low ``sign_bits + int_bits + frac_bits`` bits form an integer
    (two's complement when ``sign_bits`` is 1) scaled by 2**-frac_bits.
    """
    if sign_bits > 1:
        raise ValueError("at most one sign bit is supported")
    if int_bits + frac_bits <= 0:
        raise ValueError("a fixed-point format needs integer or fraction bits")
    total = sign_bits + int_bits + frac_bits
    if total > 32:
        raise ValueError("fixed-point format is wider than 32 bits")

    raw = bits(x, 0, total, 32)
    if sign_bits and raw & (1 << (int_bits + frac_bits)):
        raw -= 1 << total
    return raw * 0.5 ** frac_bits


def fix16(x: int, sign_bits: int, int_bits: int, frac_bits: int) -> float:
    """Like :func:`fix32` for 16-bit values."""
    if sign_bits + int_bits + frac_bits > 16:
        raise ValueError("fixed-point format is wider than 16 bits")
    return fix32(x & 0xFFFF, sign_bits, int_bits, frac_bits)