"""
GF(2^8) multiplication on encrypted bytes.

AES field: polynomial basis modulo x^8 + x^4 + x^3 + x + 1 (0x11B).

The multiplier of gal_mul is public, so its bits may drive host-language
control flow. Whether a doubling overflows depends on the secret operand
and is always resolved with the algebra's oblivious select.
"""

from __future__ import annotations

from .interfaces import ByteAlgebra, EncryptedByte
from .tables import REDUCTION_POLY


def xtime(algebra: ByteAlgebra, a: EncryptedByte) -> EncryptedByte:
    """Multiply an encrypted byte by x (i.e. by 2) in GF(2^8)."""
    high_bit = algebra.ne_const(algebra.and_const(a, 0x80), 0)
    shifted = algebra.shift_left(a, 1)
    return algebra.select(high_bit, algebra.xor_const(shifted, REDUCTION_POLY), shifted)


def gal_mul(algebra: ByteAlgebra, a: EncryptedByte, c: int) -> EncryptedByte:
    """
    Multiply encrypted ``a`` by the public constant ``c``.

    Shift-and-add over the bits of ``c``, low to high. Doubling stops
    after the highest set bit of ``c``; that bound is public.
    """
    if not 0 <= c <= 0xFF:
        raise ValueError(f"GF(2^8) constant must be a byte, got {c}")

    result = algebra.constant(0)
    while c:
        if c & 1:
            result = algebra.xor(result, a)
        c >>= 1
        if c:
            a = xtime(algebra, a)
    return result


def gal_mul_secret(algebra: ByteAlgebra, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
    """Multiply two encrypted bytes; always runs all 8 iterations."""
    result = algebra.constant(0)
    for _ in range(8):
        low_bit = algebra.ne_const(algebra.and_const(b, 0x01), 0)
        result = algebra.select(low_bit, algebra.xor(result, a), result)
        a = xtime(algebra, a)
        b = algebra.shift_right(b, 1)
    return result
