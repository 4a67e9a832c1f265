"""
Boolean masking gadgets over byte shares.

A masked byte is a list of d+1 shares whose XOR is the value. Linear
operations (XOR, shifts, AND with a public constant) act on each share
independently; the bitwise AND of two masked bytes needs the
domain-oriented masking (DOM-indep) gadget below.
"""

from typing import Callable

from ..randomness import RandomSource

BYTE_MASK = 0xFF


def share_value(value: int, num_shares: int, rng: RandomSource,
                category: str = "fresh_masks") -> list[int]:
    """Split a byte into num_shares Boolean shares."""
    shares = []
    acc = 0
    for _ in range(num_shares - 1):
        r = rng.get_bits(8, category)
        shares.append(r)
        acc ^= r
    shares.append((value ^ acc) & BYTE_MASK)
    return shares


def recombine_shares(shares) -> int:
    """XOR all shares to recover the original value."""
    result = 0
    for s in shares:
        result ^= s
    return result


def apply_linear_per_share(shares, func: Callable[[int], int]) -> list[int]:
    """Apply a GF(2)-linear function to each share independently."""
    return [func(s) & BYTE_MASK for s in shares]


class DomIndepMultiplier:
    """
    DOM-independent multiplier for d+1 shares.

    The field operation here is the bitwise AND of two bytes, i.e. eight
    parallel GF(2) multiplications; it is bilinear over XOR, which is all
    the gadget requires.

    For protection order d with d+1 shares:
    - Uses d*(d+1)/2 fresh random masks Z_ij
    - Each Z is a full byte
    """

    def __init__(self, d: int, rng: RandomSource):
        """
        Initialize DOM-indep multiplier.

        Args:
            d: Protection order (1 or 2)
            rng: Random source; consumption is accounted as gadget randomness
        """
        self.d = d
        self.num_shares = d + 1
        self.rng = rng

    def _sample_random(self) -> int:
        return self.rng.get_bits(8, "gadget_randomness")

    def multiply(self, x_shares, y_shares) -> list[int]:
        """
        Compute shares of x & y.

        For each pair (i, j) with i < j a fresh Z_ij masks both
        cross-domain products x_i*y_j and x_j*y_i; same-domain products
        are kept as they are.

        Args:
            x_shares: d+1 shares of x
            y_shares: d+1 shares of y

        Returns:
            d+1 shares of x & y
        """
        n = self.num_shares

        z_masks = [[0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                z_masks[i][j] = self._sample_random()

        result = [0] * n
        for i in range(n):
            acc = x_shares[i] & y_shares[i]
            for j in range(n):
                if j == i:
                    continue
                z = z_masks[i][j] if i < j else z_masks[j][i]
                acc ^= (x_shares[i] & y_shares[j]) ^ z
            result[i] = acc & BYTE_MASK

        return result
