"""Randomness source and accounting for the masked algebra backend."""

from __future__ import annotations

import random
import secrets


class RandomSource:
    """Random source with tracking for masked implementations.

    Provides deterministic randomness (from seed) for reproducibility
    while tracking usage by category. An instance is confined to one
    thread; the masked backend keeps one per worker.
    """

    CATEGORIES = ("fresh_masks", "gadget_randomness", "other")

    def __init__(self, seed: int | None = None):
        """Initialize random source.

        Args:
            seed: Optional seed for deterministic randomness
        """
        self._seed = seed
        self._rng = self._create_rng(seed)
        self._bits_used: dict[str, int] = {}
        self.reset()

    def _create_rng(self, seed: int | None) -> random.Random | None:
        """Create random number generator.

        Uses secrets for cryptographic randomness when no seed,
        or a seeded Mersenne Twister for reproducibility.
        """
        if seed is None:
            return None
        return random.Random(seed)

    def reset(self) -> None:
        """Reset usage counters (and the stream, when seeded)."""
        self._bits_used = {name: 0 for name in self.CATEGORIES}
        if self._seed is not None:
            self._rng = self._create_rng(self._seed)

    @property
    def total_bits(self) -> int:
        """Total random bits used."""
        return sum(self._bits_used.values())

    @property
    def bits_breakdown(self) -> dict[str, int]:
        """Get bits breakdown by category."""
        return self._bits_used.copy()

    def get_bits(self, count: int, category: str = "other") -> int:
        """Get random bits as integer and track usage.

        Args:
            count: Number of bits to generate
            category: Category for tracking

        Returns:
            Random integer with `count` bits
        """
        if count <= 0:
            return 0
        if category not in self._bits_used:
            category = "other"

        self._bits_used[category] += count

        if self._rng is None:
            return secrets.randbits(count)
        return self._rng.getrandbits(count)
