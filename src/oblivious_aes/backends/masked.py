"""Boolean-masked encrypted-byte algebra.

Each ciphertext is d+1 byte shares whose XOR is the value (d = 1 or 2).
Linear operations act share by share; bitwise AND goes through the
DOM-indep gadget, which consumes d*(d+1)/2 fresh random bytes per call.
Comparison against a constant is an OR-fold of the difference bits built
from masked ANDs, and select is ``f ^ (cond & (t ^ f))`` with ``cond``
masked as 0x00/0xFF. Lookup uses the generic oblivious scan.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from oblivious_aes.interfaces import (
    ByteAlgebra,
    ClientKey,
    EncryptedByte,
    EncryptedCondition,
    EvaluationKey,
    SessionConfig,
    new_session_id,
)
from oblivious_aes.evaluation import current_evaluation_key
from oblivious_aes.masking.gadgets import (
    DomIndepMultiplier,
    apply_linear_per_share,
    recombine_shares,
    share_value,
)
from oblivious_aes.randomness import RandomSource


class MaskedByte(EncryptedByte):
    """d+1 Boolean shares of one byte."""

    __slots__ = ("shares",)

    def __init__(self, session_id: str, shares):
        super().__init__(session_id)
        self.shares = tuple(shares)


class MaskedCondition(EncryptedCondition):
    """d+1 Boolean shares of 0x00 (false) or 0xFF (true)."""

    __slots__ = ("shares",)

    def __init__(self, session_id: str, shares):
        super().__init__(session_id)
        self.shares = tuple(shares)


@dataclass(frozen=True)
class MaskedClientKey(ClientKey):
    d: int = 1
    seed: int | None = None


@dataclass(frozen=True)
class MaskedEvaluationKey(EvaluationKey):
    d: int = 1
    seed: int | None = None


class MaskedAlgebra(ByteAlgebra):
    """DOM-masked algebra with protection order d."""

    name = "masked"
    description = "Boolean masking with d+1 shares and DOM-indep AND gadgets"

    def __init__(self, counter=None):
        super().__init__(counter)
        self._lock = threading.Lock()
        self._local = threading.local()
        self._client_sources: dict[str, RandomSource] = {}
        self._all_sources: list[RandomSource] = []

    # ----- randomness -----------------------------------------------------

    def _new_gadget_source(self, seed: int | None) -> RandomSource:
        with self._lock:
            if seed is not None:
                # one independent stream per worker, numbered in creation order
                seed = seed * 1_000_003 + len(self._all_sources)
            source = RandomSource(seed)
            self._all_sources.append(source)
        return source

    def _client_source(self, client_key: MaskedClientKey) -> RandomSource:
        with self._lock:
            source = self._client_sources.get(client_key.session_id)
            if source is None:
                source = RandomSource(client_key.seed)
                self._client_sources[client_key.session_id] = source
                self._all_sources.append(source)
            return source

    def _gadget(self) -> DomIndepMultiplier:
        """AND gadget bound to this worker thread and the installed key."""
        key: MaskedEvaluationKey = current_evaluation_key()
        gadgets = getattr(self._local, "gadgets", None)
        if gadgets is None:
            gadgets = self._local.gadgets = {}
        gadget = gadgets.get(key.session_id)
        if gadget is None:
            gadget = DomIndepMultiplier(key.d, self._new_gadget_source(key.seed))
            gadgets[key.session_id] = gadget
        return gadget

    @property
    def random_bits_total(self) -> int:
        with self._lock:
            return sum(source.total_bits for source in self._all_sources)

    @property
    def random_bits_breakdown(self) -> dict[str, int]:
        totals = {name: 0 for name in RandomSource.CATEGORIES}
        with self._lock:
            for source in self._all_sources:
                for category, bits in source.bits_breakdown.items():
                    totals[category] += bits
        return totals

    # ----- keys -----------------------------------------------------------

    def generate_keys(self, config: SessionConfig) -> tuple[ClientKey, EvaluationKey]:
        session_id = new_session_id()
        return (
            MaskedClientKey(session_id=session_id, backend=self.name,
                            d=config.mask_order_d, seed=config.seed),
            MaskedEvaluationKey(session_id=session_id, backend=self.name,
                                d=config.mask_order_d, seed=config.seed),
        )

    def _encrypt(self, value: int, client_key: MaskedClientKey) -> MaskedByte:
        source = self._client_source(client_key)
        with self._lock:
            shares = share_value(value, client_key.d + 1, source)
        return MaskedByte(client_key.session_id, shares)

    def _decrypt(self, ct: MaskedByte, client_key: ClientKey) -> int:
        return recombine_shares(ct.shares)

    # ----- linear operations ------------------------------------------------

    def _constant(self, value: int, key: MaskedEvaluationKey) -> MaskedByte:
        return MaskedByte(key.session_id, [value] + [0] * key.d)

    def _xor(self, a: MaskedByte, b: MaskedByte) -> MaskedByte:
        return MaskedByte(a.session_id, [x ^ y for x, y in zip(a.shares, b.shares)])

    def _xor_const(self, a: MaskedByte, c: int) -> MaskedByte:
        return MaskedByte(a.session_id, (a.shares[0] ^ c,) + a.shares[1:])

    def _and_const(self, a: MaskedByte, c: int) -> MaskedByte:
        return MaskedByte(a.session_id, apply_linear_per_share(a.shares, lambda s: s & c))

    def _shift_left(self, a: MaskedByte, n: int) -> MaskedByte:
        return MaskedByte(a.session_id, apply_linear_per_share(a.shares, lambda s: s << n))

    def _shift_right(self, a: MaskedByte, n: int) -> MaskedByte:
        return MaskedByte(a.session_id, apply_linear_per_share(a.shares, lambda s: s >> n))

    # ----- non-linear operations ------------------------------------------

    def _and(self, a: MaskedByte, b: MaskedByte) -> MaskedByte:
        return MaskedByte(a.session_id, self._gadget().multiply(a.shares, b.shares))

    def _masked_or(self, x: list[int], y: list[int]) -> list[int]:
        product = self._gadget().multiply(x, y)
        return [a ^ b ^ p for a, b, p in zip(x, y, product)]

    def _ne_const(self, a: MaskedByte, c: int) -> MaskedCondition:
        diff = list(self._xor_const(a, c).shares)
        # fold every difference bit into bit 0
        for shift in (4, 2, 1):
            diff = self._masked_or(diff, [s >> shift for s in diff])
        return MaskedCondition(a.session_id, [-(s & 1) & 0xFF for s in diff])

    def _select(self, cond: MaskedCondition, if_true: MaskedByte,
                if_false: MaskedByte) -> MaskedByte:
        delta = [t ^ f for t, f in zip(if_true.shares, if_false.shares)]
        picked = self._gadget().multiply(cond.shares, delta)
        return MaskedByte(if_true.session_id, [f ^ p for f, p in zip(if_false.shares, picked)])
