"""
Oblivious table lookup against a public byte-to-byte table.

A MatchValues structure enumerates every (input, output) pair of the
table once. Evaluating it against an encrypted index compares the index
with every input through ne_const and folds the outputs together with
oblivious selects, so the executed operations never depend on the index.
Cost is linear in the number of pairs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator

from .errors import LookupDomainError

if TYPE_CHECKING:
    from .interfaces import ByteAlgebra, EncryptedByte, EncryptedCondition


class MatchValues:
    """Read-only (input, output) pairs of a public substitution table."""

    __slots__ = ("_pairs", "_outputs")

    def __init__(self, pairs: Iterable[tuple[int, int]]):
        outputs: dict[int, int] = {}
        for inp, out in pairs:
            if not 0 <= inp <= 0xFF or not 0 <= out <= 0xFF:
                raise ValueError(f"Table entries must be bytes, got ({inp}, {out})")
            if inp in outputs:
                raise ValueError(f"Duplicate table input 0x{inp:02x}")
            outputs[inp] = out
        if not outputs:
            raise ValueError("A lookup table needs at least one entry")
        self._pairs = tuple(sorted(outputs.items()))
        self._outputs = outputs

    @classmethod
    def from_table(cls, table: bytes) -> "MatchValues":
        """Build the structure for a full 256-entry substitution table."""
        if len(table) != 256:
            raise ValueError(f"Substitution table must have 256 entries, got {len(table)}")
        return cls(enumerate(table))

    @property
    def is_total(self) -> bool:
        """True when every byte value has an entry."""
        return len(self._pairs) == 256

    def output_for(self, value: int) -> int:
        """
        Plain lookup of a public value.

        Raises:
            LookupDomainError: If ``value`` has no entry
        """
        try:
            return self._outputs[value]
        except KeyError:
            raise LookupDomainError(f"No table entry for 0x{value:02x}") from None

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"MatchValues(entries={len(self._pairs)})"


def oblivious_match(
    algebra: ByteAlgebra,
    match: MatchValues,
    index: EncryptedByte,
) -> tuple[EncryptedByte, EncryptedCondition]:
    """
    Evaluate ``match`` on an encrypted index by a full linear scan.

    Returns:
        Tuple of (encrypted output, encrypted "index had an entry").
        An index without an entry yields an encrypted 0.
    """
    result = algebra.constant(0)
    found = None if match.is_total else algebra.constant(0)
    one = algebra.constant(1)

    for inp, out in match:
        miss = algebra.ne_const(index, inp)
        result = algebra.select(miss, result, algebra.constant(out))
        if found is not None:
            found = algebra.select(miss, found, one)

    if found is None:
        found = one
    return result, algebra.ne_const(found, 0)
