"""
AES round transforms on an encrypted state.

State is a list of 16 encrypted bytes in column-major order
(index = 4*col + row):
  [0, 4, 8, 12]
  [1, 5, 9, 13]
  [2, 6, 10, 14]
  [3, 7, 11, 15]

Every transform reads its input as an immutable snapshot and returns a
freshly built list; the input list is never written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .errors import check_length
from .gf import gal_mul
from .tables import (
    BLOCK_SIZE,
    INV_MIX_COLUMNS_MATRIX,
    INV_SHIFT_ROWS,
    MIX_COLUMNS_MATRIX,
    SHIFT_ROWS,
)

if TYPE_CHECKING:
    from .interfaces import ByteAlgebra
    from .session import Session

State = list


def add_round_key(session: Session, state: Sequence, round_key: Sequence) -> State:
    """XOR the state with a 16-byte round key."""
    check_length("State", state, BLOCK_SIZE)
    check_length("Round key", round_key, BLOCK_SIZE)
    xor = session.algebra.xor
    return [xor(s, k) for s, k in zip(state, round_key)]


def sub_bytes(session: Session, state: Sequence) -> State:
    """Substitute every byte through the S-box, 16 lookups in parallel."""
    check_length("State", state, BLOCK_SIZE)
    lookup = session.algebra.lookup
    sbox = session.sbox
    return session.scheduler.map(lambda b: lookup(sbox, b), state)


def inv_sub_bytes(session: Session, state: Sequence) -> State:
    """Substitute every byte through the inverse S-box."""
    check_length("State", state, BLOCK_SIZE)
    lookup = session.algebra.lookup
    inv_sbox = session.inv_sbox
    return session.scheduler.map(lambda b: lookup(inv_sbox, b), state)


def _permute(state: Sequence, sources: Sequence[int]) -> State:
    snapshot = tuple(state)
    return [snapshot[src] for src in sources]


def shift_rows(session: Session, state: Sequence) -> State:
    """Rotate row r left by r positions."""
    check_length("State", state, BLOCK_SIZE)
    return _permute(state, SHIFT_ROWS)


def inv_shift_rows(session: Session, state: Sequence) -> State:
    """Rotate row r right by r positions."""
    check_length("State", state, BLOCK_SIZE)
    return _permute(state, INV_SHIFT_ROWS)


def mix_single_column(algebra: ByteAlgebra, column: Sequence, matrix) -> list:
    """Multiply one 4-byte column by a fixed GF(2^8) matrix."""
    out = []
    for row in matrix:
        acc = None
        for coeff, byte in zip(row, column):
            term = byte if coeff == 1 else gal_mul(algebra, byte, coeff)
            acc = term if acc is None else algebra.xor(acc, term)
        out.append(acc)
    return out


def _mix(session: Session, state: Sequence, matrix) -> State:
    snapshot = tuple(state)
    columns = [snapshot[col * 4:col * 4 + 4] for col in range(4)]
    algebra = session.algebra
    mixed = session.scheduler.map(
        lambda column: mix_single_column(algebra, column, matrix), columns
    )
    return [byte for column in mixed for byte in column]


def mix_columns(session: Session, state: Sequence) -> State:
    """MixColumns with rows {2,3,1,1} rotated, one task per column."""
    check_length("State", state, BLOCK_SIZE)
    return _mix(session, state, MIX_COLUMNS_MATRIX)


def inv_mix_columns(session: Session, state: Sequence) -> State:
    """InvMixColumns with rows {0E,0B,0D,09} rotated."""
    check_length("State", state, BLOCK_SIZE)
    return _mix(session, state, INV_MIX_COLUMNS_MATRIX)
