"""AES-128 key expansion on an encrypted master key."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from .errors import check_length
from .tables import BLOCK_SIZE, EXPANDED_KEY_SIZE, RCON

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)

ExpandedKey = tuple


def expand_key(session: Session, master: Sequence) -> ExpandedKey:
    """
    Expand a 16-byte encrypted key into 11 round keys (176 bytes).

    Words are produced strictly in order since each depends on the one
    before it. At the start of every round key the previous word is
    rotated, its four bytes go through the S-box in parallel, and the
    public round constant is folded into the first byte.

    Args:
        session: Active evaluation session
        master: 16 encrypted key bytes

    Returns:
        Tuple of 176 encrypted bytes; round r is ``[16*r : 16*r + 16]``
    """
    check_length("Key", master, BLOCK_SIZE)
    algebra = session.algebra
    sbox = session.sbox

    expanded = list(master)
    for i in range(BLOCK_SIZE, EXPANDED_KEY_SIZE, 4):
        temp = expanded[i - 4:i]

        if i % BLOCK_SIZE == 0:
            temp = temp[1:] + temp[:1]
            temp = session.scheduler.map(lambda b: algebra.lookup(sbox, b), temp)
            temp[0] = algebra.xor_const(temp[0], RCON[i // BLOCK_SIZE])

        expanded.extend(algebra.xor(expanded[i - BLOCK_SIZE + j], temp[j]) for j in range(4))
        logger.debug("key expansion: %d/%d bytes", i + 4, EXPANDED_KEY_SIZE)

    return tuple(expanded)


def round_key(expanded_key: Sequence, round_num: int) -> tuple:
    """Slice round ``round_num`` (0..10) out of an expanded key."""
    check_length("Expanded key", expanded_key, EXPANDED_KEY_SIZE)
    if not 0 <= round_num <= 10:
        raise ValueError(f"Round must be 0..10, got {round_num}")
    return tuple(expanded_key[round_num * BLOCK_SIZE:(round_num + 1) * BLOCK_SIZE])
