"""
AES-128 block encryption and decryption over encrypted bytes.

Round schedule (encryption):
- Round 0: AddRoundKey
- Rounds 1-9: SubBytes, ShiftRows, MixColumns, AddRoundKey
- Round 10: SubBytes, ShiftRows, AddRoundKey (no MixColumns)

Decryption runs the inverse steps in reverse round order. In rounds 9..1
InvMixColumns comes after AddRoundKey.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .errors import check_length
from .key_schedule import round_key
from .tables import BLOCK_SIZE, EXPANDED_KEY_SIZE, NUM_ROUNDS
from .transforms import (
    add_round_key,
    inv_mix_columns,
    inv_shift_rows,
    inv_sub_bytes,
    mix_columns,
    shift_rows,
    sub_bytes,
)

if TYPE_CHECKING:
    from .session import Session


def encrypt_block(session: Session, block: Sequence, expanded_key: Sequence) -> list:
    """Encrypt one 16-byte encrypted block with an expanded key."""
    check_length("Block", block, BLOCK_SIZE)
    check_length("Expanded key", expanded_key, EXPANDED_KEY_SIZE)

    state = add_round_key(session, block, round_key(expanded_key, 0))

    for round_num in range(1, NUM_ROUNDS):
        state = sub_bytes(session, state)
        state = shift_rows(session, state)
        state = mix_columns(session, state)
        state = add_round_key(session, state, round_key(expanded_key, round_num))

    state = sub_bytes(session, state)
    state = shift_rows(session, state)
    return add_round_key(session, state, round_key(expanded_key, NUM_ROUNDS))


def decrypt_block(session: Session, block: Sequence, expanded_key: Sequence) -> list:
    """Decrypt one 16-byte encrypted block with an expanded key."""
    check_length("Block", block, BLOCK_SIZE)
    check_length("Expanded key", expanded_key, EXPANDED_KEY_SIZE)

    state = add_round_key(session, block, round_key(expanded_key, NUM_ROUNDS))

    for round_num in range(NUM_ROUNDS - 1, 0, -1):
        state = inv_shift_rows(session, state)
        state = inv_sub_bytes(session, state)
        state = add_round_key(session, state, round_key(expanded_key, round_num))
        state = inv_mix_columns(session, state)

    state = inv_shift_rows(session, state)
    state = inv_sub_bytes(session, state)
    return add_round_key(session, state, round_key(expanded_key, 0))


def encrypt_blocks(session: Session, blocks: Sequence[Sequence], expanded_key: Sequence) -> list:
    """Encrypt independent blocks concurrently; output order follows input."""
    check_length("Expanded key", expanded_key, EXPANDED_KEY_SIZE)
    for block in blocks:
        check_length("Block", block, BLOCK_SIZE)
    return session.scheduler.map(
        lambda block: encrypt_block(session, block, expanded_key), blocks
    )


def decrypt_blocks(session: Session, blocks: Sequence[Sequence], expanded_key: Sequence) -> list:
    """Decrypt independent blocks concurrently; output order follows input."""
    check_length("Expanded key", expanded_key, EXPANDED_KEY_SIZE)
    for block in blocks:
        check_length("Block", block, BLOCK_SIZE)
    return session.scheduler.map(
        lambda block: decrypt_block(session, block, expanded_key), blocks
    )


# ---------------------------------------------------------------------------
# Plaintext counter helpers
# ---------------------------------------------------------------------------

def increment_counter(iv: bytes) -> bytes:
    """
    Increment a 16-byte big-endian counter by one.

    The carry runs from the last byte towards the first; ff..ff wraps
    to 00..00.
    """
    check_length("Counter", iv, BLOCK_SIZE)
    counter = bytearray(iv)
    for i in range(BLOCK_SIZE - 1, -1, -1):
        if counter[i] == 0xFF:
            counter[i] = 0x00
        else:
            counter[i] += 1
            break
    return bytes(counter)


def counter_blocks(iv: bytes, count: int) -> list[bytes]:
    """Return ``count`` successive counter blocks starting at ``iv``."""
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")
    check_length("Counter", iv, BLOCK_SIZE)
    blocks = [bytes(iv)]
    for _ in range(count - 1):
        blocks.append(increment_counter(blocks[-1]))
    return blocks
