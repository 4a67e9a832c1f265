"""Tests for the AES round transforms."""

import random

import pytest

from oblivious_aes.errors import BlockSizeError
from oblivious_aes.interfaces import SessionConfig
from oblivious_aes.session import Session
from oblivious_aes.tables import INV_SBOX, SBOX
from oblivious_aes.transforms import (
    add_round_key,
    inv_mix_columns,
    inv_shift_rows,
    inv_sub_bytes,
    mix_columns,
    shift_rows,
    sub_bytes,
)

# FIPS-197 Appendix B, round 1
ROUND1_START = bytes.fromhex("193de3bea0f4e22b9ac68d2ae9f84808")
AFTER_SUB_BYTES = bytes.fromhex("d42711aee0bf98f1b8b45de51e415230")
AFTER_SHIFT_ROWS = bytes.fromhex("d4bf5d30e0b452aeb84111f11e2798e5")
AFTER_MIX_COLUMNS = bytes.fromhex("046681e5e0cb199a48f8d37a2806264c")
ROUND1_KEY = bytes.fromhex("a0fafe1788542cb123a339392a6c7605")
ROUND2_START = bytes.fromhex("a49c7ff2689f352b6b5bea43026a5049")


@pytest.fixture(params=[1, 4])
def session(request):
    with Session(SessionConfig(workers=request.param)) as s:
        yield s


def apply(session, fn, data: bytes, *extra) -> bytes:
    state = session.encrypt_bytes(data)
    extra = [session.encrypt_bytes(e) for e in extra]
    return session.decrypt_bytes(fn(session, state, *extra))


def random_states(count: int, seed: int = 42) -> list[bytes]:
    rng = random.Random(seed)
    return [bytes(rng.randrange(256) for _ in range(16)) for _ in range(count)]


class TestRoundOneVectors:
    """Each step of FIPS-197 Appendix B round 1."""

    def test_sub_bytes(self, session) -> None:
        assert apply(session, sub_bytes, ROUND1_START) == AFTER_SUB_BYTES

    def test_shift_rows(self, session) -> None:
        assert apply(session, shift_rows, AFTER_SUB_BYTES) == AFTER_SHIFT_ROWS

    def test_mix_columns(self, session) -> None:
        assert apply(session, mix_columns, AFTER_SHIFT_ROWS) == AFTER_MIX_COLUMNS

    def test_add_round_key(self, session) -> None:
        assert apply(session, add_round_key, AFTER_MIX_COLUMNS, ROUND1_KEY) == ROUND2_START


class TestInverses:
    """Inverse transforms undo their forward counterparts."""

    @pytest.mark.parametrize("state", random_states(4))
    def test_shift_rows_roundtrip(self, session, state) -> None:
        enc = session.encrypt_bytes(state)
        out = inv_shift_rows(session, shift_rows(session, enc))
        assert session.decrypt_bytes(out) == state

    @pytest.mark.parametrize("state", random_states(4, seed=7))
    def test_mix_columns_roundtrip(self, session, state) -> None:
        enc = session.encrypt_bytes(state)
        out = inv_mix_columns(session, mix_columns(session, enc))
        assert session.decrypt_bytes(out) == state

    def test_inv_sub_bytes(self, session) -> None:
        data = bytes(range(0, 256, 16))
        assert apply(session, inv_sub_bytes, data) == bytes(INV_SBOX[b] for b in data)
        assert apply(session, sub_bytes, data) == bytes(SBOX[b] for b in data)

    def test_mix_columns_known_column(self, session) -> None:
        """db 13 53 45 -> 8e 4d a1 bc in every column."""
        data = bytes.fromhex("db135345" * 4)
        assert apply(session, mix_columns, data) == bytes.fromhex("8e4da1bc" * 4)


class TestStateHandling:
    """Size checks and input immutability."""

    @pytest.mark.parametrize("fn", [sub_bytes, inv_sub_bytes, shift_rows, inv_shift_rows,
                                    mix_columns, inv_mix_columns])
    def test_wrong_state_size(self, session, fn) -> None:
        with pytest.raises(BlockSizeError, match="State must be 16 bytes, got 15"):
            fn(session, session.encrypt_bytes(bytes(15)))

    def test_round_key_size(self, session) -> None:
        with pytest.raises(BlockSizeError, match="Round key must be 16 bytes"):
            add_round_key(session, session.encrypt_bytes(bytes(16)), session.encrypt_bytes(bytes(8)))

    def test_input_not_modified(self, session) -> None:
        state = session.encrypt_bytes(AFTER_SUB_BYTES)
        before = list(state)
        for fn in (shift_rows, mix_columns, sub_bytes):
            out = fn(session, state)
            assert out is not state
        assert state == before
