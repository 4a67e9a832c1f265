"""Tests for GF(2^8) multiplication on encrypted bytes."""

import pytest

from oblivious_aes.gf import gal_mul, gal_mul_secret, xtime
from oblivious_aes.interfaces import SessionConfig
from oblivious_aes.session import Session


def plain_mul(a: int, b: int) -> int:
    """Reference shift-and-add multiplication modulo 0x11B."""
    result = 0
    for _ in range(8):
        if b & 1:
            result ^= a
        a = ((a << 1) ^ 0x1B) & 0xFF if a & 0x80 else a << 1
        b >>= 1
    return result


@pytest.fixture
def session():
    with Session(SessionConfig(workers=1)) as s:
        yield s


@pytest.fixture
def masked_session():
    with Session(SessionConfig(backend="masked", workers=1, seed=3)) as s:
        yield s


def run(session, fn, *args):
    alg = session.algebra
    ct = fn(alg, alg.encrypt(args[0], session.client_key), *args[1:])
    return alg.decrypt(ct, session.client_key)


class TestXtime:
    """Doubling in GF(2^8)."""

    @pytest.mark.parametrize("a,expected", [
        (0x57, 0xAE),
        (0xAE, 0x47),
        (0x47, 0x8E),
        (0x8E, 0x07),
        (0x00, 0x00),
        (0x80, 0x1B),
    ])
    def test_known_values(self, session, a, expected) -> None:
        assert run(session, xtime, a) == expected


class TestGalMul:
    """Multiplication by a public constant."""

    def test_fips_197_example(self, session) -> None:
        """{57} * {13} = {fe} (FIPS-197 section 4.2.1)."""
        assert run(session, gal_mul, 0x57, 0x13) == 0xFE

    def test_identity_for_all_bytes(self, session) -> None:
        for a in range(256):
            assert run(session, gal_mul, a, 1) == a

    def test_zero_constant(self, session) -> None:
        assert run(session, gal_mul, 0xAB, 0) == 0

    @pytest.mark.parametrize("c", [0x02, 0x03, 0x09, 0x0B, 0x0D, 0x0E])
    def test_mix_columns_constants(self, session, c) -> None:
        for a in range(0, 256, 7):
            assert run(session, gal_mul, a, c) == plain_mul(a, c)

    def test_rejects_non_byte_constant(self, session) -> None:
        alg = session.algebra
        with pytest.raises(ValueError, match="must be a byte"):
            gal_mul(alg, alg.constant(1), 0x100)

    def test_masked_backend(self, masked_session) -> None:
        assert run(masked_session, gal_mul, 0x57, 0x13) == 0xFE
        assert run(masked_session, gal_mul, 0xD4, 0x0E) == plain_mul(0xD4, 0x0E)


class TestGalMulSecret:
    """Multiplication of two encrypted bytes."""

    @pytest.mark.parametrize("a,b", [(0x57, 0x13), (0x53, 0xCA), (0xFF, 0xFF), (0x00, 0x42), (0x01, 0x8D)])
    def test_agrees_with_plain(self, session, a, b) -> None:
        alg = session.algebra
        ct = gal_mul_secret(
            alg,
            alg.encrypt(a, session.client_key),
            alg.encrypt(b, session.client_key),
        )
        assert alg.decrypt(ct, session.client_key) == plain_mul(a, b)

    def test_inverse_pair(self, masked_session) -> None:
        """{53} and {ca} are multiplicative inverses."""
        alg = masked_session.algebra
        ct = gal_mul_secret(
            alg,
            alg.encrypt(0x53, masked_session.client_key),
            alg.encrypt(0xCA, masked_session.client_key),
        )
        assert alg.decrypt(ct, masked_session.client_key) == 0x01

    def test_fixed_operation_count(self, session) -> None:
        """The work done does not depend on the secret operands."""
        alg = session.algebra
        totals = []
        for a, b in [(0x00, 0x00), (0xFF, 0xFF), (0x12, 0x80)]:
            session.counter.reset()
            gal_mul_secret(alg, alg.encrypt(a, session.client_key), alg.encrypt(b, session.client_key))
            totals.append(session.counter.by_operation)
        assert totals[0] == totals[1] == totals[2]
