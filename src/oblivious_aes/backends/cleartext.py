"""Cleartext simulation of the encrypted-byte algebra.

Ciphertexts hold the byte in an opaque slot and every operation computes
on it directly. There is no confidentiality: the backend exists so the
oblivious AES layers can be exercised quickly and checked bit-for-bit.
"""

from __future__ import annotations

from oblivious_aes.interfaces import (
    ByteAlgebra,
    ClientKey,
    EncryptedByte,
    EncryptedCondition,
    EvaluationKey,
    SessionConfig,
    new_session_id,
)
from oblivious_aes.lookup import MatchValues


class ClearByte(EncryptedByte):
    """Encrypted byte of the cleartext backend."""

    __slots__ = ("_value",)

    def __init__(self, session_id: str, value: int):
        super().__init__(session_id)
        self._value = value & 0xFF


class ClearBit(EncryptedCondition):
    """Encrypted condition of the cleartext backend."""

    __slots__ = ("_flag",)

    def __init__(self, session_id: str, flag: bool):
        super().__init__(session_id)
        self._flag = flag


class CleartextAlgebra(ByteAlgebra):
    """Cleartext algebra: exact, fast, no protection."""

    name = "cleartext"
    description = "Cleartext simulation (no confidentiality, fast reference path)"
    native_lookup = True

    def generate_keys(self, config: SessionConfig) -> tuple[ClientKey, EvaluationKey]:
        session_id = new_session_id()
        return (
            ClientKey(session_id=session_id, backend=self.name),
            EvaluationKey(session_id=session_id, backend=self.name),
        )

    def _encrypt(self, value: int, client_key: ClientKey) -> ClearByte:
        return ClearByte(client_key.session_id, value)

    def _decrypt(self, ct: ClearByte, client_key: ClientKey) -> int:
        return ct._value

    def _constant(self, value: int, key: EvaluationKey) -> ClearByte:
        return ClearByte(key.session_id, value)

    def _xor(self, a: ClearByte, b: ClearByte) -> ClearByte:
        return ClearByte(a.session_id, a._value ^ b._value)

    def _xor_const(self, a: ClearByte, c: int) -> ClearByte:
        return ClearByte(a.session_id, a._value ^ c)

    def _and(self, a: ClearByte, b: ClearByte) -> ClearByte:
        return ClearByte(a.session_id, a._value & b._value)

    def _and_const(self, a: ClearByte, c: int) -> ClearByte:
        return ClearByte(a.session_id, a._value & c)

    def _shift_left(self, a: ClearByte, n: int) -> ClearByte:
        return ClearByte(a.session_id, a._value << n)

    def _shift_right(self, a: ClearByte, n: int) -> ClearByte:
        return ClearByte(a.session_id, a._value >> n)

    def _ne_const(self, a: ClearByte, c: int) -> ClearBit:
        return ClearBit(a.session_id, a._value != c)

    def _select(self, cond: ClearBit, if_true: ClearByte, if_false: ClearByte) -> ClearByte:
        mask = -int(cond._flag) & 0xFF
        value = (if_true._value & mask) | (if_false._value & ~mask)
        return ClearByte(if_true.session_id, value)

    def _lookup(self, match: MatchValues, index: ClearByte) -> ClearByte:
        # counted once as "lookup"; the scan in oblivious_match is skipped
        return ClearByte(index.session_id, match.output_for(index._value))
