"""Core interfaces and data structures for oblivious AES evaluation."""

from __future__ import annotations

import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from .counters import OperationCounter
from .errors import AlgebraError, EvaluationKeyError, LookupDomainError
from .evaluation import current_evaluation_key
from .lookup import MatchValues, oblivious_match


def _default_workers() -> int:
    return min(16, os.cpu_count() or 1)


@dataclass
class SessionConfig:
    """Configuration object for an evaluation session.

    Selects the encrypted-byte backend and sizes the worker pool that
    evaluates independent bytes, columns and blocks.
    """

    # Encrypted-byte algebra backend (see oblivious_aes.backends)
    backend: str = "cleartext"

    # Worker threads sharing the evaluation key
    workers: int = field(default_factory=_default_workers)

    # Masking order for the masked backend: 1 = 2 shares, 2 = 3 shares
    mask_order_d: int = 1

    # Seed for backend randomness (None = fresh randomness)
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.mask_order_d not in (1, 2):
            raise ValueError(f"mask_order_d must be 1 or 2, got {self.mask_order_d}")

    @property
    def shares(self) -> int:
        """Number of shares used by the masked backend."""
        return self.mask_order_d + 1


@dataclass
class RunResult:
    """Result of a multi-block encrypt/decrypt run with accounting."""

    backend: str
    ciphertexts: list[bytes]
    decrypted: list[bytes]
    correct: bool
    error_detail: str = ""

    # Timing
    key_expansion_seconds: float = 0.0
    encryption_seconds: float = 0.0
    decryption_seconds: float = 0.0

    # Accounting
    op_counts: dict[str, int] = field(default_factory=dict)
    random_bits_total: int = 0

    notes: list[str] = field(default_factory=list)

    @property
    def blocks(self) -> int:
        return len(self.ciphertexts)

    @property
    def total_seconds(self) -> float:
        return self.key_expansion_seconds + self.encryption_seconds + self.decryption_seconds

    def add_note(self, note: str) -> None:
        """Add an informational note."""
        self.notes.append(note)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "backend": self.backend,
            "blocks": self.blocks,
            "ciphertexts_hex": [c.hex() for c in self.ciphertexts],
            "decrypted_hex": [d.hex() for d in self.decrypted],
            "correct": self.correct,
            "error_detail": self.error_detail,
            "key_expansion_seconds": self.key_expansion_seconds,
            "encryption_seconds": self.encryption_seconds,
            "decryption_seconds": self.decryption_seconds,
            "op_counts": self.op_counts,
            "random_bits_total": self.random_bits_total,
            "notes": self.notes,
        }


# ---------------------------------------------------------------------------
# Encrypted-byte algebra contract
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClientKey:
    """Secret material that encrypts and decrypts bytes of one session."""

    session_id: str
    backend: str


@dataclass(frozen=True)
class EvaluationKey:
    """Public material every worker needs to operate on ciphertexts."""

    session_id: str
    backend: str


def new_session_id() -> str:
    return uuid.uuid4().hex


class EncryptedByte:
    """Opaque encrypted byte. Backends subclass it with their payload."""

    __slots__ = ("session_id",)

    def __init__(self, session_id: str):
        self.session_id = session_id

    def __bool__(self) -> bool:
        raise TypeError("Encrypted values cannot be used in host-language conditionals")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(session={self.session_id[:8]})"


class EncryptedCondition(EncryptedByte):
    """Opaque encrypted boolean produced by ne_const, consumed by select."""

    __slots__ = ()


def _check_byte(value: int, what: str = "value") -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{what} must be a byte (0..255), got {value}")


class ByteAlgebra(ABC):
    """Abstract encrypted-byte algebra.

    Public methods validate their operands, fetch the evaluation key
    installed on the current thread, count the operation and dispatch to
    the backend's protected ``_op`` hook. Backends implement the hooks
    only.
    """

    # Class attributes to be overridden by subclasses
    name: str = "base"
    description: str = "Base algebra (abstract)"

    # True when _lookup indexes the table instead of running oblivious_match
    native_lookup: bool = False

    def __init__(self, counter: OperationCounter | None = None):
        self.counter = counter if counter is not None else OperationCounter()

    # ----- keys ---------------------------------------------------------

    @abstractmethod
    def generate_keys(self, config: SessionConfig) -> tuple[ClientKey, EvaluationKey]:
        """Create a fresh client key and the matching evaluation key."""
        raise NotImplementedError

    def _evaluation_key(self, *operands: EncryptedByte) -> EvaluationKey:
        key = current_evaluation_key()
        if key.backend != self.name:
            raise EvaluationKeyError(
                f"installed evaluation key is for backend '{key.backend}', "
                f"not '{self.name}'"
            )
        for operand in operands:
            if operand.session_id != key.session_id:
                raise EvaluationKeyError(
                    "operand was encrypted under a different session than "
                    "the installed evaluation key"
                )
        return key

    def _check_client_key(self, client_key: ClientKey) -> None:
        if client_key.backend != self.name:
            raise AlgebraError(
                f"client key is for backend '{client_key.backend}', not '{self.name}'"
            )

    # ----- client-side --------------------------------------------------

    def encrypt(self, value: int, client_key: ClientKey) -> EncryptedByte:
        """Encrypt one byte under ``client_key``."""
        _check_byte(value)
        self._check_client_key(client_key)
        return self._encrypt(value, client_key)

    def decrypt(self, ct: EncryptedByte, client_key: ClientKey) -> int:
        """Decrypt one byte with ``client_key``."""
        self._check_client_key(client_key)
        if ct.session_id != client_key.session_id:
            raise EvaluationKeyError("ciphertext does not belong to this client key's session")
        return self._decrypt(ct, client_key)

    # ----- homomorphic operations ---------------------------------------

    def constant(self, value: int) -> EncryptedByte:
        """Trivially encrypt a public byte."""
        _check_byte(value)
        key = self._evaluation_key()
        self.counter.add("constant")
        return self._constant(value, key)

    def xor(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._evaluation_key(a, b)
        self.counter.add("xor")
        return self._xor(a, b)

    def xor_const(self, a: EncryptedByte, c: int) -> EncryptedByte:
        _check_byte(c, "constant")
        self._evaluation_key(a)
        self.counter.add("xor")
        return self._xor_const(a, c)

    def and_(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._evaluation_key(a, b)
        self.counter.add("and")
        return self._and(a, b)

    def and_const(self, a: EncryptedByte, c: int) -> EncryptedByte:
        _check_byte(c, "constant")
        self._evaluation_key(a)
        self.counter.add("and")
        return self._and_const(a, c)

    def shift_left(self, a: EncryptedByte, n: int) -> EncryptedByte:
        if not 0 <= n <= 8:
            raise ValueError(f"shift amount must be 0..8, got {n}")
        self._evaluation_key(a)
        self.counter.add("shift")
        return self._shift_left(a, n)

    def shift_right(self, a: EncryptedByte, n: int) -> EncryptedByte:
        if not 0 <= n <= 8:
            raise ValueError(f"shift amount must be 0..8, got {n}")
        self._evaluation_key(a)
        self.counter.add("shift")
        return self._shift_right(a, n)

    def ne_const(self, a: EncryptedByte, c: int) -> EncryptedCondition:
        """Encrypted ``a != c`` for a public byte ``c``."""
        _check_byte(c, "constant")
        self._evaluation_key(a)
        self.counter.add("ne")
        return self._ne_const(a, c)

    def select(
        self,
        cond: EncryptedCondition,
        if_true: EncryptedByte,
        if_false: EncryptedByte,
    ) -> EncryptedByte:
        """Oblivious ``if_true if cond else if_false``."""
        self._evaluation_key(cond, if_true, if_false)
        self.counter.add("select")
        return self._select(cond, if_true, if_false)

    def lookup(self, match: MatchValues, index: EncryptedByte) -> EncryptedByte:
        """
        Encrypted ``table[index]`` for a total lookup structure.

        Raises:
            LookupDomainError: If ``match`` does not cover every byte value
        """
        if not match.is_total:
            raise LookupDomainError(
                f"lookup structure covers {len(match)} of 256 byte values; "
                f"use match_value() for partial tables"
            )
        self._evaluation_key(index)
        self.counter.add("lookup")
        return self._lookup(match, index)

    def match_value(
        self, match: MatchValues, index: EncryptedByte
    ) -> tuple[EncryptedByte, EncryptedCondition]:
        """Encrypted ``(table.get(index, 0), index in table)``."""
        self._evaluation_key(index)
        return oblivious_match(self, match, index)

    def _lookup(self, match: MatchValues, index: EncryptedByte) -> EncryptedByte:
        value, _ = oblivious_match(self, match, index)
        return value

    # ----- backend hooks -----------------------------------------------

    @abstractmethod
    def _encrypt(self, value: int, client_key: ClientKey) -> EncryptedByte: ...

    @abstractmethod
    def _decrypt(self, ct: EncryptedByte, client_key: ClientKey) -> int: ...

    @abstractmethod
    def _constant(self, value: int, key: EvaluationKey) -> EncryptedByte: ...

    @abstractmethod
    def _xor(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte: ...

    @abstractmethod
    def _xor_const(self, a: EncryptedByte, c: int) -> EncryptedByte: ...

    @abstractmethod
    def _and(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte: ...

    @abstractmethod
    def _and_const(self, a: EncryptedByte, c: int) -> EncryptedByte: ...

    @abstractmethod
    def _shift_left(self, a: EncryptedByte, n: int) -> EncryptedByte: ...

    @abstractmethod
    def _shift_right(self, a: EncryptedByte, n: int) -> EncryptedByte: ...

    @abstractmethod
    def _ne_const(self, a: EncryptedByte, c: int) -> EncryptedCondition: ...

    @abstractmethod
    def _select(
        self, cond: EncryptedCondition, if_true: EncryptedByte, if_false: EncryptedByte
    ) -> EncryptedByte: ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
