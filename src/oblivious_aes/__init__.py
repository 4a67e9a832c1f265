"""Oblivious AES-128 over an encrypted-byte algebra."""

__version__ = "0.1.0"

from .cipher import counter_blocks, decrypt_block, encrypt_block, increment_counter
from .errors import AlgebraError, BlockSizeError, EvaluationKeyError, LookupDomainError
from .golden import golden_encrypt
from .interfaces import ByteAlgebra, EncryptedByte, RunResult, SessionConfig
from .key_schedule import expand_key, round_key
from .lookup import MatchValues
from .session import Session

__all__ = [
    "AlgebraError",
    "BlockSizeError",
    "ByteAlgebra",
    "EncryptedByte",
    "EvaluationKeyError",
    "LookupDomainError",
    "MatchValues",
    "RunResult",
    "Session",
    "SessionConfig",
    "counter_blocks",
    "decrypt_block",
    "encrypt_block",
    "expand_key",
    "golden_encrypt",
    "increment_counter",
    "round_key",
]
