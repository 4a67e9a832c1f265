"""
Evaluation session: keys, worker pool and prepared lookup structures.

Creating a session generates a fresh client/evaluation key pair, installs
the evaluation key on the calling thread and broadcasts it to every
worker of the pool. The evaluation key is not modified afterwards.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from . import cipher
from .backends import get_backend
from .counters import OperationCounter
from .errors import EvaluationKeyError, check_length
from .evaluation import (
    clear_evaluation_key,
    install_evaluation_key,
    installed_evaluation_key,
)
from .interfaces import ByteAlgebra, EncryptedByte, SessionConfig
from .key_schedule import ExpandedKey, expand_key
from .lookup import MatchValues
from .scheduler import EvaluationScheduler
from .tables import BLOCK_SIZE, INV_SBOX, SBOX

logger = logging.getLogger(__name__)


class Session:
    """One key pair, one worker pool, one set of S-box structures.

    A thread drives at most one open session at a time: opening a session
    installs its evaluation key on the calling thread, and opening another
    one there before close() raises EvaluationKeyError.
    """

    def __init__(self, config: SessionConfig | None = None):
        if installed_evaluation_key() is not None:
            raise EvaluationKeyError(
                "another session is still open on this thread; close it first"
            )
        self.config = config if config is not None else SessionConfig()
        self.counter = OperationCounter()

        algebra_cls = get_backend(self.config.backend)
        self.algebra: ByteAlgebra = algebra_cls(self.counter)
        self.client_key, self.evaluation_key = self.algebra.generate_keys(self.config)

        install_evaluation_key(self.evaluation_key)
        try:
            self.scheduler = EvaluationScheduler(self.evaluation_key, self.config.workers)
            self.sbox = MatchValues.from_table(SBOX)
            self.inv_sbox = MatchValues.from_table(INV_SBOX)
        except BaseException:
            clear_evaluation_key()
            raise

        logger.info(
            "session %s opened: backend=%s workers=%d",
            self.evaluation_key.session_id[:8],
            self.config.backend,
            self.config.workers,
        )

    # ----- client-side (de)encryption -------------------------------------

    def encrypt_bytes(self, data: bytes) -> list[EncryptedByte]:
        """Encrypt each byte of ``data`` under the session's client key."""
        return [self.algebra.encrypt(b, self.client_key) for b in data]

    def decrypt_bytes(self, cts: Sequence[EncryptedByte]) -> bytes:
        """Decrypt a sequence of encrypted bytes."""
        return bytes(self.algebra.decrypt(ct, self.client_key) for ct in cts)

    # ----- cipher wrappers -----------------------------------------------

    def expand_key(self, key: bytes) -> ExpandedKey:
        """Encrypt a 16-byte AES key and expand it."""
        check_length("Key", key, BLOCK_SIZE)
        return expand_key(self, self.encrypt_bytes(key))

    def encrypt_block(self, block: bytes, expanded_key: ExpandedKey) -> list[EncryptedByte]:
        """Encrypt a 16-byte plaintext block (encrypted here first)."""
        check_length("Block", block, BLOCK_SIZE)
        return cipher.encrypt_block(self, self.encrypt_bytes(block), expanded_key)

    def decrypt_block(self, block: bytes, expanded_key: ExpandedKey) -> list[EncryptedByte]:
        """Run AES decryption on a 16-byte ciphertext block (encrypted here first)."""
        check_length("Block", block, BLOCK_SIZE)
        return cipher.decrypt_block(self, self.encrypt_bytes(block), expanded_key)

    @property
    def random_bits_total(self) -> int:
        """Masking randomness consumed so far (0 for unmasked backends)."""
        return getattr(self.algebra, "random_bits_total", 0)

    # ----- lifecycle ------------------------------------------------------

    def close(self) -> None:
        """Join the worker pool and release the caller's key slot."""
        self.scheduler.shutdown()
        if installed_evaluation_key() is self.evaluation_key:
            clear_evaluation_key()
        logger.info("session %s closed", self.evaluation_key.session_id[:8])

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Session(backend={self.config.backend!r}, "
            f"workers={self.config.workers})"
        )
