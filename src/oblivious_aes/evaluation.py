"""
Per-worker evaluation key slot.

Homomorphic operations read the evaluation key installed on the thread
that executes them. The key is installed once per worker (see
EvaluationScheduler) and is never mutated by the operations themselves.
"""

from __future__ import annotations

import threading
from typing import Any

from .errors import EvaluationKeyError

_slot = threading.local()


def install_evaluation_key(key: Any) -> None:
    """Install ``key`` on the calling thread."""
    if key is None:
        raise ValueError("Cannot install a missing evaluation key")
    _slot.key = key


def clear_evaluation_key() -> None:
    """Remove whatever key is installed on the calling thread."""
    _slot.key = None


def current_evaluation_key() -> Any:
    """
    Return the evaluation key installed on the calling thread.

    Raises:
        EvaluationKeyError: If no key has been installed on this thread
    """
    key = getattr(_slot, "key", None)
    if key is None:
        raise EvaluationKeyError(
            f"evaluation key not installed on this worker "
            f"({threading.current_thread().name})"
        )
    return key


def has_evaluation_key() -> bool:
    return installed_evaluation_key() is not None


def installed_evaluation_key() -> Any:
    """The key installed on the calling thread, or None."""
    return getattr(_slot, "key", None)
