"""
Worker pool for independent encrypted-byte computations.

Every worker thread installs the session's evaluation key in the pool
initializer, before it can pick up a task. A batch submitted through
map() is joined before map() returns, so dependent steps always see the
complete output of the previous one.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, TypeVar

from .evaluation import install_evaluation_key

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class EvaluationScheduler:
    """Fixed-size thread pool sharing one evaluation key."""

    def __init__(self, evaluation_key: Any, workers: int = 1):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.evaluation_key = evaluation_key
        self.workers = workers
        self._worker_local = threading.local()
        self._executor: ThreadPoolExecutor | None = None
        if workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=workers,
                thread_name_prefix="oblivious-aes",
                initializer=self._init_worker,
            )
        logger.debug("scheduler started with %d worker(s)", workers)

    def _init_worker(self) -> None:
        install_evaluation_key(self.evaluation_key)
        self._worker_local.active = True
        logger.debug("evaluation key installed on %s", threading.current_thread().name)

    def _on_worker(self) -> bool:
        return getattr(self._worker_local, "active", False)

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        """
        Run ``fn`` on every item and return the results in input order.

        Runs inline when the pool has a single worker, when it has been
        shut down, or when called from one of the pool's own workers
        (nested fan-out). The first exception raised by a task propagates.
        """
        items = list(items)
        if self._executor is None or self._on_worker() or len(items) <= 1:
            return [fn(item) for item in items]
        futures = [self._executor.submit(fn, item) for item in items]
        return [future.result() for future in futures]

    def shutdown(self) -> None:
        """Join all workers. Further map() calls run inline."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            logger.debug("scheduler shut down")

    def __enter__(self) -> "EvaluationScheduler":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()
