"""
Counters for primitive-operation tracking.
"""

import threading


class OperationCounter:
    """
    Tracks how many primitive algebra operations a session executed.

    Operations run on several worker threads at once, so every update
    goes through a lock.
    """

    CATEGORIES = ("xor", "and", "shift", "ne", "select", "lookup", "constant")

    def __init__(self):
        self._lock = threading.Lock()
        self._by_operation: dict[str, int] = {}
        self.reset()

    def add(self, operation: str, amount: int = 1) -> None:
        """Record ``amount`` executions of ``operation``."""
        with self._lock:
            self._by_operation[operation] = self._by_operation.get(operation, 0) + amount

    def reset(self) -> None:
        """Reset all counters to zero."""
        with self._lock:
            self._by_operation = {name: 0 for name in self.CATEGORIES}

    @property
    def total(self) -> int:
        """Total operations across all categories."""
        with self._lock:
            return sum(self._by_operation.values())

    @property
    def by_operation(self) -> dict[str, int]:
        """Get operation counts broken down by category."""
        with self._lock:
            return dict(self._by_operation)

    def summary(self) -> str:
        """Return a summary string of operation counts."""
        counts = self.by_operation
        lines = [f"Total operations: {sum(counts.values())}"]
        for op in sorted(counts):
            if counts[op]:
                lines.append(f"  {op}: {counts[op]}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"OperationCounter(total={self.total})"
