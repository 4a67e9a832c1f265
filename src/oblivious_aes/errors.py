"""Exception types raised by the oblivious AES core."""


class BlockSizeError(ValueError):
    """A key, state, counter or expanded key has the wrong length."""


class LookupDomainError(LookupError):
    """A lookup structure does not cover the byte values presented to it."""


class AlgebraError(RuntimeError):
    """The encrypted-byte algebra contract was violated."""


class EvaluationKeyError(AlgebraError):
    """No evaluation key is installed, or it belongs to another session."""


def check_length(name: str, data, expected: int) -> None:
    """Reject a fixed-size container of the wrong length.

    Raises:
        BlockSizeError: If ``len(data) != expected``
    """
    if len(data) != expected:
        raise BlockSizeError(f"{name} must be {expected} bytes, got {len(data)}")
