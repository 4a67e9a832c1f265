"""Encrypted-byte algebra backends."""

from .cleartext import CleartextAlgebra
from .masked import MaskedAlgebra

# Registry of available backends
BACKENDS: dict[str, type] = {
    "cleartext": CleartextAlgebra,
    "masked": MaskedAlgebra,
}


def get_backend(name: str) -> type:
    """Get backend class by name.

    Args:
        name: Backend name

    Returns:
        ByteAlgebra subclass

    Raises:
        KeyError: If backend not found
    """
    if name not in BACKENDS:
        available = ", ".join(BACKENDS.keys())
        raise KeyError(f"Unknown backend '{name}'. Available: {available}")
    return BACKENDS[name]


def list_backends() -> list[dict[str, str]]:
    """List all available backends with descriptions.

    Returns:
        List of dicts with 'name' and 'description' keys
    """
    result = []
    for name, cls in BACKENDS.items():
        result.append({
            "name": name,
            "description": getattr(cls, "description", "No description"),
        })
    return result


__all__ = [
    "BACKENDS",
    "get_backend",
    "list_backends",
    "CleartextAlgebra",
    "MaskedAlgebra",
]
