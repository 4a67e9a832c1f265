"""
Hex parsing and block formatting helpers.

A 16-byte block is shown as a 4x4 grid in column-major order:
  byte[0]  -> row 0, col 0
  byte[1]  -> row 1, col 0
  ...
  byte[15] -> row 3, col 3
"""

from .errors import check_length
from .tables import BLOCK_SIZE


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert a hex string to bytes.

    Whitespace and an optional ``0x`` prefix are ignored.

    Raises:
        ValueError: If the string is not valid hex
    """
    cleaned = "".join(hex_str.split())
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    return bytes.fromhex(cleaned)


def bytes_to_hex(data: bytes) -> str:
    """Lowercase hex string of ``data``."""
    return bytes(data).hex()


def hex_to_block(hex_str: str, name: str = "Block") -> bytes:
    """
    Parse a hex string that must describe exactly one 16-byte block.

    Raises:
        ValueError: If the string is not valid hex
        BlockSizeError: If it does not decode to 16 bytes
    """
    data = hex_to_bytes(hex_str)
    check_length(name, data, BLOCK_SIZE)
    return data


def format_block_grid(data: bytes) -> str:
    """
    Format a 16-byte block as a 4x4 grid.

    Returns multi-line string like:
      32 88 31 e0
      43 5a 31 37
      f6 30 98 07
      a8 8d a2 34
    """
    check_length("Block", data, BLOCK_SIZE)
    lines = []
    for row in range(4):
        row_hex = [f"{data[col * 4 + row]:02x}" for col in range(4)]
        lines.append("  " + " ".join(row_hex))
    return "\n".join(lines)
