"""Tests for the public AES tables and hex helpers."""

import pytest

from oblivious_aes.errors import BlockSizeError
from oblivious_aes.tables import (
    INV_SBOX,
    INV_SHIFT_ROWS,
    RCON,
    SBOX,
    SHIFT_ROWS,
)
from oblivious_aes.utils import bytes_to_hex, format_block_grid, hex_to_block, hex_to_bytes


class TestTables:
    """Tests for the S-box, round constants and permutations."""

    def test_sbox_known_entries(self) -> None:
        assert SBOX[0x00] == 0x63
        assert SBOX[0x53] == 0xED
        assert SBOX[0xFF] == 0x16

    def test_inverse_sbox(self) -> None:
        """INV_SBOX undoes SBOX for every byte."""
        assert len(INV_SBOX) == 256
        for x in range(256):
            assert INV_SBOX[SBOX[x]] == x

    def test_rcon(self) -> None:
        assert len(RCON) == 11
        assert RCON[1] == 0x01
        assert RCON[8] == 0x80
        assert RCON[9] == 0x1B
        assert RCON[10] == 0x36

    def test_shift_rows_tables_are_inverse_permutations(self) -> None:
        assert sorted(SHIFT_ROWS) == list(range(16))
        for i in range(16):
            assert SHIFT_ROWS[INV_SHIFT_ROWS[i]] == i


class TestHexHelpers:
    """Tests for hex parsing and formatting."""

    def test_hex_roundtrip(self) -> None:
        data = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
        assert hex_to_bytes(bytes_to_hex(data)) == data

    def test_hex_prefix_and_whitespace(self) -> None:
        assert hex_to_bytes("0x00 11 22") == b"\x00\x11\x22"

    def test_hex_to_block_wrong_length(self) -> None:
        with pytest.raises(BlockSizeError, match="IV must be 16 bytes, got 2"):
            hex_to_block("0011", "IV")

    def test_hex_to_block_invalid_hex(self) -> None:
        with pytest.raises(ValueError):
            hex_to_block("zz" * 16)

    def test_format_block_grid(self) -> None:
        """Grid shows the block column-major."""
        block = bytes.fromhex("3243f6a8885a308d313198a2e0370734")
        grid = format_block_grid(block)
        lines = grid.splitlines()
        assert len(lines) == 4
        assert lines[0].split() == ["32", "88", "31", "e0"]
        assert lines[3].split() == ["a8", "8d", "a2", "34"]
