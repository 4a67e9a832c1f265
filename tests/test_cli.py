"""Tests for the command-line interface."""

import json

from click.testing import CliRunner

from oblivious_aes.cipher import counter_blocks
from oblivious_aes.cli import main, run_counter_mode
from oblivious_aes.golden import golden_encrypt
from oblivious_aes.interfaces import SessionConfig
from oblivious_aes.reporting import format_run_summary

KEY = "000102030405060708090a0b0c0d0e0f"
IV = "00112233445566778899aabbccddeeff"


class TestRunCounterMode:
    """Tests for the run driver."""

    def test_matches_library(self) -> None:
        key, iv = bytes.fromhex(KEY), bytes.fromhex(IV)
        result = run_counter_mode(SessionConfig(workers=2), key, iv, 3)
        assert result.correct, result.error_detail
        assert result.blocks == 3
        assert result.ciphertexts == [golden_encrypt(key, b) for b in counter_blocks(iv, 3)]
        assert result.decrypted == counter_blocks(iv, 3)
        assert result.op_counts["lookup"] > 0

    def test_to_dict(self) -> None:
        result = run_counter_mode(SessionConfig(workers=1), bytes.fromhex(KEY), bytes.fromhex(IV), 1)
        data = result.to_dict()
        assert data["ciphertexts_hex"] == ["69c4e0d86a7b0430d8cdb78070b4c55a"]
        assert data["correct"] is True

    def test_mismatch_reported(self, monkeypatch) -> None:
        monkeypatch.setattr(
            "oblivious_aes.cli.validate_against_golden",
            lambda key, pt, ct: (False, "Ciphertext mismatch: expected 00, got 11"),
        )
        result = run_counter_mode(SessionConfig(workers=1), bytes.fromhex(KEY), bytes.fromhex(IV), 2)
        assert not result.correct
        assert result.error_detail == "Block 0: Ciphertext mismatch: expected 00, got 11"

    def test_direct_lookup_noted(self) -> None:
        """Counts from a backend that indexes tables directly are flagged."""
        result = run_counter_mode(SessionConfig(workers=1), bytes.fromhex(KEY), bytes.fromhex(IV), 1)
        assert any("direct indexing" in note for note in result.notes)
        summary = format_run_summary(result)
        assert "direct indexing" in summary
        assert "TOTAL:" in summary

    def test_masked_run_has_no_direct_lookup_note(self) -> None:
        config = SessionConfig(backend="masked", workers=1, seed=9)
        result = run_counter_mode(config, bytes.fromhex(KEY), bytes.fromhex(IV), 1)
        assert result.correct, result.error_detail
        assert not any("direct indexing" in note for note in result.notes)
        assert result.op_counts["select"] > result.op_counts["lookup"]


class TestCli:
    """Tests for CLI commands."""

    def test_list(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "cleartext" in result.output
        assert "masked" in result.output

    def test_run(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "-k", KEY, "-i", IV, "-n", "2", "--workers", "2"])
        assert result.exit_code == 0, result.output
        assert "69c4e0d86a7b0430d8cdb78070b4c55a" in result.output
        assert "AES of 2 outputs took" in result.output

    def test_run_json_out(self, tmp_path) -> None:
        out = tmp_path / "run.json"
        runner = CliRunner()
        result = runner.invoke(main, ["run", "-k", KEY, "-i", IV, "--workers", "1", "--json-out", str(out)])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["count"] == 1
        assert data["results"][0]["backend"] == "cleartext"

    def test_run_verbose_summary(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "-k", KEY, "-i", IV, "--workers", "1", "-v"])
        assert result.exit_code == 0, result.output
        assert "Operation counts:" in result.output

    def test_run_bad_key_length(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "-k", "0011", "-i", IV])
        assert result.exit_code == 1
        assert "Key must be 16 bytes" in result.output

    def test_run_bad_hex(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "-k", "zz" * 16, "-i", IV])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_run_unknown_backend(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "-k", KEY, "-i", IV, "--backend", "nope"])
        assert result.exit_code == 1
        assert "Unknown backend" in result.output

    def test_run_missing_key(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "-i", IV])
        assert result.exit_code != 0

    def test_validate(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["validate", "--workers", "2"])
        assert result.exit_code == 0, result.output
        assert "VALIDATION PASSED" in result.output

    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
