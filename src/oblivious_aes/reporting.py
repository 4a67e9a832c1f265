"""Reporting for oblivious AES runs: JSON export and console summaries."""

from __future__ import annotations

import json
from pathlib import Path

from .interfaces import RunResult


def export_to_json(
    results: list[RunResult],
    output_path: str | Path,
    indent: int = 2,
) -> Path:
    """Export run results to a JSON file.

    Args:
        results: List of RunResult from runs
        output_path: Path to output JSON file
        indent: JSON indentation level

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": "1.0",
        "count": len(results),
        "results": [r.to_dict() for r in results],
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=indent, default=str)

    return output_path


def format_run_summary(result: RunResult) -> str:
    """Format a single run for detailed output."""
    lines = [
        f"Backend: {result.backend}",
        f"Blocks: {result.blocks}",
        f"Correct: {'Yes' if result.correct else 'NO - MISMATCH'}",
    ]
    if result.error_detail:
        lines.append(f"  {result.error_detail}")

    lines.append("")
    lines.append("Timing:")
    lines.append(f"  Key expansion: {result.key_expansion_seconds:.3f} s")
    lines.append(f"  Encryption: {result.encryption_seconds:.3f} s")
    lines.append(f"  Decryption: {result.decryption_seconds:.3f} s")
    lines.append(f"  TOTAL: {result.total_seconds:.3f} s")

    lines.append("")
    lines.append("Operation counts:")
    for op, count in sorted(result.op_counts.items()):
        lines.append(f"  {op}: {count}")
    lines.append(f"  TOTAL: {sum(result.op_counts.values())}")

    if result.random_bits_total:
        lines.append("")
        lines.append(f"Random bits: {result.random_bits_total}")

    if result.notes:
        lines.append("")
        lines.append("Notes:")
        for note in result.notes:
            lines.append(f"  - {note}")

    return "\n".join(lines)
