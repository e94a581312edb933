# src/qit/tools/biom.py
from __future__ import annotations

from pathlib import Path

from qit.utils.runner import run_command


def convert_to_tsv(
    input_biom: Path,
    output_tsv: Path,
    *,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "biom", "convert",
        "-i", str(input_biom),
        "-o", str(output_tsv),
        "--to-tsv",
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)
