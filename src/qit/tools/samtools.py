# src/qit/tools/samtools.py
from __future__ import annotations

from pathlib import Path

from qit.utils.runner import run_command


def bam2fq(
    bam: Path,
    fastq: Path,
    *,
    n_threads: int = 1,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    """samtools bam2fq, FASTQ written from stdout into `fastq`."""
    cmd: list[str] = [
        "samtools", "bam2fq",
        "-@", str(n_threads),
        str(bam),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout, stdout_path=fastq)
