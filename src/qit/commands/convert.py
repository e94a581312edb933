# src/qit/commands/convert.py
from __future__ import annotations

from pathlib import Path

from qit.commands.common import PARAM_DEFAULTS
from qit.config.schema import Params
from qit.pipeline.layout import OutputLayout
from qit.pipeline.stages import RunContext, convert_reads
from qit.utils.logger import get_logger

LOG = get_logger("convert")


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "convert", parents=[parent],
        help="Unzip *.zip to BAM and convert every *.bam to FASTQ with samtools.",
    )
    p.add_argument("--work-dir", type=Path, default=Path("."), help="Directory holding *.zip / *.bam (default: .).")
    p.add_argument("--n-threads", type=int, default=PARAM_DEFAULTS["n_threads"])
    p.set_defaults(func=run)


def run(args) -> None:
    params = Params(work_dir=args.work_dir, n_threads=args.n_threads)
    written = convert_reads(
        params,
        OutputLayout(params.output_dir),
        RunContext(dry_run=getattr(args, "dry_run", False), show_qiime=getattr(args, "show_qiime", True)),
    )
    LOG.info("Converted %d BAM file(s)", len(written))
    print(f"[ok] {len(written)} FASTQ file(s) in {params.work_dir}")
