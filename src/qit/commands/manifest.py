# src/qit/commands/manifest.py
from __future__ import annotations

from pathlib import Path

from qit.utils.logger import get_logger
from qit.utils.manifest import DIRECTIONS, generate_manifest

LOG = get_logger("manifest.cmd")


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "manifest", parents=[parent],
        help="Generate a SingleEndFastqManifestPhred33V2 TSV from FASTQs.",
        description="One row per FASTQ; the SampleID is the filename without its .fastq(.gz) extension.",
    )
    p.add_argument("--fastq-dir", type=Path, default=Path("."), help="Directory with FASTQ(.gz) files.")
    p.add_argument("--output", type=Path, required=True, help="Path to write manifest TSV.")
    p.add_argument("--direction", choices=DIRECTIONS, default="forward")
    p.add_argument("--id-regex", type=str, default=None,
                   help="Optional regex to extract SampleID from the filename; use group 'id' or group 1.")
    p.set_defaults(func=run)


def run(args) -> None:
    path = generate_manifest(
        args.fastq_dir,
        args.output,
        direction=args.direction,
        id_regex=args.id_regex,
    )
    print(f"[ok] manifest → {path}")
