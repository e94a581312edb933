# src/qit/commands/validate.py
from __future__ import annotations

from pathlib import Path

from qit.metadata.validate import validate_metadata_file
from qit.utils.logger import get_logger
from qit.utils.manifest import validate_manifest

LOG = get_logger("validate")


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "validate", parents=[parent],
        help="Validate the manifest and metadata (IDs, columns, read files).",
    )
    p.add_argument("--manifest", type=Path, default=Path("manifest.tsv"))
    p.add_argument("--metadata", type=Path, default=Path("metadata.tsv"))
    p.add_argument("--skip-file-check", action="store_true",
                   help="Do not require the manifest's read files to exist yet.")
    p.set_defaults(func=run)


def run(args) -> None:
    rows = validate_manifest(args.manifest, check_files=not args.skip_file_check)
    warnings = validate_metadata_file(args.metadata, against_sample_ids=[r.sample_id for r in rows])
    for w in warnings:
        LOG.warning(w)
    print(f"[ok] {len(rows)} sample(s); manifest and metadata agree.")
