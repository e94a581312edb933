# src/qit/commands/run.py
from __future__ import annotations

from qit.commands.common import add_params_arguments, resolve_params
from qit.pipeline import run_pipeline
from qit.utils.logger import get_logger

LOG = get_logger("run")


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "run", parents=[parent],
        help="Run the full pipeline: setup → convert → import → denoise → taxonomy → phylogeny → diversity → export.",
        description=(
            "Convert Ion Torrent BAMs to FASTQ, import them with the manifest, denoise with DADA2 (pyro), "
            "classify, build a rooted tree, compute alpha/beta diversity and export flat tables."
        ),
    )
    add_params_arguments(p)
    p.set_defaults(func=run)


def run(args) -> None:
    params = resolve_params(args)
    LOG.debug("Params: %r", params)
    result = run_pipeline(
        params,
        dry_run=getattr(args, "dry_run", False),
        show_qiime=getattr(args, "show_qiime", True),
    )
    print(f"[ok] pipeline → {result.layout.root}")
