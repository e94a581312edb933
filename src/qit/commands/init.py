# src/qit/commands/init.py
from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

from qit.config.io import write_params
from qit.config.schema import Params
from qit.utils.logger import get_logger

LOG = get_logger("init")

_HEADER = """\
qit parameters
generated {when}

trim_left / trunc_len / trunc_q go to 'qiime dada2 denoise-pyro'
(trunc_len 0 = no truncation, recommended for Ion Torrent).
Adjust sampling_depth after checking the alpha-rarefaction curves.
Relative manifest_file / metadata_file are taken from work_dir."""


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "init", parents=[parent],
        help="Write a params.yaml with the default pipeline configuration.",
    )
    p.add_argument("--output", type=Path, default=Path("params.yaml"))
    p.add_argument("--force", action="store_true", help="Overwrite an existing file.")
    p.set_defaults(func=run)


def run(args) -> None:
    out: Path = args.output
    if out.exists() and not args.force:
        print(f"error: {out} exists (use --force to overwrite).", file=sys.stderr)
        sys.exit(2)
    if getattr(args, "dry_run", False):
        LOG.info("[dry-run] would write %s", out)
        return
    write_params(out, Params(), header=_HEADER.format(when=datetime.now().isoformat(timespec="seconds")))
    LOG.info("Params written → %s", out)
    print(f"[ok] params → {out}")
