# src/qit/commands/doctor.py
from __future__ import annotations

import shutil
import subprocess
import sys

from qit.utils.logger import get_logger
from qit.utils.runner import run_command

LOG = get_logger("doctor")

EXECUTABLES = ("qiime", "samtools", "biom")
PLUGINS = (
    "tools", "demux", "dada2", "feature-table", "metadata",
    "feature-classifier", "taxa", "alignment", "phylogeny", "diversity",
)


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "doctor", parents=[parent],
        help="Preflight checks for QIIME2, its plugins, samtools and biom.",
    )
    p.set_defaults(func=run)


def _ok(x: bool) -> str:
    return "OK" if x else "MISSING"


def run(_args) -> None:
    # 1) executables
    missing = []
    for exe in EXECUTABLES:
        path = shutil.which(exe)
        print(f"[check] {exe} on PATH: {_ok(bool(path))} ({path or 'not found'})")
        if not path:
            missing.append(exe)
    if missing:
        print("error: not found on PATH: " + ", ".join(missing), file=sys.stderr)
        sys.exit(2)

    # 2) version
    try:
        out = run_command(["qiime", "--version"], capture=True).stdout.strip()
        print(f"[check] qiime --version: {out.splitlines()[0] if out else 'unknown'}")
    except subprocess.CalledProcessError as e:
        print(f"error: failed to run 'qiime --version': {e}", file=sys.stderr)
        sys.exit(3)

    # 3) plugins
    bad = []
    for pl in PLUGINS:
        try:
            run_command(["qiime", pl, "--help"], capture=True)
            print(f"[check] plugin '{pl}': OK")
        except subprocess.CalledProcessError:
            print(f"[check] plugin '{pl}': MISSING")
            bad.append(pl)

    if bad:
        print("error: missing plugins: " + ", ".join(bad), file=sys.stderr)
        sys.exit(4)

    print("[ok] environment looks good.")
