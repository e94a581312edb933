# src/qit/cli.py
from __future__ import annotations

import argparse
import subprocess
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from qit import __version__
from qit.utils.logger import setup_logger
from qit.utils.archive import ArchiveError
from qit.utils.manifest import ManifestError
from qit.metadata.validate import MetadataError
from qit.pipeline.driver import MissingOutputError

from qit.commands import init as cmd_init
from qit.commands import doctor as cmd_doctor
from qit.commands import manifest as cmd_manifest
from qit.commands import validate as cmd_validate
from qit.commands import convert as cmd_convert
from qit.commands import run as cmd_run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qit",
        description="QIIME2 16S pipeline for Ion Torrent reads (init, doctor, manifest, validate, convert, run).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--dry-run", action="store_true", help="Print commands without executing them.")
    parent.add_argument("--show-qiime", dest="show_qiime", action="store_true",
                        help="Stream tool output live to console (default).")
    parent.add_argument("--no-show-qiime", dest="show_qiime", action="store_false",
                        help="Capture tool output (printed on error).")
    parent.set_defaults(show_qiime=True)

    subparsers = parser.add_subparsers(dest="command", required=True)

    cmd_init.setup_parser(subparsers, parent)
    cmd_doctor.setup_parser(subparsers, parent)
    cmd_manifest.setup_parser(subparsers, parent)
    cmd_validate.setup_parser(subparsers, parent)
    cmd_convert.setup_parser(subparsers, parent)
    cmd_run.setup_parser(subparsers, parent)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = setup_logger()
    args = build_parser().parse_args(argv)
    logger.debug("Parsed args: %r", args)
    try:
        args.func(args)
    except subprocess.CalledProcessError as e:
        # exit with whatever the failing tool returned
        logger.error("Stopped: %s exited with %s", e.cmd[0] if e.cmd else "command", e.returncode)
        code = e.returncode or 1
        # killed by a signal: report it the way a shell would
        sys.exit(128 - code if code < 0 else code)
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(127)
    except (ManifestError, MetadataError, ArchiveError, MissingOutputError, ValidationError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
