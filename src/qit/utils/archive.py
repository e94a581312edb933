# src/qit/utils/archive.py
from __future__ import annotations

import shutil
import zipfile
from pathlib import Path

from qit.utils.logger import get_logger

LOG = get_logger("archive")


class ArchiveError(Exception):
    pass


def _bam_member(z: zipfile.ZipFile) -> zipfile.ZipInfo:
    members = [m for m in z.infolist() if not m.is_dir()]
    if len(members) == 1:
        return members[0]
    bams = [m for m in members if m.filename.lower().endswith(".bam")]
    if len(bams) != 1:
        raise ArchiveError(
            f"{z.filename}: expected exactly one BAM member, found {len(bams)} among {len(members)} file(s)"
        )
    return bams[0]


def extract_bam(zip_path: Path, bam_path: Path, *, dry_run: bool = False) -> Path:
    """
    Stream the single BAM held by a per-sample zip archive to bam_path.
    An existing bam_path is overwritten.
    """
    LOG.info("Extracting: %s → %s", zip_path, bam_path)
    if dry_run:
        LOG.debug("[dry-run] archive not extracted")
        return bam_path
    try:
        with zipfile.ZipFile(zip_path) as z:
            member = _bam_member(z)
            with z.open(member) as src, open(bam_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"{zip_path}: not a valid zip archive") from e
    return bam_path
