# src/qit/utils/manifest.py
from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Set

from qit.utils.logger import get_logger
from qit.utils.samples import collect_samples, discover_fastqs

LOG = get_logger("manifest")

MANIFEST_COLUMNS = ["sample-id", "absolute-filepath", "direction"]
DIRECTIONS = ("forward", "reverse")


class ManifestError(Exception):
    pass


@dataclass(frozen=True)
class ManifestRow:
    sample_id: str
    filepath: str
    direction: str


def generate_manifest(
    fastq_dir: Path,
    manifest_path: Path,
    *,
    direction: str = "forward",
    id_regex: Optional[str] = None,
    allowed_sample_ids: Optional[Iterable[str]] = None,
) -> Path:
    """Write a SingleEndFastqManifestPhred33V2 TSV for every FASTQ under fastq_dir."""
    if direction not in DIRECTIONS:
        raise ManifestError(f"direction must be one of: {', '.join(DIRECTIONS)}")
    if not fastq_dir.is_dir():
        raise ManifestError(f"FASTQ directory not found: {fastq_dir}")
    samples = collect_samples(discover_fastqs(fastq_dir), id_regex=id_regex)
    allowed: Optional[Set[str]] = set(allowed_sample_ids) if allowed_sample_ids is not None else None
    rows = [
        {"sample-id": sid, "absolute-filepath": fp, "direction": direction}
        for sid, fp in sorted(samples.items())
        if allowed is None or sid in allowed
    ]
    if not rows:
        raise ManifestError(f"No FASTQs found under {fastq_dir}")

    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    with manifest_path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=MANIFEST_COLUMNS, delimiter="\t", lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)

    LOG.info("Manifest written → %s (%d rows)", manifest_path, len(rows))
    return manifest_path


def read_manifest(manifest_path: Path) -> List[ManifestRow]:
    if not manifest_path.exists():
        raise ManifestError(f"Manifest not found: {manifest_path}")
    with manifest_path.open("r", encoding="utf-8") as fh:
        lines = [ln.rstrip("\n") for ln in fh if ln.strip() and not ln.startswith("#")]
    if not lines:
        raise ManifestError(f"Empty manifest: {manifest_path}")
    header = [h.strip() for h in lines[0].split("\t")]
    missing = [c for c in MANIFEST_COLUMNS if c not in header]
    if missing:
        raise ManifestError(f"Manifest missing column(s): {', '.join(missing)}")
    idx = {c: header.index(c) for c in MANIFEST_COLUMNS}

    rows: List[ManifestRow] = []
    for n, ln in enumerate(lines[1:], start=2):
        cols = ln.split("\t")
        if len(cols) < len(header):
            raise ManifestError(f"{manifest_path}:{n}: expected {len(header)} columns, got {len(cols)}")
        rows.append(ManifestRow(
            sample_id=cols[idx["sample-id"]].strip(),
            filepath=cols[idx["absolute-filepath"]].strip(),
            direction=cols[idx["direction"]].strip(),
        ))
    return rows


def validate_manifest(manifest_path: Path, *, check_files: bool = True) -> List[ManifestRow]:
    """
    Parse the manifest and raise ManifestError on duplicate IDs, unknown
    directions, or (when check_files) read files that do not exist.
    """
    rows = read_manifest(manifest_path)
    if not rows:
        raise ManifestError(f"Manifest lists no samples: {manifest_path}")
    seen: Set[str] = set()
    for r in rows:
        if r.direction not in DIRECTIONS:
            raise ManifestError(f"{r.sample_id}: unknown direction {r.direction!r}")
        # single-end import: one row per sample
        if r.sample_id in seen:
            raise ManifestError(f"Duplicate sample-id: {r.sample_id}")
        seen.add(r.sample_id)
        if r.direction == "reverse":
            LOG.warning("%s: direction is 'reverse'; single-end import treats it as the only read", r.sample_id)
        if check_files:
            fp = Path(r.filepath.replace("$PWD", str(Path.cwd())))
            if not fp.exists():
                raise ManifestError(f"{r.sample_id}: read file not found: {r.filepath}")
    return rows
