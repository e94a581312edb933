# src/qit/utils/samples.py
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional

from qit.utils.logger import get_logger

LOG = get_logger("samples")

# Ion Torrent single-end reads as produced by the conversion step:
#   <sample>.fastq
#   <sample>.fastq.gz
FASTQ_RE = re.compile(r"^(?P<root>.+?)\.f(?:ast)?q(?:\.gz)?$", re.IGNORECASE)


def discover_fastqs(fastq_dir: Path) -> List[Path]:
    if not fastq_dir.is_dir():
        raise NotADirectoryError(fastq_dir)
    paths = sorted(p for p in fastq_dir.iterdir() if p.is_file() and FASTQ_RE.match(p.name))
    if not paths:
        LOG.info("No FASTQs at top level; searching recursively…")
        paths = sorted(p for p in fastq_dir.rglob("*") if p.is_file() and FASTQ_RE.match(p.name))
    return paths


def sample_id_from_path(path: Path, *, id_regex: Optional[str] = None) -> str:
    """
    Turn a FASTQ filename into a SampleID.

    If id_regex is given, use its named 'id' group or first capturing group;
    otherwise (or on no match) the filename minus its FASTQ extension.
    """
    m = FASTQ_RE.match(path.name)
    root = m.group("root") if m else path.stem
    if id_regex:
        rm = re.search(id_regex, root)
        if rm:
            if "id" in rm.groupdict():
                return rm.group("id")
            if rm.groups():
                return rm.group(1)
    return root


def collect_samples(paths: List[Path], *, id_regex: Optional[str] = None) -> Dict[str, str]:
    """Map SampleID -> absolute FASTQ path; the first file wins on duplicate IDs."""
    out: Dict[str, str] = {}
    for fq in paths:
        sid = sample_id_from_path(fq, id_regex=id_regex)
        if sid in out:
            LOG.warning("Duplicate SampleID %r: keeping %s, ignoring %s", sid, out[sid], fq)
            continue
        out[sid] = str(fq.resolve())
    return out
