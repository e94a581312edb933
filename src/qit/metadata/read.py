# src/qit/metadata/read.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

from qit.metadata import SAMPLE_ID_ALIASES


def _unquote(s: str) -> str:
    """
    Strip BOM, surrounding quotes, and outer whitespace from a single cell.
    """
    s = s.replace("\ufeff", "")
    s = s.strip()
    if len(s) >= 2 and ((s[0] == s[-1] == '"') or (s[0] == s[-1] == "'")):
        s = s[1:-1].strip()
    return s


def is_sample_id_header(cell: str) -> bool:
    return _unquote(cell).lower() in SAMPLE_ID_ALIASES


def _normalize_header(raw: List[str]) -> List[str]:
    """
    Normalize header cells (unquote + fix first column to '#SampleID' if it is an alias).
    """
    out: List[str] = []
    for i, cell in enumerate(raw):
        c = _unquote(cell)
        if i == 0 and is_sample_id_header(c):
            c = "#SampleID"
        out.append(c)
    return out


def load_metadata_table(path: Path) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Load a QIIME-style sample metadata TSV.

    Returns:
      header: List[str] (first element is '#SampleID' when the file uses a known alias)
      rows:   List[Dict[str, str]] (keys are header names)

    Skips '#q2:types' and other comment rows.
    """
    text = path.read_text(encoding="utf-8", errors="replace")
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if not lines:
        raise ValueError(f"Empty metadata file: {path}")

    header = _normalize_header(lines[0].split("\t"))

    rows: List[Dict[str, str]] = []
    for ln in lines[1:]:
        cols = [_unquote(c) for c in ln.split("\t")]
        # directives (#q2:types) and comments start with '#'
        if cols[0].startswith("#"):
            continue
        row = {header[i]: (cols[i] if i < len(cols) else "") for i in range(len(header))}
        rows.append(row)
    return header, rows
