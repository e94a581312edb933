# src/qit/metadata/validate.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from qit.metadata.read import is_sample_id_header, load_metadata_table


class MetadataError(Exception):
    pass


def validate_metadata_file(
    metadata_path: Path,
    *,
    against_sample_ids: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Return a list of warnings. Raise MetadataError for hard failures.

    Every ID in against_sample_ids (normally the manifest) must have a
    metadata row; extra metadata rows are only a warning.
    """
    if not metadata_path.exists():
        raise MetadataError(f"Metadata file not found: {metadata_path}")
    try:
        header, rows = load_metadata_table(metadata_path)
    except ValueError as e:
        raise MetadataError(str(e)) from e

    if not is_sample_id_header(header[0]):
        raise MetadataError(f"First column must be a sample identifier (e.g. 'sample-id'), got {header[0]!r}.")

    warnings: List[str] = []
    if len(header) < 2:
        warnings.append("Metadata has no annotation columns; barplots and rarefaction will not be grouped.")

    sample_ids = [r[header[0]].strip() for r in rows]
    if any(not s for s in sample_ids):
        raise MetadataError("Blank SampleID detected.")
    dupes = sorted({s for s in sample_ids if sample_ids.count(s) > 1})
    if dupes:
        raise MetadataError(f"Duplicate SampleIDs detected: {dupes[:5]}")

    if against_sample_ids is not None:
        s_meta = set(sample_ids)
        s_ref = set(against_sample_ids)
        only_in_ref = sorted(s_ref - s_meta)
        only_in_meta = sorted(s_meta - s_ref)
        if only_in_ref:
            raise MetadataError(
                f"IDs missing from metadata: {only_in_ref[:5]}{'...' if len(only_in_ref) > 5 else ''}"
            )
        if only_in_meta:
            warnings.append(
                f"IDs only in metadata: {only_in_meta[:5]}{'...' if len(only_in_meta) > 5 else ''}"
            )

    return warnings
