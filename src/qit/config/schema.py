# src/qit/config/schema.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, field_validator, model_validator


class Params(BaseModel):
    # input / output
    work_dir: Path = Path(".")
    output_dir: Path = Path("./results")
    manifest_file: Path = Path("manifest.tsv")
    metadata_file: Path = Path("metadata.tsv")

    # dada2 denoise-pyro
    trim_left: int = 15   # bases trimmed from the 5' end
    trunc_len: int = 0    # 0 = no truncation (recommended for Ion Torrent)
    trunc_q: int = 20

    # diversity
    sampling_depth: int = 3400
    rarefaction_min_depth: int = 10
    rarefaction_max_depth: int = 5000

    # classification
    classifier: Path = Path("path/to/gg-13-8-99-515-806-nb-classifier.qza")

    # resources
    n_threads: int = 4

    # checks
    verify_outputs: bool = True
    validate_inputs: bool = True

    @field_validator("trim_left", "trunc_len", "trunc_q")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("n_threads", "sampling_depth", "rarefaction_min_depth")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @model_validator(mode="after")
    def _check_rarefaction_range(self) -> "Params":
        if self.rarefaction_min_depth >= self.rarefaction_max_depth:
            raise ValueError("rarefaction_min_depth must be lower than rarefaction_max_depth")
        return self

    @property
    def manifest_path(self) -> Path:
        """Manifest path; relative paths are taken from work_dir."""
        return self.manifest_file if self.manifest_file.is_absolute() else self.work_dir / self.manifest_file

    @property
    def metadata_path(self) -> Path:
        return self.metadata_file if self.metadata_file.is_absolute() else self.work_dir / self.metadata_file

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
