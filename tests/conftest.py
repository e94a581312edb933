# tests/conftest.py
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pytest

from qit.config.schema import Params

FAKE_FASTQ = "@read1\nACGTACGT\n+\nIIIIIIII\n"


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch()


class FakeRun:
    """
    Stands in for subprocess.run: records every command and materialises the
    outputs the real tool would write, so output verification can pass.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.fail_when: Optional[Callable[[Sequence[str]], bool]] = None
        self.fail_code = 1

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        if self.fail_when and self.fail_when(cmd):
            raise subprocess.CalledProcessError(self.fail_code, cmd, "", "boom")
        self._materialise(cmd, kwargs)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def _materialise(self, cmd: List[str], kwargs) -> None:
        out = kwargs.get("stdout")
        if cmd[0] == "samtools" and out is not None and hasattr(out, "write"):
            out.write(FAKE_FASTQ)
            return
        if cmd[0] == "biom":
            _touch(Path(cmd[cmd.index("-o") + 1]))
            return
        if cmd[:3] == ["qiime", "tools", "export"]:
            src = Path(cmd[cmd.index("--input-path") + 1])
            dest = Path(cmd[cmd.index("--output-path") + 1])
            dest.mkdir(parents=True, exist_ok=True)
            if src.name == "feature-table.qza":
                (dest / "feature-table.biom").touch()
            return
        for i, tok in enumerate(cmd[:-1]):
            if tok.startswith("--o-") or tok == "--output-path":
                _touch(Path(cmd[i + 1]))
            elif tok == "--output-dir":
                d = Path(cmd[i + 1])
                d.mkdir(parents=True, exist_ok=False)
                for name in ("bray_curtis_distance_matrix.qza", "jaccard_distance_matrix.qza"):
                    (d / name).touch()

    # helpers ------------------------------------------------------------
    def qiime_calls(self) -> List[List[str]]:
        return [c for c in self.calls if c[0] == "qiime"]

    def actions(self) -> List[str]:
        """'plugin action' for qiime calls, the executable for the rest."""
        return [" ".join(c[1:3]) if c[0] == "qiime" else c[0] for c in self.calls]

    def index_of(self, action: str) -> int:
        return self.actions().index(action)


@pytest.fixture
def fake_run(monkeypatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A work dir with one sample S1 (forward reads), its metadata and a classifier."""
    fastq = tmp_path / "S1.fastq"
    fastq.write_text(FAKE_FASTQ)
    (tmp_path / "manifest.tsv").write_text(
        "sample-id\tabsolute-filepath\tdirection\n"
        f"S1\t{fastq}\tforward\n"
    )
    (tmp_path / "metadata.tsv").write_text(
        "sample-id\tbody-site\n"
        "#q2:types\tcategorical\n"
        "S1\tgut\n"
    )
    (tmp_path / "classifier.qza").touch()
    return tmp_path


@pytest.fixture
def params(workspace: Path) -> Params:
    return Params(
        work_dir=workspace,
        output_dir=workspace / "results",
        classifier=workspace / "classifier.qza",
        trim_left=15,
        trunc_len=0,
        trunc_q=20,
    )
