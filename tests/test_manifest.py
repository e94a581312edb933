# tests/test_manifest.py
import pytest

from qit.utils.manifest import (
    ManifestError,
    generate_manifest,
    read_manifest,
    validate_manifest,
)
from qit.utils.samples import sample_id_from_path


def test_generate_manifest_from_converted_reads(tmp_path):
    for name in ("S2.fastq", "S1.fastq.gz", "notes.txt"):
        (tmp_path / name).write_text("x")
    out = generate_manifest(tmp_path, tmp_path / "out" / "manifest.tsv")

    lines = out.read_text().splitlines()
    assert lines[0] == "sample-id\tabsolute-filepath\tdirection"
    assert lines[1] == f"S1\t{(tmp_path / 'S1.fastq.gz').resolve()}\tforward"
    assert lines[2].startswith("S2\t")
    assert len(lines) == 3


def test_generate_manifest_without_reads_fails(tmp_path):
    with pytest.raises(ManifestError):
        generate_manifest(tmp_path, tmp_path / "manifest.tsv")


def test_id_regex(tmp_path):
    assert sample_id_from_path(tmp_path / "IonXpress_007_rawlib.fastq", id_regex=r"IonXpress_(\d+)") == "007"
    assert sample_id_from_path(tmp_path / "S9.fq.gz") == "S9"


def test_read_and_validate(workspace):
    rows = validate_manifest(workspace / "manifest.tsv")
    assert [(r.sample_id, r.direction) for r in rows] == [("S1", "forward")]


def test_missing_read_file(workspace):
    (workspace / "S1.fastq").unlink()
    with pytest.raises(ManifestError, match="read file not found"):
        validate_manifest(workspace / "manifest.tsv")
    assert len(validate_manifest(workspace / "manifest.tsv", check_files=False)) == 1


def test_missing_column(tmp_path):
    m = tmp_path / "manifest.tsv"
    m.write_text("sample-id\tabsolute-filepath\nS1\t/x.fastq\n")
    with pytest.raises(ManifestError, match="direction"):
        read_manifest(m)


def test_bad_direction_and_duplicates(tmp_path):
    m = tmp_path / "manifest.tsv"
    m.write_text("sample-id\tabsolute-filepath\tdirection\nS1\t/x.fastq\tsideways\n")
    with pytest.raises(ManifestError, match="unknown direction"):
        validate_manifest(m, check_files=False)

    m.write_text("sample-id\tabsolute-filepath\tdirection\nS1\t/x.fastq\tforward\nS1\t/y.fastq\tforward\n")
    with pytest.raises(ManifestError, match="Duplicate"):
        validate_manifest(m, check_files=False)


def test_same_sample_in_both_directions_is_a_duplicate(workspace):
    fq = workspace / "S1.fastq"
    m = workspace / "manifest.tsv"
    m.write_text(f"sample-id\tabsolute-filepath\tdirection\nS1\t{fq}\tforward\nS1\t{fq}\treverse\n")
    with pytest.raises(ManifestError, match="Duplicate sample-id: S1"):
        validate_manifest(m)


def test_reverse_rows_are_flagged(workspace, monkeypatch):
    from qit.utils import manifest as manifest_mod

    seen = []
    monkeypatch.setattr(manifest_mod.LOG, "warning", lambda msg, *a: seen.append(msg % a))
    m = workspace / "manifest.tsv"
    m.write_text(f"sample-id\tabsolute-filepath\tdirection\nS1\t{workspace / 'S1.fastq'}\treverse\n")

    assert len(validate_manifest(m)) == 1
    assert any("S1" in w and "reverse" in w for w in seen)


def test_missing_fastq_dir(tmp_path):
    with pytest.raises(ManifestError, match="FASTQ directory not found"):
        generate_manifest(tmp_path / "nope", tmp_path / "manifest.tsv")
