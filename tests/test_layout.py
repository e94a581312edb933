# tests/test_layout.py
from qit.pipeline.layout import OutputLayout


def test_fixed_paths(tmp_path):
    o = OutputLayout(tmp_path / "results")
    root = tmp_path / "results"
    assert o.demux_qza == root / "demux-seqs.qza"
    assert o.table_qza == root / "denoising" / "feature-table.qza"
    assert o.rooted_tree_qza == root / "denoising" / "rooted-tree.qza"
    assert o.taxonomy_qza == root / "taxonomy" / "taxonomy.qza"
    assert o.core_metrics_dir == root / "diversity" / "core-metrics"
    assert o.bray_curtis_qza == root / "diversity" / "core-metrics" / "bray_curtis_distance_matrix.qza"
    assert o.export_table_tsv == root / "exports" / "feature-table" / "feature-table.tsv"


def test_ensure_is_idempotent(tmp_path):
    o = OutputLayout(tmp_path / "results")
    first = o.ensure()
    (o.denoising_dir / "keep.txt").write_text("x")
    second = o.ensure()

    assert first == second
    assert sorted(p.name for p in (tmp_path / "results").iterdir()) == [
        "denoising", "diversity", "exports", "taxonomy",
    ]
    assert (o.denoising_dir / "keep.txt").read_text() == "x"
