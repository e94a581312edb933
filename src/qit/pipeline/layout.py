# src/qit/pipeline/layout.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

SUBDIRS = ("denoising", "taxonomy", "diversity", "exports")


@dataclass(frozen=True)
class OutputLayout:
    """Fixed artifact paths under one output root."""
    root: Path

    @property
    def denoising_dir(self) -> Path:
        return self.root / "denoising"

    @property
    def taxonomy_dir(self) -> Path:
        return self.root / "taxonomy"

    @property
    def diversity_dir(self) -> Path:
        return self.root / "diversity"

    @property
    def exports_dir(self) -> Path:
        return self.root / "exports"

    def subdirs(self) -> List[Path]:
        return [self.root / name for name in SUBDIRS]

    def ensure(self) -> List[Path]:
        """Create the output tree; existing directories are left alone."""
        self.root.mkdir(parents=True, exist_ok=True)
        made = self.subdirs()
        for d in made:
            d.mkdir(parents=True, exist_ok=True)
        return made

    # import
    @property
    def demux_qza(self) -> Path:
        return self.root / "demux-seqs.qza"

    @property
    def demux_qzv(self) -> Path:
        return self.root / "demux-seqs.qzv"

    # denoising
    @property
    def table_qza(self) -> Path:
        return self.denoising_dir / "feature-table.qza"

    @property
    def rep_seqs_qza(self) -> Path:
        return self.denoising_dir / "rep-seqs.qza"

    @property
    def stats_qza(self) -> Path:
        return self.denoising_dir / "stats.qza"

    @property
    def table_summary_qzv(self) -> Path:
        return self.denoising_dir / "feature-table-summary.qzv"

    @property
    def rep_seqs_qzv(self) -> Path:
        return self.denoising_dir / "rep-seqs.qzv"

    @property
    def stats_qzv(self) -> Path:
        return self.denoising_dir / "stats.qzv"

    # taxonomy
    @property
    def taxonomy_qza(self) -> Path:
        return self.taxonomy_dir / "taxonomy.qza"

    @property
    def taxonomy_qzv(self) -> Path:
        return self.taxonomy_dir / "taxonomy.qzv"

    @property
    def taxa_barplot_qzv(self) -> Path:
        return self.taxonomy_dir / "taxa-barplot.qzv"

    # phylogeny (kept beside the denoising outputs)
    @property
    def aligned_qza(self) -> Path:
        return self.denoising_dir / "aligned-rep-seqs.qza"

    @property
    def masked_aligned_qza(self) -> Path:
        return self.denoising_dir / "masked-aligned-rep-seqs.qza"

    @property
    def unrooted_tree_qza(self) -> Path:
        return self.denoising_dir / "unrooted-tree.qza"

    @property
    def rooted_tree_qza(self) -> Path:
        return self.denoising_dir / "rooted-tree.qza"

    # diversity
    @property
    def alpha_rarefaction_qzv(self) -> Path:
        return self.diversity_dir / "alpha-rarefaction.qzv"

    @property
    def core_metrics_dir(self) -> Path:
        return self.diversity_dir / "core-metrics"

    @property
    def bray_curtis_qza(self) -> Path:
        return self.core_metrics_dir / "bray_curtis_distance_matrix.qza"

    @property
    def jaccard_qza(self) -> Path:
        return self.core_metrics_dir / "jaccard_distance_matrix.qza"

    @property
    def faith_pd_qza(self) -> Path:
        return self.diversity_dir / "faith-pd.qza"

    @property
    def weighted_unifrac_qza(self) -> Path:
        return self.diversity_dir / "weighted-unifrac.qza"

    @property
    def unweighted_unifrac_qza(self) -> Path:
        return self.diversity_dir / "unweighted-unifrac.qza"

    # exports
    @property
    def export_table_dir(self) -> Path:
        return self.exports_dir / "feature-table"

    @property
    def export_table_biom(self) -> Path:
        return self.export_table_dir / "feature-table.biom"

    @property
    def export_table_tsv(self) -> Path:
        return self.export_table_dir / "feature-table.tsv"

    @property
    def export_taxonomy_dir(self) -> Path:
        return self.exports_dir / "taxonomy"

    @property
    def export_bray_curtis_dir(self) -> Path:
        return self.exports_dir / "bray-curtis"

    @property
    def export_weighted_unifrac_dir(self) -> Path:
        return self.exports_dir / "weighted-unifrac"

    @property
    def export_jaccard_dir(self) -> Path:
        return self.exports_dir / "jaccard"

    @property
    def export_faith_pd_dir(self) -> Path:
        return self.exports_dir / "faith-pd"
