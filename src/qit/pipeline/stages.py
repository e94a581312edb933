# src/qit/pipeline/stages.py
from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List

from qit.config.io import write_params
from qit.config.schema import Params
from qit.pipeline.layout import OutputLayout
from qit.qiime import commands as qiime
from qit.tools import biom, samtools
from qit.utils.archive import extract_bam
from qit.utils.logger import get_logger

LOG = get_logger("stages")


@dataclass(frozen=True)
class RunContext:
    dry_run: bool = False
    show_qiime: bool = True


# ------------------------------------------------------------------
# 1. setup
# ------------------------------------------------------------------

def setup_directories(params: Params, layout: OutputLayout, ctx: RunContext) -> None:
    if ctx.dry_run:
        LOG.info("[dry-run] would create %s", ", ".join(str(d) for d in layout.subdirs()))
        return
    for d in layout.ensure():
        LOG.debug("Directory ready: %s", d)
    used = write_params(layout.root / "params.used.yaml", params)
    LOG.debug("Effective params → %s", used)


# ------------------------------------------------------------------
# 2. BAM → FASTQ
# ------------------------------------------------------------------

def convert_reads(params: Params, layout: OutputLayout, ctx: RunContext) -> List[Path]:
    """
    Unzip every *.zip in work_dir to <stem>.bam, then run samtools bam2fq on
    every *.bam to <stem>.fastq. Returns the FASTQ paths written.
    """
    work_dir = params.work_dir
    bams = set()
    for zf in sorted(work_dir.glob("*.zip")):
        if not zf.is_file():
            continue
        bams.add(extract_bam(zf, zf.with_suffix(".bam"), dry_run=ctx.dry_run))

    bams.update(p for p in work_dir.glob("*.bam") if p.is_file())
    if not bams:
        LOG.info("No BAM archives in %s; nothing to convert.", work_dir)

    written: List[Path] = []
    for bam in sorted(bams):
        fastq = bam.with_suffix(".fastq")
        samtools.bam2fq(
            bam, fastq,
            n_threads=params.n_threads,
            dry_run=ctx.dry_run,
            show_stdout=ctx.show_qiime,
        )
        LOG.info("Converted: %s", bam.name)
        written.append(fastq)
    return written


# ------------------------------------------------------------------
# 3. import
# ------------------------------------------------------------------

def import_reads(params: Params, layout: OutputLayout, ctx: RunContext) -> None:
    qiime.import_data(
        input_path=params.manifest_path,
        output_path=layout.demux_qza,
        import_type="SampleData[SequencesWithQuality]",
        input_format="SingleEndFastqManifestPhred33V2",
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.demux_summarize(
        input_data=layout.demux_qza,
        output_visualization=layout.demux_qzv,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    LOG.info("View quality plots: qiime tools view %s", layout.demux_qzv)


# ------------------------------------------------------------------
# 4. DADA2 (pyro)
# ------------------------------------------------------------------

def denoise(params: Params, layout: OutputLayout, ctx: RunContext) -> None:
    qiime.dada2_denoise_pyro(
        input_seqs=layout.demux_qza,
        trunc_len=params.trunc_len,
        trunc_q=params.trunc_q,
        trim_left=params.trim_left,
        n_threads=params.n_threads,
        output_table=layout.table_qza,
        output_rep_seqs=layout.rep_seqs_qza,
        output_stats=layout.stats_qza,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.feature_table_summarize(
        input_table=layout.table_qza,
        output=layout.table_summary_qzv,
        sample_metadata_file=params.metadata_path,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.feature_table_tabulate_seqs(
        input_data=layout.rep_seqs_qza,
        output=layout.rep_seqs_qzv,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.metadata_tabulate(
        layout.stats_qza,
        layout.stats_qzv,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )


# ------------------------------------------------------------------
# 5. taxonomy
# ------------------------------------------------------------------

def classify(params: Params, layout: OutputLayout, ctx: RunContext) -> None:
    qiime.classify_sklearn(
        input_reads=layout.rep_seqs_qza,
        input_classifier=params.classifier,
        output_classification=layout.taxonomy_qza,
        n_jobs=params.n_threads,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.metadata_tabulate(
        layout.taxonomy_qza,
        layout.taxonomy_qzv,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.taxa_barplot(
        input_table=layout.table_qza,
        input_taxonomy=layout.taxonomy_qza,
        metadata_file=params.metadata_path,
        output_visualization=layout.taxa_barplot_qzv,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )


# ------------------------------------------------------------------
# 6. phylogeny: MAFFT → mask → FastTree → midpoint root
# ------------------------------------------------------------------

def build_phylogeny(params: Params, layout: OutputLayout, ctx: RunContext) -> None:
    qiime.alignment_mafft(
        input_sequences=layout.rep_seqs_qza,
        output_alignment=layout.aligned_qza,
        n_threads=params.n_threads,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.alignment_mask(
        input_alignment=layout.aligned_qza,
        output_masked_alignment=layout.masked_aligned_qza,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.phylogeny_fasttree(
        input_alignment=layout.masked_aligned_qza,
        output_tree=layout.unrooted_tree_qza,
        n_threads=params.n_threads,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    qiime.phylogeny_midpoint_root(
        input_tree=layout.unrooted_tree_qza,
        output_rooted_tree=layout.rooted_tree_qza,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )


# ------------------------------------------------------------------
# 7. diversity
# ------------------------------------------------------------------

def run_diversity(params: Params, layout: OutputLayout, ctx: RunContext) -> None:
    qiime.diversity_alpha_rarefaction(
        input_table=layout.table_qza,
        input_phylogeny=layout.rooted_tree_qza,
        metadata_file=params.metadata_path,
        min_depth=params.rarefaction_min_depth,
        max_depth=params.rarefaction_max_depth,
        output_visualization=layout.alpha_rarefaction_qzv,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )

    # qiime refuses to write into an existing --output-dir
    core_dir = layout.core_metrics_dir
    if core_dir.exists() and not ctx.dry_run:
        LOG.info("Replacing previous core metrics: %s", core_dir)
        shutil.rmtree(core_dir)
    qiime.diversity_core_metrics_phylogenetic(
        input_table=layout.table_qza,
        input_phylogeny=layout.rooted_tree_qza,
        metadata_file=params.metadata_path,
        sampling_depth=params.sampling_depth,
        n_jobs_or_threads=params.n_threads,
        output_dir=core_dir,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )

    qiime.diversity_alpha_phylogenetic(
        input_table=layout.table_qza,
        input_phylogeny=layout.rooted_tree_qza,
        metric="faith_pd",
        output_vector=layout.faith_pd_qza,
        dry_run=ctx.dry_run,
        show_stdout=ctx.show_qiime,
    )
    for metric, out in (
        ("weighted_unifrac", layout.weighted_unifrac_qza),
        ("unweighted_unifrac", layout.unweighted_unifrac_qza),
    ):
        qiime.diversity_beta_phylogenetic(
            input_table=layout.table_qza,
            input_phylogeny=layout.rooted_tree_qza,
            metric=metric,
            output_matrix=out,
            threads=params.n_threads,
            dry_run=ctx.dry_run,
            show_stdout=ctx.show_qiime,
        )


# ------------------------------------------------------------------
# 8. export
# ------------------------------------------------------------------

def export_results(params: Params, layout: OutputLayout, ctx: RunContext) -> None:
    qiime.export_data(layout.table_qza, layout.export_table_dir,
                      dry_run=ctx.dry_run, show_stdout=ctx.show_qiime)
    biom.convert_to_tsv(layout.export_table_biom, layout.export_table_tsv,
                        dry_run=ctx.dry_run, show_stdout=ctx.show_qiime)

    for src, dest in (
        (layout.taxonomy_qza, layout.export_taxonomy_dir),
        (layout.bray_curtis_qza, layout.export_bray_curtis_dir),
        (layout.weighted_unifrac_qza, layout.export_weighted_unifrac_dir),
        (layout.jaccard_qza, layout.export_jaccard_dir),
        (layout.faith_pd_qza, layout.export_faith_pd_dir),
    ):
        qiime.export_data(src, dest, dry_run=ctx.dry_run, show_stdout=ctx.show_qiime)
