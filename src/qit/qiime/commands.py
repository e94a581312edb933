# src/qit/qiime/commands.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from qit.utils.runner import run_command


# ---------------------------
# Imports, export & metadata helpers
# ---------------------------

def import_data(
    input_path: Path,
    output_path: Path,
    import_type: str = "SampleData[SequencesWithQuality]",
    input_format: Optional[str] = "SingleEndFastqManifestPhred33V2",
    *,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "tools", "import",
        "--type", import_type,
        "--input-path", str(input_path),
        "--output-path", str(output_path),
    ]
    if input_format:
        cmd += ["--input-format", input_format]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def export_data(
    input_path: Path,
    output_path: Path,
    *,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "tools", "export",
        "--input-path", str(input_path),
        "--output-path", str(output_path),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def demux_summarize(
    *,
    input_data: Path,
    output_visualization: Path,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "demux", "summarize",
        "--i-data", str(input_data),
        "--o-visualization", str(output_visualization),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def metadata_tabulate(
    input_file: Path,
    output_visualization: Path,
    *,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "metadata", "tabulate",
        "--m-input-file", str(input_file),
        "--o-visualization", str(output_visualization),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


# ---------------------------
# DADA2
# ---------------------------

def dada2_denoise_pyro(
    *,
    input_seqs: Path,
    trunc_len: int,
    output_table: Path,
    output_rep_seqs: Path,
    output_stats: Path,
    trim_left: int = 0,
    trunc_q: int = 2,
    n_threads: int = 1,
    verbose: bool = True,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    """Pyrosequencing-aware DADA2 (homopolymer error model), for Ion Torrent reads."""
    cmd: list[str] = [
        "qiime", "dada2", "denoise-pyro",
        "--i-demultiplexed-seqs", str(input_seqs),
        "--p-trunc-len", str(trunc_len),
        "--p-trunc-q", str(trunc_q),
        "--p-trim-left", str(trim_left),
        "--p-n-threads", str(n_threads),
        "--o-table", str(output_table),
        "--o-representative-sequences", str(output_rep_seqs),
        "--o-denoising-stats", str(output_stats),
    ]
    if verbose:
        cmd.append("--verbose")
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


# ---------------------------
# Feature-table utilities
# ---------------------------

def feature_table_summarize(
    *,
    input_table: Path,
    output: Path,
    sample_metadata_file: Optional[Path] = None,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "feature-table", "summarize",
        "--i-table", str(input_table),
        "--o-visualization", str(output),
    ]
    if sample_metadata_file:
        cmd += ["--m-sample-metadata-file", str(sample_metadata_file)]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def feature_table_tabulate_seqs(
    *,
    input_data: Path,
    output: Path,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "feature-table", "tabulate-seqs",
        "--i-data", str(input_data),
        "--o-visualization", str(output),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


# ---------------------------
# Classification
# ---------------------------

def classify_sklearn(
    *,
    input_reads: Path,
    input_classifier: Path,
    output_classification: Path,
    n_jobs: int = 1,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "feature-classifier", "classify-sklearn",
        "--i-reads", str(input_reads),
        "--i-classifier", str(input_classifier),
        "--p-n-jobs", str(n_jobs),
        "--o-classification", str(output_classification),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def taxa_barplot(
    *,
    input_table: Path,
    input_taxonomy: Path,
    metadata_file: Path,
    output_visualization: Path,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "taxa", "barplot",
        "--i-table", str(input_table),
        "--i-taxonomy", str(input_taxonomy),
        "--m-metadata-file", str(metadata_file),
        "--o-visualization", str(output_visualization),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


# ---------------------------
# Alignment & phylogeny
# ---------------------------

def alignment_mafft(
    *,
    input_sequences: Path,
    output_alignment: Path,
    n_threads: int = 1,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "alignment", "mafft",
        "--i-sequences", str(input_sequences),
        "--p-n-threads", str(n_threads),
        "--o-alignment", str(output_alignment),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def alignment_mask(
    *,
    input_alignment: Path,
    output_masked_alignment: Path,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "alignment", "mask",
        "--i-alignment", str(input_alignment),
        "--o-masked-alignment", str(output_masked_alignment),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def phylogeny_fasttree(
    *,
    input_alignment: Path,
    output_tree: Path,
    n_threads: int = 1,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "phylogeny", "fasttree",
        "--i-alignment", str(input_alignment),
        "--p-n-threads", str(n_threads),
        "--o-tree", str(output_tree),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def phylogeny_midpoint_root(
    *,
    input_tree: Path,
    output_rooted_tree: Path,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "phylogeny", "midpoint-root",
        "--i-tree", str(input_tree),
        "--o-rooted-tree", str(output_rooted_tree),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


# ---------------------------
# Diversity
# ---------------------------

def diversity_alpha_rarefaction(
    *,
    input_table: Path,
    input_phylogeny: Path,
    metadata_file: Path,
    min_depth: int,
    max_depth: int,
    output_visualization: Path,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "diversity", "alpha-rarefaction",
        "--i-table", str(input_table),
        "--i-phylogeny", str(input_phylogeny),
        "--m-metadata-file", str(metadata_file),
        "--p-min-depth", str(min_depth),
        "--p-max-depth", str(max_depth),
        "--o-visualization", str(output_visualization),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def diversity_core_metrics_phylogenetic(
    *,
    input_phylogeny: Path,
    input_table: Path,
    sampling_depth: int,
    metadata_file: Path,
    output_dir: Path,
    n_jobs_or_threads: int = 1,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd: list[str] = [
        "qiime", "diversity", "core-metrics-phylogenetic",
        "--i-table", str(input_table),
        "--i-phylogeny", str(input_phylogeny),
        "--m-metadata-file", str(metadata_file),
        "--p-sampling-depth", str(sampling_depth),
        "--p-n-jobs-or-threads", str(n_jobs_or_threads),
        "--output-dir", str(output_dir),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def diversity_alpha_phylogenetic(
    *,
    input_table: Path,
    input_phylogeny: Path,
    metric: str,
    output_vector: Path,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd = [
        "qiime", "diversity", "alpha-phylogenetic",
        "--i-phylogeny", str(input_phylogeny),
        "--i-table", str(input_table),
        "--p-metric", str(metric),
        "--o-alpha-diversity", str(output_vector),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)


def diversity_beta_phylogenetic(
    *,
    input_table: Path,
    input_phylogeny: Path,
    metric: str,
    output_matrix: Path,
    threads: int = 1,
    dry_run: bool = False,
    show_stdout: bool = False,
) -> None:
    cmd = [
        "qiime", "diversity", "beta-phylogenetic",
        "--i-phylogeny", str(input_phylogeny),
        "--i-table", str(input_table),
        "--p-metric", str(metric),
        "--p-threads", str(threads),
        "--o-distance-matrix", str(output_matrix),
    ]
    run_command(cmd, dry_run=dry_run, capture=not show_stdout)
