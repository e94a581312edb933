# src/qit/pipeline/driver.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from qit.config.schema import Params
from qit.metadata.validate import validate_metadata_file
from qit.pipeline import stages
from qit.pipeline.layout import OutputLayout
from qit.pipeline.stages import RunContext
from qit.utils.logger import get_logger, log_banner, log_success
from qit.utils.manifest import validate_manifest

LOG = get_logger("pipeline")

StageFn = Callable[[Params, OutputLayout, RunContext], object]


class MissingOutputError(Exception):
    def __init__(self, stage: str, paths: Sequence[Path]):
        self.stage = stage
        self.paths = list(paths)
        shown = ", ".join(str(p) for p in self.paths)
        super().__init__(f"stage '{stage}' finished but did not produce: {shown}")


@dataclass(frozen=True)
class Stage:
    name: str
    banner: str
    run: StageFn
    produces: Callable[[OutputLayout], List[Path]] = lambda _layout: []
    # manifest and metadata are checked right before this stage runs
    checks_inputs: bool = False


@dataclass
class PipelineResult:
    layout: OutputLayout
    completed: List[str] = field(default_factory=list)


def build_stages() -> List[Stage]:
    """The eight pipeline stages, in execution order."""
    return [
        Stage("setup", "Setting up directories...", stages.setup_directories,
              lambda o: o.subdirs()),
        Stage("convert", "Converting BAM files to FASTQ...", stages.convert_reads),
        Stage("import", "Importing sequences into QIIME2...", stages.import_reads,
              lambda o: [o.demux_qza, o.demux_qzv], checks_inputs=True),
        Stage("denoise", "Denoising sequences with DADA2...", stages.denoise,
              lambda o: [o.table_qza, o.rep_seqs_qza, o.stats_qza,
                         o.table_summary_qzv, o.rep_seqs_qzv, o.stats_qzv]),
        Stage("taxonomy", "Classifying taxonomy...", stages.classify,
              lambda o: [o.taxonomy_qza, o.taxonomy_qzv, o.taxa_barplot_qzv]),
        Stage("phylogeny", "Building phylogenetic tree...", stages.build_phylogeny,
              lambda o: [o.aligned_qza, o.masked_aligned_qza, o.unrooted_tree_qza, o.rooted_tree_qza]),
        Stage("diversity", "Calculating diversity metrics...", stages.run_diversity,
              lambda o: [o.alpha_rarefaction_qzv, o.core_metrics_dir, o.faith_pd_qza,
                         o.weighted_unifrac_qza, o.unweighted_unifrac_qza]),
        Stage("export", "Exporting data for downstream analysis...", stages.export_results,
              lambda o: [o.export_table_tsv, o.export_taxonomy_dir, o.export_bray_curtis_dir,
                         o.export_weighted_unifrac_dir, o.export_jaccard_dir, o.export_faith_pd_dir]),
    ]


def validate_inputs(params: Params, *, check_files: bool = True) -> List[str]:
    """
    Check the manifest and metadata. Raises ManifestError or MetadataError;
    returns metadata warnings. Runs after conversion, since the manifest
    usually lists the FASTQs that stage writes.
    """
    rows = validate_manifest(params.manifest_path, check_files=check_files)
    warnings = validate_metadata_file(
        params.metadata_path,
        against_sample_ids=sorted({r.sample_id for r in rows}),
    )
    for w in warnings:
        LOG.warning("Metadata: %s", w)
    return warnings


def _missing_outputs(stage: Stage, layout: OutputLayout) -> List[Path]:
    return [p for p in stage.produces(layout) if not p.exists()]


def run_pipeline(
    params: Params,
    *,
    dry_run: bool = False,
    show_qiime: bool = True,
    stage_list: Optional[Sequence[Stage]] = None,
) -> PipelineResult:
    """
    Run every stage in order. An external command failing raises
    CalledProcessError out of here, so later stages never start.
    """
    layout = OutputLayout(params.output_dir)
    ctx = RunContext(dry_run=dry_run, show_qiime=show_qiime)
    result = PipelineResult(layout=layout)

    for stage in stage_list if stage_list is not None else build_stages():
        log_banner(stage.banner, LOG)
        if stage.checks_inputs and params.validate_inputs:
            validate_inputs(params, check_files=not dry_run)
        stage.run(params, layout, ctx)
        if params.verify_outputs and not dry_run:
            missing = _missing_outputs(stage, layout)
            if missing:
                raise MissingOutputError(stage.name, missing)
        result.completed.append(stage.name)

    _log_summary(layout)
    return result


def _log_summary(layout: OutputLayout) -> None:
    log_banner("Pipeline completed successfully!", LOG)
    log_success(f"Output files are located in: {layout.root}", LOG)
    LOG.info("Next steps:")
    LOG.info("  1. Review quality plots in %s", layout.demux_qzv)
    LOG.info("  2. Check rarefaction curves in %s", layout.alpha_rarefaction_qzv)
    LOG.info("  3. Explore taxonomy in %s", layout.taxa_barplot_qzv)
    LOG.info("  4. Use exported files in %s for R analysis", layout.exports_dir)
