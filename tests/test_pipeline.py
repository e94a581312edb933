# tests/test_pipeline.py
import subprocess

import pytest

from qit.metadata.validate import MetadataError
from qit.pipeline import MissingOutputError, OutputLayout, build_stages, run_pipeline
from qit.pipeline.driver import Stage

THREAD_FLAGS = {"--p-n-threads", "--p-n-jobs", "--p-n-jobs-or-threads", "--p-threads", "-@"}

EXPECTED_ACTIONS = [
    "tools import", "demux summarize",
    "dada2 denoise-pyro", "feature-table summarize", "feature-table tabulate-seqs", "metadata tabulate",
    "feature-classifier classify-sklearn", "metadata tabulate", "taxa barplot",
    "alignment mafft", "alignment mask", "phylogeny fasttree", "phylogeny midpoint-root",
    "diversity alpha-rarefaction", "diversity core-metrics-phylogenetic",
    "diversity alpha-phylogenetic", "diversity beta-phylogenetic", "diversity beta-phylogenetic",
    "tools export", "biom", "tools export", "tools export", "tools export", "tools export", "tools export",
]


def _arg(cmd, flag):
    return cmd[cmd.index(flag) + 1]


def test_stage_order():
    assert [s.name for s in build_stages()] == [
        "setup", "convert", "import", "denoise", "taxonomy", "phylogeny", "diversity", "export",
    ]


def test_end_to_end_single_sample(fake_run, params):
    result = run_pipeline(params)
    o = OutputLayout(params.output_dir)

    assert result.completed == [s.name for s in build_stages()]
    assert fake_run.actions() == EXPECTED_ACTIONS

    imp = fake_run.calls[fake_run.index_of("tools import")]
    assert _arg(imp, "--input-path") == str(params.work_dir / "manifest.tsv")
    assert _arg(imp, "--input-format") == "SingleEndFastqManifestPhred33V2"
    assert _arg(imp, "--type") == "SampleData[SequencesWithQuality]"

    pyro = fake_run.calls[fake_run.index_of("dada2 denoise-pyro")]
    assert (_arg(pyro, "--p-trim-left"), _arg(pyro, "--p-trunc-len"), _arg(pyro, "--p-trunc-q")) == ("15", "0", "20")

    # artifacts appear in pipeline order at their fixed paths
    produced = [o.demux_qza, o.table_qza, o.taxonomy_qza, o.rooted_tree_qza, o.core_metrics_dir]
    for path in produced:
        assert path.exists()
    assert _arg(imp, "--output-path") == str(o.demux_qza)
    assert _arg(pyro, "--o-table") == str(o.table_qza)
    assert fake_run.index_of("tools import") < fake_run.index_of("dada2 denoise-pyro") \
        < fake_run.index_of("feature-classifier classify-sklearn") \
        < fake_run.index_of("phylogeny midpoint-root") \
        < fake_run.index_of("diversity core-metrics-phylogenetic")

    assert (params.output_dir / "params.used.yaml").exists()


def test_thread_count_reaches_every_parallel_step(fake_run, params, workspace):
    (workspace / "S1.bam").write_bytes(b"bam")
    run_pipeline(params.model_copy(update={"n_threads": 7}))

    threaded = [c for c in fake_run.calls if THREAD_FLAGS & set(c)]
    assert {" ".join(c[1:3]) if c[0] == "qiime" else c[0] for c in threaded} == {
        "samtools", "dada2 denoise-pyro", "feature-classifier classify-sklearn", "alignment mafft",
        "phylogeny fasttree", "diversity core-metrics-phylogenetic", "diversity beta-phylogenetic",
    }
    for cmd in threaded:
        flag = next(f for f in THREAD_FLAGS if f in cmd)
        assert _arg(cmd, flag) == "7"


def test_failure_halts_before_next_stage(fake_run, params):
    fake_run.fail_when = lambda cmd: cmd[1:3] == ["dada2", "denoise-pyro"]
    with pytest.raises(subprocess.CalledProcessError):
        run_pipeline(params)

    assert fake_run.actions()[-1] == "dada2 denoise-pyro"
    assert "feature-classifier classify-sklearn" not in fake_run.actions()


def test_rerun_overwrites_outputs(fake_run, params):
    run_pipeline(params)
    first = len(fake_run.calls)
    run_pipeline(params)
    assert len(fake_run.calls) == 2 * first


def test_missing_output_stops_the_run(fake_run, params):
    def no_demux(p, layout, ctx):
        return None

    stage_list = build_stages()
    stage_list[2] = Stage("import", "Importing...", no_demux, stage_list[2].produces)
    with pytest.raises(MissingOutputError) as exc:
        run_pipeline(params, stage_list=stage_list)
    assert exc.value.stage == "import"
    assert fake_run.calls == []


def test_verification_can_be_disabled(fake_run, params):
    stage_list = [Stage("import", "Importing...", lambda p, o, c: None, lambda o: [o.demux_qza])]
    result = run_pipeline(params.model_copy(update={"verify_outputs": False}), stage_list=stage_list)
    assert result.completed == ["import"]


def test_inputs_checked_before_import(fake_run, params, workspace):
    (workspace / "metadata.tsv").write_text("sample-id\tsite\nS9\tgut\n")
    with pytest.raises(MetadataError):
        run_pipeline(params)
    assert fake_run.qiime_calls() == []
    # setup already ran
    assert (params.output_dir / "denoising").is_dir()


def test_dry_run_runs_nothing_and_writes_nothing(fake_run, params):
    result = run_pipeline(params, dry_run=True)
    assert result.completed == [s.name for s in build_stages()]
    assert fake_run.calls == []
    assert not params.output_dir.exists()
