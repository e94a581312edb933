# tests/test_config.py
from argparse import Namespace
from pathlib import Path

import pytest
from pydantic import ValidationError

from qit.commands.common import PARAM_DEFAULTS, resolve_params
from qit.config.io import load_params_file, write_params
from qit.config.schema import Params


def test_defaults_match_the_ion_torrent_setup():
    p = Params()
    assert (p.trim_left, p.trunc_len, p.trunc_q) == (15, 0, 20)
    assert p.sampling_depth == 3400
    assert (p.rarefaction_min_depth, p.rarefaction_max_depth) == (10, 5000)
    assert p.n_threads == 4
    assert p.output_dir == Path("results")


@pytest.mark.parametrize("field,value", [
    ("n_threads", 0),
    ("trim_left", -1),
    ("sampling_depth", 0),
])
def test_rejects_bad_values(field, value):
    with pytest.raises(ValidationError):
        Params(**{field: value})


def test_rejects_inverted_rarefaction_range():
    with pytest.raises(ValidationError):
        Params(rarefaction_min_depth=500, rarefaction_max_depth=100)


def test_relative_tables_resolve_against_work_dir(tmp_path):
    p = Params(work_dir=tmp_path, metadata_file=Path("/abs/metadata.tsv"))
    assert p.manifest_path == tmp_path / "manifest.tsv"
    assert p.metadata_path == Path("/abs/metadata.tsv")


def test_load_params_accepts_flat_or_nested(tmp_path):
    flat = tmp_path / "flat.yaml"
    flat.write_text("n_threads: 8\n")
    nested = tmp_path / "nested.yaml"
    nested.write_text("params:\n  n_threads: 8\n")
    assert load_params_file(flat) == {"n_threads": 8}
    assert load_params_file(nested) == {"n_threads": 8}
    assert load_params_file(None) == {}


def test_load_params_rejects_non_mapping(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_params_file(bad)


def test_written_params_load_back(tmp_path):
    out = write_params(tmp_path / "p.yaml", Params(n_threads=2), header="hello\n\nworld")
    text = out.read_text()
    assert text.startswith("# hello\n#\n# world\n")
    assert Params(**load_params_file(out)).n_threads == 2


def _args(**overrides):
    ns = Namespace(params=None, **PARAM_DEFAULTS)
    for k, v in overrides.items():
        setattr(ns, k, v)
    return ns


def test_params_file_fills_cli_defaults_but_cli_wins(tmp_path):
    pf = tmp_path / "params.yaml"
    pf.write_text("params:\n  n_threads: 16\n  sampling_depth: 1200\n  not_a_field: 1\n")
    params = resolve_params(_args(params=pf, sampling_depth=5000))
    assert params.n_threads == 16
    assert params.sampling_depth == 5000


def test_load_params_missing_file(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        load_params_file(tmp_path / "nope.yaml")


def test_load_params_malformed_yaml(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("params: [unclosed\n")
    with pytest.raises(ValueError, match="not valid YAML"):
        load_params_file(bad)
