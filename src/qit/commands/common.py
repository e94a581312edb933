# src/qit/commands/common.py
from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Any, Dict

from qit.config.io import apply_params_defaults, load_params_file, params_from_args
from qit.config.schema import Params
from qit.utils.logger import get_logger

LOG = get_logger("commands")

# argparse defaults mirror the Params defaults so a params file can fill in
# anything the user did not pass explicitly
PARAM_DEFAULTS: Dict[str, Any] = {name: f.default for name, f in Params.model_fields.items()}


def add_params_arguments(p) -> None:
    p.add_argument("--params", type=Path, default=None,
                   help="YAML file with the run parameters (top level or under 'params').")
    p.add_argument("--work-dir", type=Path, default=PARAM_DEFAULTS["work_dir"],
                   help="Directory holding the *.zip / *.bam inputs (default: .).")
    p.add_argument("--output-dir", type=Path, default=PARAM_DEFAULTS["output_dir"],
                   help="Output root (default: ./results).")
    p.add_argument("--manifest-file", type=Path, default=PARAM_DEFAULTS["manifest_file"],
                   help="SingleEndFastqManifestPhred33V2 TSV (relative to --work-dir).")
    p.add_argument("--metadata-file", type=Path, default=PARAM_DEFAULTS["metadata_file"],
                   help="Sample metadata TSV (relative to --work-dir).")

    # DADA2 denoise-pyro
    p.add_argument("--trim-left", type=int, default=PARAM_DEFAULTS["trim_left"],
                   help="Bases to trim from the 5' end.")
    p.add_argument("--trunc-len", type=int, default=PARAM_DEFAULTS["trunc_len"],
                   help="Truncation length (0 = no truncation).")
    p.add_argument("--trunc-q", type=int, default=PARAM_DEFAULTS["trunc_q"],
                   help="Quality score threshold.")

    # Diversity
    p.add_argument("--sampling-depth", type=int, default=PARAM_DEFAULTS["sampling_depth"],
                   help="Rarefaction depth for core metrics.")
    p.add_argument("--rarefaction-min-depth", type=int, default=PARAM_DEFAULTS["rarefaction_min_depth"])
    p.add_argument("--rarefaction-max-depth", type=int, default=PARAM_DEFAULTS["rarefaction_max_depth"])

    p.add_argument("--classifier", type=Path, default=PARAM_DEFAULTS["classifier"],
                   help="Pre-trained naive Bayes classifier (.qza).")
    p.add_argument("--n-threads", type=int, default=PARAM_DEFAULTS["n_threads"],
                   help="Threads passed to every step that accepts them.")

    p.add_argument("--verify-outputs", dest="verify_outputs", action="store_true",
                   help="Fail a stage whose declared outputs are missing (default).")
    p.add_argument("--no-verify-outputs", dest="verify_outputs", action="store_false")
    p.add_argument("--validate-inputs", dest="validate_inputs", action="store_true",
                   help="Check manifest and metadata before import (default).")
    p.add_argument("--no-validate-inputs", dest="validate_inputs", action="store_false")
    p.set_defaults(verify_outputs=True, validate_inputs=True)


def resolve_params(args: Namespace) -> Params:
    """
    Params from the CLI, filled from --params where the CLI was left at its
    defaults. CLI always wins.
    """
    from_file = load_params_file(getattr(args, "params", None))
    if from_file:
        unknown = sorted(set(from_file) - set(PARAM_DEFAULTS))
        if unknown:
            LOG.warning("Ignoring unknown params: %s", ", ".join(unknown))
        apply_params_defaults(args, from_file, PARAM_DEFAULTS)
    return params_from_args(args, PARAM_DEFAULTS)
