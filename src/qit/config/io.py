# src/qit/config/io.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .schema import Params


def _read_mapping(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ValueError(f"Params file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Params file is not valid YAML: {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Params file must contain a mapping at the top level.")
    return data


def load_params_file(path: Optional[Path]) -> Dict[str, Any]:
    """Raw params mapping from a YAML file ({} when no file given)."""
    if not path:
        return {}
    data = _read_mapping(path)
    inner = data.get("params", data)
    if not isinstance(inner, dict):
        raise ValueError("'params' must be a mapping.")
    return inner


def write_params(path: Path, params: Params, *, header: Optional[str] = None) -> Path:
    text = yaml.safe_dump({"params": params.to_dict()}, sort_keys=False)
    if header:
        text = "".join(f"# {ln}\n" if ln else "#\n" for ln in header.splitlines()) + text
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def apply_params_defaults(args, params: Mapping[str, Any], defaults: Mapping[str, Any]) -> None:
    """Set argparse args from params only where the current value equals our known defaults."""
    for k, v in params.items():
        if not hasattr(args, k):
            continue
        if k in defaults and getattr(args, k) == defaults[k]:
            setattr(args, k, v)


def params_from_args(args, fields: Mapping[str, Any]) -> Params:
    """Build a validated Params from argparse values (only the known fields)."""
    values = {k: getattr(args, k) for k in fields if getattr(args, k, None) is not None}
    return Params(**values)
