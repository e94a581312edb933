# src/qit/pipeline/__init__.py
from .driver import MissingOutputError, PipelineResult, Stage, build_stages, run_pipeline
from .layout import OutputLayout

__all__ = ["MissingOutputError", "OutputLayout", "PipelineResult", "Stage", "build_stages", "run_pipeline"]
