# src/qit/config/__init__.py
from .schema import Params

__all__ = ["Params"]
