# src/qit/commands/__init__.py
"""
Command package.

Submodules are imported explicitly by qit.cli to avoid circular imports.
Do NOT import submodules here.
"""
__all__ = [
    "init",
    "doctor",
    "manifest",
    "validate",
    "convert",
    "run",
]
