# src/qit/__init__.py
"""Ion Torrent 16S rRNA pipeline driver for QIIME2."""

__version__ = "1.0.0"
