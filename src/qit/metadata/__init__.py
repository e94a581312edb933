# src/qit/metadata/__init__.py
"""
Sample metadata helpers (QIIME2 sample-metadata TSV).
"""

# Header cells QIIME2 accepts as the sample identifier column
SAMPLE_ID_ALIASES = {
    "id", "sampleid", "sample id", "sample-id", "#sampleid", "#sample id", "sample_name",
}
