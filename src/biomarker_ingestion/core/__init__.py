# ============================================================================
# src/biomarker_ingestion/core/__init__.py
# ============================================================================
