"""Core (UI-agnostic) dashboard logic.

This package contains:
- dataset records and loading (JSON -> typed snapshot, sample fallback)
- filter normalization and task facets
- workload grouping, risk scoring and employee rows
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
