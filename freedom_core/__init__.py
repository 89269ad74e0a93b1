"""Core (UI-agnostic) freedom index dashboard logic.

This package contains:
- spreadsheet decoding (XLSX/CSV -> rows) and record normalization
- the session dataset store
- filter normalization
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
