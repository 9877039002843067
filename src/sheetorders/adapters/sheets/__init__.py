"""Spreadsheet row adapter: column mappings and cell translation."""

from __future__ import annotations

from .schema import ColumnMapping, SheetRowPayload
from .translator import FIRST_DATA_ROW, column_index, translate_row, translate_rows

__all__ = [
    "FIRST_DATA_ROW",
    "ColumnMapping",
    "SheetRowPayload",
    "column_index",
    "translate_row",
    "translate_rows",
]
