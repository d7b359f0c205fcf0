"""Persisted grid document schema (JSON).

Shape::

    {
      "columns": [{"id": "col-0", "label": "A", "width": 100}, ...],
      "rows": [
        {"id": "row-0", "cells": [
          {"id": "cell-0-0", "value": "", "formula": null, "error": null,
           "formatting": {"bold": false, "italic": false, "align": "left"}},
          ...
        ]},
        ...
      ]
    }
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator


class DocumentError(ValueError):
    """A saved grid document could not be parsed or violates the grid shape."""


class FormattingDocument(BaseModel):
    bold: bool = False
    italic: bool = False
    align: Literal["left", "center", "right"] = "left"


class CellDocument(BaseModel):
    id: str
    value: str = ""
    formula: Optional[str] = None
    error: Optional[str] = None
    formatting: FormattingDocument = Field(default_factory=FormattingDocument)


class ColumnDocument(BaseModel):
    id: str
    label: str
    width: int = Field(default=100, ge=1)


class RowDocument(BaseModel):
    id: str
    cells: list[CellDocument]


class GridDocument(BaseModel):
    """Top-level document; every row must have one cell per column."""

    columns: list[ColumnDocument]
    rows: list[RowDocument]

    @model_validator(mode="after")
    def check_rectangular(self) -> GridDocument:
        n_cols = len(self.columns)
        for row in self.rows:
            if len(row.cells) != n_cols:
                raise ValueError(
                    f"Row {row.id!r} has {len(row.cells)} cells, expected {n_cols}"
                )
        return self


def parse_document(text: str | bytes) -> GridDocument:
    """Validate JSON text into a :class:`GridDocument`."""
    try:
        return GridDocument.model_validate_json(text)
    except (ValidationError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Invalid grid document: {exc}") from exc


def dump_document(doc: GridDocument, indent: int | None = None) -> str:
    return doc.model_dump_json(indent=indent)
