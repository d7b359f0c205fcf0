"""Grid - the mutable 2-D cell document.

Every mutation that can change computed values (cell edits, row/column
insertion and deletion, loading) runs under one re-entrant lock together
with the full recalculation pass it triggers, so an edit and its recalc are
a single atomic unit even with several editing threads.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field

from gridcalc._cell import ALIGNMENTS, Cell, Formatting
from gridcalc._document import (
    CellDocument,
    ColumnDocument,
    FormattingDocument,
    GridDocument,
    RowDocument,
    dump_document,
    parse_document,
)
from gridcalc._utils import a1_to_rowcol, column_label, rowcol_to_a1
from gridcalc.calc._evaluator import is_formula
from gridcalc.calc._functions import FUNCTION_MENU
from gridcalc.calc._protocol import RecalcResult
from gridcalc.calc._recalc import RecalcEngine
from gridcalc.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class Column:
    id: str
    label: str
    width: int = 100


@dataclass
class Row:
    id: str
    cells: list[Cell] = field(default_factory=list)


def _id_suffix(id_: str) -> str:
    return id_.split("-", 1)[1] if "-" in id_ else id_


def _next_id(prefix: str, taken: set[str], start: int) -> str:
    n = start
    while f"{prefix}-{n}" in taken:
        n += 1
    return f"{prefix}-{n}"


class Grid:
    """Rows of cells plus parallel column metadata.

    Usage::

        grid = Grid.new()
        grid["A1"] = "2"
        grid["A2"] = "3"
        grid["A3"] = "=A1+A2"
        grid["A3"].value   # "5"
    """

    def __init__(
        self,
        columns: list[Column],
        rows: list[Row],
        settings: Settings | None = None,
        engine: RecalcEngine | None = None,
    ) -> None:
        for row in rows:
            if len(row.cells) != len(columns):
                raise ValueError(
                    f"Row {row.id!r} has {len(row.cells)} cells, expected {len(columns)}"
                )
        self._settings = settings or get_settings()
        self._engine = engine or RecalcEngine(settings=self._settings)
        self._lock = threading.RLock()
        self.columns = columns
        self.rows = rows

    @classmethod
    def new(
        cls,
        n_rows: int | None = None,
        n_cols: int | None = None,
        settings: Settings | None = None,
    ) -> Grid:
        """Empty grid; dimensions default to the configured sizes."""
        settings = settings or get_settings()
        n_rows = settings.default_rows if n_rows is None else n_rows
        n_cols = settings.default_columns if n_cols is None else n_cols
        if n_rows < 1 or n_cols < 1:
            raise ValueError("A grid needs at least one row and one column")
        columns = [
            Column(id=f"col-{c}", label=column_label(c), width=settings.default_column_width)
            for c in range(n_cols)
        ]
        rows = [
            Row(id=f"row-{r}", cells=[Cell(id=f"cell-{r}-{c}") for c in range(n_cols)])
            for r in range(n_rows)
        ]
        return cls(columns, rows, settings=settings)

    # ------------------------------------------------------------------
    # GridView
    # ------------------------------------------------------------------

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return len(self.columns)

    def value_at(self, row: int, col: int) -> str:
        return self.rows[row].cells[col].value

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.n_rows and 0 <= col < self.n_cols):
            raise IndexError(
                f"Cell ({row}, {col}) outside {self.n_rows}x{self.n_cols} grid"
            )

    def cell(self, row: int, col: int) -> Cell:
        self._check(row, col)
        return self.rows[row].cells[col]

    def __getitem__(self, key: str) -> Cell:
        """``grid['B3']`` -> Cell."""
        return self.cell(*a1_to_rowcol(key))

    def __setitem__(self, key: str, raw: str) -> None:
        """``grid['B3'] = '=A1*2'`` - shorthand for :meth:`set_cell`."""
        self.set_cell(*a1_to_rowcol(key), raw)

    def iter_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Row-major ``(row, col, cell)`` triples."""
        for r, row in enumerate(self.rows):
            for c, cell in enumerate(row.cells):
                yield r, c, cell

    def raw_input(self, row: int, col: int) -> str:
        return self.cell(row, col).raw_input

    @staticmethod
    def label_of(row: int, col: int) -> str:
        return rowcol_to_a1(row, col)

    @staticmethod
    def range_label(start: tuple[int, int], end: tuple[int, int]) -> str:
        """Selection text such as ``"A1:B3"``."""
        return f"{rowcol_to_a1(*start)}:{rowcol_to_a1(*end)}"

    @staticmethod
    def available_functions() -> list[str]:
        """Function names offered to the user, in menu order."""
        return list(FUNCTION_MENU)

    # ------------------------------------------------------------------
    # Edits (each followed by a full recalculation pass)
    # ------------------------------------------------------------------

    def recalculate(self) -> RecalcResult:
        with self._lock:
            return self._engine.recalculate(self)

    def set_cell(self, row: int, col: int, raw: str) -> RecalcResult:
        """Store user input; a leading ``=`` makes it a formula."""
        with self._lock:
            cell = self.cell(row, col)
            if is_formula(raw):
                cell.set_formula(raw)
            else:
                cell.set_literal(raw)
            return self._engine.recalculate(self, edited=(row, col))

    def clear_cell(self, row: int, col: int) -> RecalcResult:
        return self.set_cell(row, col, "")

    def _new_row(self, start: int) -> Row:
        row_id = _next_id("row", {r.id for r in self.rows}, start)
        suffix = _id_suffix(row_id)
        return Row(
            id=row_id,
            cells=[Cell(id=f"cell-{suffix}-{_id_suffix(c.id)}") for c in self.columns],
        )

    def _relabel_columns(self) -> None:
        for c, column in enumerate(self.columns):
            column.label = column_label(c)

    def add_row(self) -> RecalcResult:
        return self.insert_row(self.n_rows)

    def add_column(self) -> RecalcResult:
        return self.insert_column(self.n_cols)

    def insert_row(self, index: int) -> RecalcResult:
        """Insert an empty row before *index* (``n_rows`` appends).

        Formula texts are not rewritten; references stay positional.
        """
        with self._lock:
            if not 0 <= index <= self.n_rows:
                raise IndexError(f"Row index {index} outside 0..{self.n_rows}")
            self.rows.insert(index, self._new_row(self.n_rows))
            logger.debug("Inserted row at %d", index)
            return self._engine.recalculate(self)

    def insert_column(self, index: int) -> RecalcResult:
        """Insert an empty column before *index* (``n_cols`` appends)."""
        with self._lock:
            if not 0 <= index <= self.n_cols:
                raise IndexError(f"Column index {index} outside 0..{self.n_cols}")
            col_id = _next_id("col", {c.id for c in self.columns}, self.n_cols)
            column = Column(id=col_id, label="", width=self._settings.default_column_width)
            self.columns.insert(index, column)
            for row in self.rows:
                row.cells.insert(
                    index, Cell(id=f"cell-{_id_suffix(row.id)}-{_id_suffix(col_id)}")
                )
            self._relabel_columns()
            logger.debug("Inserted column at %d", index)
            return self._engine.recalculate(self)

    def delete_row(self, index: int) -> RecalcResult:
        with self._lock:
            if not 0 <= index < self.n_rows:
                raise IndexError(f"Row index {index} outside 0..{self.n_rows - 1}")
            if self.n_rows == 1:
                raise ValueError("Cannot delete the only row")
            del self.rows[index]
            logger.debug("Deleted row %d", index)
            return self._engine.recalculate(self)

    def delete_column(self, index: int) -> RecalcResult:
        with self._lock:
            if not 0 <= index < self.n_cols:
                raise IndexError(f"Column index {index} outside 0..{self.n_cols - 1}")
            if self.n_cols == 1:
                raise ValueError("Cannot delete the only column")
            del self.columns[index]
            for row in self.rows:
                del row.cells[index]
            self._relabel_columns()
            logger.debug("Deleted column %d", index)
            return self._engine.recalculate(self)

    # ------------------------------------------------------------------
    # Formatting (does not touch values, no recalculation)
    # ------------------------------------------------------------------

    def format_cell(
        self,
        row: int,
        col: int,
        *,
        bold: bool | None = None,
        italic: bool | None = None,
        align: str | None = None,
    ) -> Formatting:
        if align is not None and align not in ALIGNMENTS:
            raise ValueError(f"align must be one of {ALIGNMENTS}, got {align!r}")
        with self._lock:
            fmt = self.cell(row, col).formatting
            if bold is not None:
                fmt.bold = bold
            if italic is not None:
                fmt.italic = italic
            if align is not None:
                fmt.align = align  # type: ignore[assignment]
            return fmt

    def toggle_bold(self, row: int, col: int) -> Formatting:
        with self._lock:
            return self.format_cell(row, col, bold=not self.cell(row, col).formatting.bold)

    def toggle_italic(self, row: int, col: int) -> Formatting:
        with self._lock:
            return self.format_cell(row, col, italic=not self.cell(row, col).formatting.italic)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_document(self) -> GridDocument:
        with self._lock:
            return GridDocument(
                columns=[
                    ColumnDocument(id=c.id, label=c.label, width=c.width)
                    for c in self.columns
                ],
                rows=[
                    RowDocument(
                        id=row.id,
                        cells=[
                            CellDocument(
                                id=cell.id,
                                value=cell.value,
                                formula=cell.formula,
                                error=cell.error,
                                formatting=FormattingDocument(
                                    bold=cell.formatting.bold,
                                    italic=cell.formatting.italic,
                                    align=cell.formatting.align,
                                ),
                            )
                            for cell in row.cells
                        ],
                    )
                    for row in self.rows
                ],
            )

    @classmethod
    def from_document(cls, doc: GridDocument, settings: Settings | None = None) -> Grid:
        """Build a grid from a validated document and run one recalculation pass.

        An empty ``formula`` string loads as a literal cell.
        """
        columns = [Column(id=c.id, label=c.label, width=c.width) for c in doc.columns]
        rows = [
            Row(
                id=r.id,
                cells=[
                    Cell(
                        id=c.id,
                        value=c.value,
                        formula=c.formula or None,
                        error=c.error,
                        formatting=Formatting(
                            bold=c.formatting.bold,
                            italic=c.formatting.italic,
                            align=c.formatting.align,
                        ),
                    )
                    for c in r.cells
                ],
            )
            for r in doc.rows
        ]
        grid = cls(columns, rows, settings=settings)
        grid.recalculate()
        return grid

    def dumps(self, indent: int | None = None) -> str:
        return dump_document(self.to_document(), indent=indent)

    @classmethod
    def loads(cls, text: str | bytes, settings: Settings | None = None) -> Grid:
        return cls.from_document(parse_document(text), settings=settings)

    def save(self, filename: str | os.PathLike[str]) -> None:
        """Write the grid as a JSON document."""
        filename = str(filename)
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dumps())
        logger.info("Saved %dx%d grid to %s", self.n_rows, self.n_cols, filename)

    @classmethod
    def load(cls, filename: str | os.PathLike[str], settings: Settings | None = None) -> Grid:
        filename = str(filename)
        with open(filename, "rb") as f:
            grid = cls.loads(f.read(), settings=settings)
        logger.info("Loaded %dx%d grid from %s", grid.n_rows, grid.n_cols, filename)
        return grid

    def __repr__(self) -> str:
        formulas = sum(1 for _, _, cell in self.iter_cells() if cell.is_formula)
        return f"<Grid {self.n_rows}x{self.n_cols} formulas={formulas}>"
