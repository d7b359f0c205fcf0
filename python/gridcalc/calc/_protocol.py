"""Read-only grid snapshot protocol and recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class GridView(Protocol):
    """What the calc engine may read from a grid while evaluating."""

    @property
    def n_rows(self) -> int:
        ...

    @property
    def n_cols(self) -> int:
        ...

    def value_at(self, row: int, col: int) -> str:
        """Stored display text of the cell at zero-indexed ``(row, col)``."""
        ...


@dataclass(frozen=True)
class CellDelta:
    """A single formula cell's display change from one recalculation pass."""

    cell_ref: str  # A1 form, e.g. "B3"
    old_value: str
    new_value: str
    formula: str | None = None
    error: str | None = None  # message stored on the cell after the pass


@dataclass(frozen=True)
class RecalcResult:
    """Outcome of one full row-major recalculation pass."""

    deltas: tuple[CellDelta, ...]
    total_formula_cells: int = 0
    error_cells: int = 0  # formula cells left showing the error marker

    @property
    def changed_cells(self) -> int:
        return len(self.deltas)
