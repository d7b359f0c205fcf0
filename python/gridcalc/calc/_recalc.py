"""Recalculation engine: one fixed row-major sweep over every formula cell.

There is no dependency graph.  Each formula sees the grid as it stands at its
turn, so it observes values rewritten earlier in the same pass but never
those of cells visited later.  A forward reference can therefore show a stale
value until the next pass.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridcalc._utils import rowcol_to_a1
from gridcalc.calc._errors import FormulaError
from gridcalc.calc._evaluator import FormulaEvaluator
from gridcalc.calc._protocol import CellDelta, RecalcResult
from gridcalc.config import Settings, get_settings

if TYPE_CHECKING:
    from gridcalc._cell import Cell
    from gridcalc._grid import Grid

logger = logging.getLogger(__name__)


class RecalcEngine:
    """Drives a full recalculation pass over a :class:`~gridcalc.Grid`."""

    def __init__(
        self,
        evaluator: FormulaEvaluator | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._evaluator = evaluator or FormulaEvaluator(settings=settings)
        self._error_marker = settings.error_marker

    @property
    def evaluator(self) -> FormulaEvaluator:
        return self._evaluator

    def evaluate_cell(self, grid: Grid, row: int, col: int) -> bool:
        """Evaluate one formula cell in place. Returns False if it failed.

        A failure sets the display to the error marker and keeps the message
        on the cell; it is never raised.
        """
        cell: Cell = grid.rows[row].cells[col]
        if cell.formula is None:
            return True
        try:
            cell.value = self._evaluator.evaluate_formula(cell.formula, grid)
            cell.error = None
            return True
        except FormulaError as exc:
            cell.value = self._error_marker
            cell.error = str(exc)
            logger.debug("Formula %r in %s failed: %s", cell.formula, rowcol_to_a1(row, col), exc)
            return False

    def recalculate(self, grid: Grid, edited: tuple[int, int] | None = None) -> RecalcResult:
        """Re-evaluate every formula cell in row-major order.

        When *edited* names the cell the user just changed, that cell is
        evaluated once up front, then the full sweep runs.  Deltas compare
        each formula cell before and after the whole cycle.
        """
        before: dict[tuple[int, int], tuple[str, str | None]] = {
            (r, c): (cell.value, cell.error)
            for r, row in enumerate(grid.rows)
            for c, cell in enumerate(row.cells)
            if cell.formula is not None
        }

        if edited is not None:
            self.evaluate_cell(grid, *edited)

        total = errors = 0
        for r, row in enumerate(grid.rows):
            for c, cell in enumerate(row.cells):
                if cell.formula is None:
                    continue
                total += 1
                if not self.evaluate_cell(grid, r, c):
                    errors += 1

        deltas: list[CellDelta] = []
        for (r, c), (old_value, old_error) in before.items():
            cell = grid.rows[r].cells[c]
            if cell.value != old_value or cell.error != old_error:
                deltas.append(CellDelta(
                    cell_ref=rowcol_to_a1(r, c),
                    old_value=old_value,
                    new_value=cell.value,
                    formula=cell.formula,
                    error=cell.error,
                ))

        logger.debug(
            "Recalculated %d formula cell(s): %d changed, %d in error",
            total, len(deltas), errors,
        )
        return RecalcResult(
            deltas=tuple(deltas),
            total_formula_cells=total,
            error_cells=errors,
        )
