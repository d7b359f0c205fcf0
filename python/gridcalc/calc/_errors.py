"""Cell-local formula errors.

Every error here is recoverable: the recalculation pass turns it into the
``#ERROR`` display marker and keeps ``str(exc)`` as the cell's message.
"""

from __future__ import annotations


class FormulaError(ValueError):
    """Base class for every failure raised while evaluating one formula."""


class InvalidReference(FormulaError):
    def __init__(self, ref: str) -> None:
        super().__init__(f"Invalid cell reference: {ref}")
        self.ref = ref


class InvalidRange(FormulaError):
    def __init__(self, ref: str) -> None:
        super().__init__(f"Invalid range reference: {ref}")
        self.ref = ref


class CellOutOfBounds(FormulaError):
    """A single reference points outside the grid (ranges skip instead)."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Cell reference out of bounds: {ref}")
        self.ref = ref


class ArityError(FormulaError):
    pass


class UnknownFunction(FormulaError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown function: {name}")
        self.name = name


class EvaluationError(FormulaError):
    pass
