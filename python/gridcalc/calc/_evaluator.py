"""FormulaEvaluator: evaluates one formula against a grid snapshot.

A formula takes exactly one of two disjoint paths:

1. the whole text is ``NAME(args)`` -> function library dispatch;
2. anything else -> every ``A1`` reference is replaced by its coerced value
   and the result is evaluated under the restricted arithmetic grammar.

Functions therefore never nest inside arithmetic, nor arithmetic inside
function arguments.
"""

from __future__ import annotations

import logging
import re

from gridcalc.calc._arith import evaluate_arithmetic
from gridcalc.calc._functions import FunctionRegistry
from gridcalc.calc._parser import REFERENCE_RE, match_function_call, resolve_reference, split_arguments
from gridcalc.calc._protocol import GridView
from gridcalc.calc._values import format_number
from gridcalc.config import Settings, get_settings

logger = logging.getLogger(__name__)

FORMULA_MARKER = "="


def is_formula(raw: str) -> bool:
    return raw.startswith(FORMULA_MARKER)


class FormulaEvaluator:
    """Evaluates formula text (marker stripped) to a display string.

    Usage::

        evaluator = FormulaEvaluator()
        evaluator.evaluate("SUM(A1:A3)", grid)   # "6"
        evaluator.evaluate("A1*2+1", grid)       # "3"

    Every failure is a :class:`~gridcalc.calc._errors.FormulaError`.
    """

    def __init__(
        self,
        functions: FunctionRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._functions = functions or FunctionRegistry()
        self._max_length = settings.max_formula_length
        self._max_depth = settings.max_expression_depth

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    def evaluate_formula(self, formula: str, grid: GridView) -> str:
        """Evaluate stored formula text, with or without its ``=`` marker."""
        body = formula[1:] if is_formula(formula) else formula
        return self.evaluate(body, grid)

    def evaluate(self, body: str, grid: GridView) -> str:
        call = match_function_call(body)
        if call is not None:
            name, args_str = call
            args = split_arguments(args_str)
            logger.debug("Dispatching %s with %d argument(s)", name, len(args))
            return self._functions.dispatch(name, args, grid)
        return self._eval_arithmetic(body, grid)

    def substitute_references(self, body: str, grid: GridView) -> str:
        """Replace each ``A1`` token with its coerced value, rendered.

        Text values are spliced in unquoted.
        """

        def _replace(m: re.Match[str]) -> str:
            return resolve_reference(m.group(0), grid).render()

        return REFERENCE_RE.sub(_replace, body)

    def _eval_arithmetic(self, body: str, grid: GridView) -> str:
        substituted = self.substitute_references(body, grid)
        value = evaluate_arithmetic(
            substituted,
            max_length=self._max_length,
            max_depth=self._max_depth,
        )
        return format_number(value)
