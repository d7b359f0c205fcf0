"""gridcalc.calc - Formula evaluation engine for gridcalc grids."""

from gridcalc.calc._arith import evaluate_arithmetic
from gridcalc.calc._errors import (
    ArityError,
    CellOutOfBounds,
    EvaluationError,
    FormulaError,
    InvalidRange,
    InvalidReference,
    UnknownFunction,
)
from gridcalc.calc._evaluator import FormulaEvaluator
from gridcalc.calc._functions import FUNCTION_MENU, FunctionRegistry, FunctionSpec, is_supported
from gridcalc.calc._parser import (
    expand_range,
    match_function_call,
    parse_range,
    parse_reference,
    split_arguments,
)
from gridcalc.calc._protocol import CellDelta, GridView, RecalcResult
from gridcalc.calc._recalc import RecalcEngine
from gridcalc.calc._values import Number, Text, coerce, format_number

__all__ = [
    "ArityError",
    "CellDelta",
    "CellOutOfBounds",
    "EvaluationError",
    "FUNCTION_MENU",
    "FormulaError",
    "FormulaEvaluator",
    "FunctionRegistry",
    "FunctionSpec",
    "GridView",
    "InvalidRange",
    "InvalidReference",
    "Number",
    "RecalcEngine",
    "RecalcResult",
    "Text",
    "UnknownFunction",
    "coerce",
    "evaluate_arithmetic",
    "expand_range",
    "format_number",
    "is_supported",
    "match_function_call",
    "parse_range",
    "parse_reference",
    "split_arguments",
]
