"""Function library: typed descriptors and builtin implementations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from gridcalc.calc._errors import ArityError, UnknownFunction
from gridcalc.calc._parser import is_range, is_reference, resolve_range, resolve_reference
from gridcalc.calc._protocol import GridView
from gridcalc.calc._values import Number, Value, format_number

Handler = Callable[[list[str], GridView], str]
ArgKind = Literal["refs", "single_ref"]

# ---------------------------------------------------------------------------
# Menu: every name offered to the user, in display order, by category.
# REMOVE_DUPLICATES and FIND_AND_REPLACE are offered but have no handler.
# ---------------------------------------------------------------------------

FUNCTION_MENU: dict[str, str] = {
    # Mathematical (5)
    "SUM": "math",
    "AVERAGE": "math",
    "MAX": "math",
    "MIN": "math",
    "COUNT": "math",
    # Data quality (5)
    "TRIM": "text",
    "UPPER": "text",
    "LOWER": "text",
    "REMOVE_DUPLICATES": "text",
    "FIND_AND_REPLACE": "text",
}


@dataclass(frozen=True)
class FunctionSpec:
    """Declared shape of a function plus its handler.

    ``arg_kind == "refs"``: any number of single references or ranges.
    ``arg_kind == "single_ref"``: exactly ``arity`` single references.
    """

    name: str
    category: str
    arg_kind: ArgKind
    handler: Handler | None = None
    arity: int | None = None

    @property
    def implemented(self) -> bool:
        return self.handler is not None

    def check_args(self, args: list[str]) -> None:
        if self.arg_kind != "single_ref":
            return
        if self.arity is not None and len(args) != self.arity:
            raise ArityError(
                f"{self.name} function requires exactly {self.arity} argument"
                f"{'' if self.arity == 1 else 's'}, got {len(args)}"
            )
        for arg in args:
            if not is_reference(arg):
                raise ArityError(f"{self.name} argument must be a single cell reference, got {arg!r}")

    def __call__(self, args: list[str], grid: GridView) -> str:
        if self.handler is None:
            raise UnknownFunction(self.name)
        self.check_args(args)
        return self.handler(args, grid)


# ---------------------------------------------------------------------------
# Mathematical builtins. Text values inside ranges or refs are skipped.
# ---------------------------------------------------------------------------


def _numbers(args: list[str], grid: GridView) -> list[float]:
    values: list[Value] = []
    for arg in args:
        if is_range(arg):
            values.extend(resolve_range(arg, grid))
        else:
            values.append(resolve_reference(arg, grid))
    return [v.value for v in values if isinstance(v, Number)]


def _builtin_sum(args: list[str], grid: GridView) -> str:
    return format_number(sum(_numbers(args, grid)))


def _builtin_average(args: list[str], grid: GridView) -> str:
    nums = _numbers(args, grid)
    if not nums:
        return "0"
    return format_number(sum(nums) / len(nums))


def _builtin_max(args: list[str], grid: GridView) -> str:
    nums = _numbers(args, grid)
    return format_number(max(nums)) if nums else "0"


def _builtin_min(args: list[str], grid: GridView) -> str:
    nums = _numbers(args, grid)
    return format_number(min(nums)) if nums else "0"


def _builtin_count(args: list[str], grid: GridView) -> str:
    return str(len(_numbers(args, grid)))


# ---------------------------------------------------------------------------
# Text builtins: one single-cell reference, applied to the rendered value.
# ---------------------------------------------------------------------------


def _text_of(args: list[str], grid: GridView) -> str:
    return resolve_reference(args[0], grid).render()


def _builtin_trim(args: list[str], grid: GridView) -> str:
    return _text_of(args, grid).strip()


def _builtin_upper(args: list[str], grid: GridView) -> str:
    return _text_of(args, grid).upper()


def _builtin_lower(args: list[str], grid: GridView) -> str:
    return _text_of(args, grid).lower()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_BUILTINS: dict[str, FunctionSpec] = {
    "SUM": FunctionSpec("SUM", "math", "refs", _builtin_sum),
    "AVERAGE": FunctionSpec("AVERAGE", "math", "refs", _builtin_average),
    "MAX": FunctionSpec("MAX", "math", "refs", _builtin_max),
    "MIN": FunctionSpec("MIN", "math", "refs", _builtin_min),
    "COUNT": FunctionSpec("COUNT", "math", "refs", _builtin_count),
    "TRIM": FunctionSpec("TRIM", "text", "single_ref", _builtin_trim, arity=1),
    "UPPER": FunctionSpec("UPPER", "text", "single_ref", _builtin_upper, arity=1),
    "LOWER": FunctionSpec("LOWER", "text", "single_ref", _builtin_lower, arity=1),
    # Placeholders
    "REMOVE_DUPLICATES": FunctionSpec("REMOVE_DUPLICATES", "text", "refs"),
    "FIND_AND_REPLACE": FunctionSpec("FIND_AND_REPLACE", "text", "refs"),
}


def is_supported(func_name: str) -> bool:
    """True if *func_name* has a builtin handler (placeholders do not)."""
    spec = _BUILTINS.get(func_name.upper())
    return spec is not None and spec.implemented


class FunctionRegistry:
    """Name -> :class:`FunctionSpec` table, seeded with the builtins.

    Lookups are by exact uppercase name; callers uppercase the identifier
    once when parsing the call.
    """

    def __init__(self) -> None:
        self._functions: dict[str, FunctionSpec] = dict(_BUILTINS)

    def register(self, spec: FunctionSpec) -> None:
        self._functions[spec.name.upper()] = spec

    def get(self, name: str) -> FunctionSpec | None:
        return self._functions.get(name.upper())

    def has(self, name: str) -> bool:
        return name.upper() in self._functions

    def dispatch(self, name: str, args: list[str], grid: GridView) -> str:
        spec = self._functions.get(name.upper())
        if spec is None:
            raise UnknownFunction(name)
        return spec(args, grid)

    @property
    def supported_functions(self) -> frozenset[str]:
        return frozenset(n for n, s in self._functions.items() if s.implemented)
