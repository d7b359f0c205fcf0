"""Reference resolution and formula parsing.

Two layers live here:

* the reference resolver, which turns ``"B3"`` / ``"A1:C4"`` tokens into
  zero-indexed grid coordinates and reads coerced values from a
  :class:`~gridcalc.calc._protocol.GridView`;
* the formula parser, which recognises a whole-formula function call and
  splits its argument text.
"""

from __future__ import annotations

import re

from gridcalc._utils import a1_to_rowcol, rowcol_to_a1
from gridcalc.calc._errors import CellOutOfBounds, InvalidRange, InvalidReference
from gridcalc.calc._protocol import GridView
from gridcalc.calc._values import Value, coerce

# ---------------------------------------------------------------------------
# Reference grammar
# ---------------------------------------------------------------------------

# Single ref: uppercase column letters then row digits. No $ anchors, no sheets.
_CELL_REF = r"[A-Z]+\d+"
_SINGLE_REF_RE = re.compile(rf"^{_CELL_REF}$")

# Unanchored form for scanning arithmetic text
REFERENCE_RE = re.compile(_CELL_REF)

# Whole-formula call head: NAME( ... the close paren is checked separately
_CALL_HEAD_RE = re.compile(r"^([A-Za-z0-9_]+)\(")


def is_reference(text: str) -> bool:
    """True when *text* matches the single-reference grammar exactly."""
    return bool(_SINGLE_REF_RE.match(text))


def is_range(text: str) -> bool:
    return ":" in text


def parse_reference(ref: str) -> tuple[int, int]:
    """``"AA10"`` -> ``(9, 26)``. Raises :class:`InvalidReference`."""
    if not _SINGLE_REF_RE.match(ref):
        raise InvalidReference(ref)
    return a1_to_rowcol(ref)


def parse_range(ref: str) -> tuple[tuple[int, int], tuple[int, int]]:
    """Split ``"A1:B2"`` into its two corners, in the order written."""
    parts = ref.split(":")
    if len(parts) != 2:
        raise InvalidRange(ref)
    try:
        return parse_reference(parts[0]), parse_reference(parts[1])
    except InvalidReference as exc:
        raise InvalidRange(ref) from exc


def range_cells(ref: str) -> list[tuple[int, int]]:
    """All coordinates of a range in row-major order, corners normalised."""
    (r1, c1), (r2, c2) = parse_range(ref)
    r_min, r_max = min(r1, r2), max(r1, r2)
    c_min, c_max = min(c1, c2), max(c1, c2)
    return [(r, c) for r in range(r_min, r_max + 1) for c in range(c_min, c_max + 1)]


def expand_range(ref: str) -> list[str]:
    """Expand ``"A1:B2"`` into ``["A1", "B1", "A2", "B2"]``."""
    return [rowcol_to_a1(r, c) for r, c in range_cells(ref)]


def in_bounds(grid: GridView, row: int, col: int) -> bool:
    return 0 <= row < grid.n_rows and 0 <= col < grid.n_cols


def resolve_reference(ref: str, grid: GridView) -> Value:
    """Coerced value of one cell; out-of-grid is an error."""
    row, col = parse_reference(ref)
    if not in_bounds(grid, row, col):
        raise CellOutOfBounds(ref)
    return coerce(grid.value_at(row, col))


def resolve_range(ref: str, grid: GridView) -> list[Value]:
    """Coerced values of a range; out-of-grid coordinates are skipped.

    Spans are clamped to the grid first, so the work is bounded by the grid
    size however far past it the range is written.
    """
    (r1, c1), (r2, c2) = parse_range(ref)
    r_lo, r_hi = max(min(r1, r2), 0), min(max(r1, r2), grid.n_rows - 1)
    c_lo, c_hi = max(min(c1, c2), 0), min(max(c1, c2), grid.n_cols - 1)
    return [
        coerce(grid.value_at(r, c))
        for r in range(r_lo, r_hi + 1)
        for c in range(c_lo, c_hi + 1)
    ]


# ---------------------------------------------------------------------------
# Function-call detection and argument tokenizing
# ---------------------------------------------------------------------------


def _is_quote(text: str, i: int) -> bool:
    """A ``"`` that is not backslash-escaped."""
    return text[i] == '"' and (i == 0 or text[i - 1] != "\\")


def _find_matching_paren(expr: str, start: int) -> int:
    """Index of the ``')'`` matching the ``'('`` at *expr[start]*, or -1."""
    depth = 1
    in_string = False
    for i in range(start + 1, len(expr)):
        if _is_quote(expr, i):
            in_string = not in_string
        elif not in_string:
            if expr[i] == "(":
                depth += 1
            elif expr[i] == ")":
                depth -= 1
                if depth == 0:
                    return i
    return -1


def match_function_call(expr: str) -> tuple[str, str] | None:
    """If *expr* is exactly ``NAME(args)``, return ``(NAME, args)``.

    The call must span the whole trimmed text, so ``SUM(A1:A3)+1`` is not a
    call and goes to the arithmetic path instead.
    """
    stripped = expr.strip()
    m = _CALL_HEAD_RE.match(stripped)
    if not m:
        return None
    open_idx = m.end() - 1
    close_idx = _find_matching_paren(stripped, open_idx)
    if close_idx != len(stripped) - 1:
        return None
    return m.group(1).upper(), stripped[open_idx + 1 : close_idx]


def split_arguments(args_str: str) -> list[str]:
    """Split on commas outside double quotes; trim each argument.

    A trailing segment that is empty after trimming is dropped, so
    ``"A1,"`` gives ``["A1"]`` and ``""`` gives ``[]``.
    """
    args: list[str] = []
    current: list[str] = []
    in_string = False
    for i, ch in enumerate(args_str):
        if _is_quote(args_str, i):
            in_string = not in_string
            current.append(ch)
        elif ch == "," and not in_string:
            args.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    last = "".join(current).strip()
    if last:
        args.append(last)
    return args
