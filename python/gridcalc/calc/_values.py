"""Value coercion: stored cell text -> tagged Number / Text."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal

# Plain decimal literal; no "inf"/"nan", underscores, currency or percent.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class Number:
    value: float

    def render(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class Text:
    value: str

    def render(self) -> str:
        return self.value


Value = Number | Text


def coerce(raw: str) -> Value:
    """Parse *raw* as a float literal, falling back to the original text.

    Surrounding whitespace is ignored for the numeric attempt only; a
    :class:`Text` result always carries the untouched string.
    """
    stripped = raw.strip()
    if _DECIMAL_RE.fullmatch(stripped):
        return Number(float(stripped))
    return Text(raw)


def format_number(value: float) -> str:
    """Default decimal rendering: ``6.0`` -> ``"6"``, ``2.5`` -> ``"2.5"``.

    Uses the shortest round-tripping digits, written in plain decimal for
    magnitudes in ``[1e-6, 1e21)`` and in exponent form (``"1e-7"``,
    ``"1.5e+21"``) outside it.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    # point position relative to the digit string, taken before stripping zeros
    point = exponent + len(digit_tuple)
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    k = len(digits)
    if k <= point <= 21:
        return sign + digits + "0" * (point - k)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits
    mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
    power = point - 1
    return f"{sign}{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
