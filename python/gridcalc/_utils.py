"""A1-notation helpers shared by the grid and the calc engine.

Coordinates are zero-indexed ``(row, col)`` pairs.  Column letters use
bijective base-26 (A=1 ... Z=26, AA=27, ...), so no letter stands for zero.
"""

from __future__ import annotations

import re

_A1_RE = re.compile(r"^([A-Z]+)(\d+)$")


def column_index(letters: str) -> int:
    """``"A"`` -> 0, ``"Z"`` -> 25, ``"AA"`` -> 26."""
    if not letters or not letters.isalpha() or not letters.isupper():
        raise ValueError(f"Invalid column letters: {letters!r}")
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def column_label(index: int) -> str:
    """``0`` -> ``"A"``, ``25`` -> ``"Z"``, ``26`` -> ``"AA"``."""
    if index < 0:
        raise ValueError(f"Column index must be >= 0, got {index}")
    n = index + 1
    letters: list[str] = []
    while n:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """Parse ``"AA10"`` into zero-indexed ``(9, 26)``.

    The row may come out negative for ``"A0"``; bounds are the caller's job.
    """
    m = _A1_RE.match(ref)
    if not m:
        raise ValueError(f"Invalid A1 reference: {ref!r}")
    return int(m.group(2)) - 1, column_index(m.group(1))


def rowcol_to_a1(row: int, col: int) -> str:
    """Render zero-indexed ``(row, col)`` as ``"B3"``."""
    return f"{column_label(col)}{row + 1}"
