"""Cell and formatting value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Align = Literal["left", "center", "right"]
ALIGNMENTS: tuple[str, ...] = ("left", "center", "right")


@dataclass
class Formatting:
    bold: bool = False
    italic: bool = False
    align: Align = "left"


@dataclass
class Cell:
    """One grid cell.

    ``formula`` (kept with its leading ``=``) is the authoritative input when
    set; ``value`` then holds the computed display text.  Otherwise ``value``
    is the literal the user typed.
    """

    id: str
    value: str = ""
    formula: str | None = None
    error: str | None = None
    formatting: Formatting = field(default_factory=Formatting)

    @property
    def is_formula(self) -> bool:
        return self.formula is not None

    @property
    def raw_input(self) -> str:
        """What a formula bar shows: the formula if any, else the literal."""
        return self.formula if self.formula is not None else self.value

    def set_literal(self, value: str) -> None:
        self.value = value
        self.formula = None
        self.error = None

    def set_formula(self, formula: str) -> None:
        self.formula = formula
