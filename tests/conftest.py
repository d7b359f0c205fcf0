"""Shared fixtures for gridcalc tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from gridcalc.config import Settings


class StubGrid:
    """Minimal read-only GridView over a list of rows of cell text."""

    def __init__(self, rows: list[list[str]]) -> None:
        self._rows = rows

    @property
    def n_rows(self) -> int:
        return len(self._rows)

    @property
    def n_cols(self) -> int:
        return len(self._rows[0]) if self._rows else 0

    def value_at(self, row: int, col: int) -> str:
        return self._rows[row][col]


@pytest.fixture
def stub_grid() -> Callable[[list[list[str]]], StubGrid]:
    return StubGrid


@pytest.fixture
def settings() -> Settings:
    """Defaults, independent of any GRIDCALC_* variables in the environment."""
    return Settings(_env_file=None)
