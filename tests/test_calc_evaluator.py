"""Tests for gridcalc.calc FormulaEvaluator."""

from __future__ import annotations

import pytest

from gridcalc import Grid
from gridcalc.calc._errors import (
    CellOutOfBounds,
    EvaluationError,
    InvalidReference,
    UnknownFunction,
)
from gridcalc.calc._evaluator import FormulaEvaluator, is_formula
from gridcalc.config import Settings


def _make_grid(settings: Settings, **values: str) -> Grid:
    """5x10 grid with the given A1-keyed literals."""
    grid = Grid.new(n_rows=5, n_cols=10, settings=settings)
    for ref, raw in values.items():
        grid[ref] = raw
    return grid


@pytest.fixture
def ev(settings: Settings) -> FormulaEvaluator:
    return FormulaEvaluator(settings=settings)


class TestFunctionPath:
    def test_sum(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="1", A2="2", A3="3")
        assert ev.evaluate("SUM(A1:A3)", grid) == "6"

    def test_upper(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="abc")
        assert ev.evaluate("UPPER(A1)", grid) == "ABC"

    def test_lowercase_name(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="4", B1="6")
        assert ev.evaluate("average(A1:B1)", grid) == "5"

    def test_range_wider_than_grid(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="1", J1="2")
        assert ev.evaluate("SUM(A1:Z1)", grid) == "3"

    def test_placeholder(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings)
        with pytest.raises(UnknownFunction):
            ev.evaluate("REMOVE_DUPLICATES(A1:A5)", grid)

    def test_nested_call_argument_is_not_a_reference(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="1", A2="2")
        with pytest.raises(InvalidReference):
            ev.evaluate("SUM(A1,SUM(A2))", grid)


class TestArithmeticPath:
    def test_add_references(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="2", A2="3")
        assert ev.evaluate("A1+A2", grid) == "5"

    def test_text_reference_breaks_arithmetic(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="2", A2="x")
        with pytest.raises(EvaluationError):
            ev.evaluate("A1+A2", grid)

    def test_precedence_and_parens(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="2", A2="3")
        assert ev.evaluate("A1*(A2-1)", grid) == "4"
        assert ev.evaluate("A1+A2*A1", grid) == "8"

    def test_fractional_result(self, ev: FormulaEvaluator, settings: Settings) -> None:
        assert ev.evaluate("10/4", _make_grid(settings)) == "2.5"

    def test_negative_reference_value(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="-3", A2="3")
        assert ev.evaluate("A2-A1", grid) == "6"

    def test_empty_reference_vanishes(self, ev: FormulaEvaluator, settings: Settings) -> None:
        # A3 is "", so the text becomes "+2"
        grid = _make_grid(settings, A1="2")
        assert ev.evaluate("A3+A1", grid) == "2"

    def test_single_reference_out_of_bounds(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="1")
        with pytest.raises(CellOutOfBounds, match="Z1"):
            ev.evaluate("Z1", grid)
        with pytest.raises(CellOutOfBounds, match="A6"):
            ev.evaluate("A1+A6", grid)

    def test_call_embedded_in_arithmetic_fails(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="1", A2="2")
        with pytest.raises(EvaluationError):
            ev.evaluate("SUM(A1:A2)*2", grid)

    def test_lowercase_reference_is_not_resolved(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="1")
        with pytest.raises(EvaluationError):
            ev.evaluate("a1+1", grid)

    def test_division_by_zero(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="0", A2="5")
        assert ev.evaluate("1/A1", grid) == "Infinity"
        assert ev.evaluate("-A2/A1", grid) == "-Infinity"
        assert ev.evaluate("A1/A1", grid) == "NaN"

    def test_small_result_uses_exponent_form(self, ev: FormulaEvaluator, settings: Settings) -> None:
        assert ev.evaluate("1/10000000", _make_grid(settings)) == "1e-7"


class TestSubstitution:
    def test_numbers_rendered(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1=" 2.50 ", B1="3")
        assert ev.substitute_references("A1+B1*A1", grid) == "2.5+3*2.5"

    def test_text_spliced_unquoted(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="abc", A2="3")
        assert ev.substitute_references("A1+A2", grid) == "abc+3"

    def test_longer_reference_not_confused(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = Grid.new(n_rows=12, n_cols=3, settings=settings)
        grid["A1"] = "1"
        grid["A10"] = "10"
        assert ev.substitute_references("A10+A1", grid) == "10+1"


class TestFormulaMarker:
    def test_is_formula(self) -> None:
        assert is_formula("=A1")
        assert not is_formula("A1")
        assert not is_formula(" =A1")

    def test_evaluate_formula_strips_marker(self, ev: FormulaEvaluator, settings: Settings) -> None:
        grid = _make_grid(settings, A1="2", A2="3")
        assert ev.evaluate_formula("=A1+A2", grid) == "5"
        assert ev.evaluate_formula("=SUM(A1:A2)", grid) == "5"


class TestBounds:
    def test_configured_length_bound(self) -> None:
        settings = Settings(_env_file=None, max_formula_length=10)
        ev = FormulaEvaluator(settings=settings)
        grid = Grid.new(n_rows=2, n_cols=2, settings=settings)
        assert ev.evaluate("1+2", grid) == "3"
        with pytest.raises(EvaluationError, match="longer than 10"):
            ev.evaluate("1+1+1+1+1+1", grid)
