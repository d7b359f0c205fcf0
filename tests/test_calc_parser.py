"""Tests for gridcalc.calc reference resolution and formula parsing."""

from __future__ import annotations

import pytest

from gridcalc._utils import column_index, column_label, rowcol_to_a1
from gridcalc.calc._errors import CellOutOfBounds, InvalidRange, InvalidReference
from gridcalc.calc._parser import (
    expand_range,
    is_reference,
    match_function_call,
    parse_range,
    parse_reference,
    range_cells,
    resolve_range,
    resolve_reference,
    split_arguments,
)
from gridcalc.calc._values import Number, Text


class TestColumnLetters:
    @pytest.mark.parametrize(
        ("letters", "index"),
        [("A", 0), ("Z", 25), ("AA", 26), ("AZ", 51), ("BA", 52), ("ZZ", 701), ("AAA", 702)],
    )
    def test_bijective_base26(self, letters: str, index: int) -> None:
        assert column_index(letters) == index
        assert column_label(index) == letters

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValueError):
            column_label(-1)


class TestSingleReferences:
    def test_aa10(self) -> None:
        assert parse_reference("AA10") == (9, 26)
        assert rowcol_to_a1(9, 26) == "AA10"

    @pytest.mark.parametrize("ref", ["A1", "Z1", "AA1", "AZ99", "BA2", "ZZ10", "AAA1", "J20"])
    def test_round_trip(self, ref: str) -> None:
        assert rowcol_to_a1(*parse_reference(ref)) == ref

    @pytest.mark.parametrize("ref", ["a1", "1A", "A", "", "A1B", "$A$1", "A 1", "A1:B2", "Sheet1!A1"])
    def test_invalid(self, ref: str) -> None:
        with pytest.raises(InvalidReference, match="Invalid cell reference"):
            parse_reference(ref)

    def test_row_zero_parses_to_negative_row(self) -> None:
        assert parse_reference("A0") == (-1, 0)

    def test_is_reference(self) -> None:
        assert is_reference("B12")
        assert not is_reference('"B12"')
        assert not is_reference("B1:B2")


class TestRangeReferences:
    def test_corners_in_written_order(self) -> None:
        assert parse_range("B2:A1") == ((1, 1), (0, 0))

    def test_symmetric(self) -> None:
        assert set(range_cells("A1:B2")) == set(range_cells("B2:A1"))
        assert expand_range("B2:A1") == expand_range("A1:B2")

    def test_expand_block_row_major(self) -> None:
        assert expand_range("A1:B2") == ["A1", "B1", "A2", "B2"]

    def test_expand_column(self) -> None:
        assert expand_range("A1:A3") == ["A1", "A2", "A3"]

    def test_single_cell_range(self) -> None:
        assert expand_range("C3:C3") == ["C3"]

    @pytest.mark.parametrize("ref", ["A1", "A1:B2:C3", "A1:", ":B2", "A1:b2", "A1:2B"])
    def test_invalid(self, ref: str) -> None:
        with pytest.raises(InvalidRange, match="Invalid range reference"):
            parse_range(ref)


class TestResolve:
    def test_single_value_coerced(self, stub_grid) -> None:
        grid = stub_grid([["1", "abc"], [" 2 ", ""]])
        assert resolve_reference("A1", grid) == Number(1.0)
        assert resolve_reference("B1", grid) == Text("abc")
        assert resolve_reference("A2", grid) == Number(2.0)
        assert resolve_reference("B2", grid) == Text("")

    def test_single_out_of_bounds_fails(self, stub_grid) -> None:
        grid = stub_grid([["1", "2"]])
        with pytest.raises(CellOutOfBounds, match="Z1"):
            resolve_reference("Z1", grid)
        with pytest.raises(CellOutOfBounds):
            resolve_reference("A2", grid)
        with pytest.raises(CellOutOfBounds):
            resolve_reference("A0", grid)

    def test_range_skips_out_of_bounds(self, stub_grid) -> None:
        grid = stub_grid([["1", "2"], ["3", "4"]])
        values = resolve_range("A1:Z9", grid)
        assert values == [Number(1.0), Number(2.0), Number(3.0), Number(4.0)]

    def test_range_entirely_outside(self, stub_grid) -> None:
        grid = stub_grid([["1"]])
        assert resolve_range("C3:D4", grid) == []

    def test_huge_range_is_clamped_to_grid(self, stub_grid) -> None:
        grid = stub_grid([["1", "2"], ["3", "x"]])
        values = resolve_range("ZZZ99999999:A1", grid)
        assert values == [Number(1.0), Number(2.0), Number(3.0), Text("x")]

    def test_range_above_first_row(self, stub_grid) -> None:
        assert resolve_range("A0:B0", stub_grid([["1", "2"]])) == []


class TestMatchFunctionCall:
    def test_simple_call(self) -> None:
        assert match_function_call("SUM(A1:A3)") == ("SUM", "A1:A3")

    def test_name_uppercased_and_trimmed(self) -> None:
        assert match_function_call("  sum(A1) ") == ("SUM", "A1")

    def test_underscore_name(self) -> None:
        assert match_function_call("REMOVE_DUPLICATES(A1:A5)") == ("REMOVE_DUPLICATES", "A1:A5")

    def test_empty_args(self) -> None:
        assert match_function_call("SUM()") == ("SUM", "")

    @pytest.mark.parametrize(
        "expr",
        ["SUM(A1:A3)+1", "SUM(A1)+SUM(A2)", "A1+A2", "(A1)", "SUM (A1)", "SUM(A1", "1+SUM(A1)"],
    )
    def test_not_a_whole_formula_call(self, expr: str) -> None:
        assert match_function_call(expr) is None

    def test_paren_inside_quotes_ignored(self) -> None:
        assert match_function_call('UPPER(")")') == ("UPPER", '")"')


class TestSplitArguments:
    def test_trims_each(self) -> None:
        assert split_arguments("A1, B2 ,C3") == ["A1", "B2", "C3"]

    def test_comma_inside_quotes(self) -> None:
        assert split_arguments('A1,"x,y",B1') == ["A1", '"x,y"', "B1"]

    def test_escaped_quote_does_not_close(self) -> None:
        assert split_arguments(r'"a\",b",A1') == [r'"a\",b"', "A1"]

    def test_trailing_empty_dropped(self) -> None:
        assert split_arguments("A1,") == ["A1"]
        assert split_arguments("A1,  ") == ["A1"]

    def test_inner_empty_kept(self) -> None:
        assert split_arguments("A1,,B1") == ["A1", "", "B1"]

    @pytest.mark.parametrize("text", ["", "   "])
    def test_no_arguments(self, text: str) -> None:
        assert split_arguments(text) == []
