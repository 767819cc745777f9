"""Tests for the shared markdown helpers."""

from datetime import date
from decimal import Decimal

from finmark.renderers.markdown import (
    escape_cell,
    format_date,
    format_decimal,
    separator_row,
    table,
    table_row,
)


class TestEscapeCell:
    """Test table-cell escaping."""

    def test_escapes_pipes(self):
        """Should escape literal pipes."""
        assert escape_cell("a|b") == "a\\|b"

    def test_collapses_newlines(self):
        """Should collapse line breaks to a single space."""
        assert escape_cell("line one\nline two") == "line one line two"
        assert escape_cell("line one\r\nline two") == "line one line two"
        assert escape_cell("a\n\n\nb") == "a b"

    def test_none_is_empty(self):
        """Should render None as an empty string."""
        assert escape_cell(None) == ""

    def test_plain_text_unchanged(self):
        """Should leave ordinary text alone."""
        assert escape_cell("STARBUCKS #123") == "STARBUCKS #123"


class TestFormatDecimal:
    """Test plain-notation decimal formatting."""

    def test_keeps_scale(self):
        """Should keep trailing zeros of the exact decimal."""
        assert format_decimal(Decimal("12.50")) == "12.50"

    def test_avoids_scientific_notation(self):
        """Should never use exponent notation."""
        assert format_decimal(Decimal("1E+3")) == "1000"
        assert format_decimal(Decimal("1E-7")) == "0.0000001"

    def test_negative(self):
        """Should keep the sign."""
        assert format_decimal(Decimal("-5.5")) == "-5.5"

    def test_none_is_empty(self):
        """Should render None as an empty string."""
        assert format_decimal(None) == ""


class TestTableBuilders:
    """Test row and table builders."""

    def test_table_row(self):
        """Should wrap cells in pipes."""
        assert table_row(["a", "b"]) == "| a | b |"

    def test_separator_row(self):
        """Should emit one --- per column."""
        assert separator_row(3) == "| --- | --- | --- |"

    def test_table(self):
        """Should emit header, separator and rows."""
        lines = table(["A", "B"], [["1", "2"]])
        assert lines == ["| A | B |", "| --- | --- |", "| 1 | 2 |"]

    def test_format_date(self):
        """Should render ISO dates."""
        assert format_date(date(2025, 2, 1)) == "2025-02-01"
        assert format_date(None) == ""
