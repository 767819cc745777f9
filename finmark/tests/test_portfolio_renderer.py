"""Tests for the portfolio renderer."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from finmark.models import HoldingRecord
from finmark.renderers.portfolio import HOLDING_COLUMNS, render_portfolio
from finmark.tests.helpers import split_row, table_lines


class TestRenderPortfolio:
    """Test holdings table rendering."""

    def test_five_cells_on_every_row(self):
        """Should keep the Symbol, Quantity, Price, Value, Currency shape for every row."""
        holdings = [
            HoldingRecord(symbol="AAPL", quantity=Decimal("10"), price=Decimal("187.25"), value=Decimal("1872.50"), currency="USD"),
            HoldingRecord(symbol="BRK|B", quantity=Decimal("0.5")),
            HoldingRecord(symbol="VTI", quantity=Decimal("3"), value=Decimal("700")),
        ]

        result = render_portfolio(holdings)

        lines = table_lines(result.markdown)
        assert split_row(lines[0]) == HOLDING_COLUMNS
        for line in lines:
            assert len(split_row(line)) == 5
        assert result.item_count == 3
        assert result.format == "PORTFOLIO"

    def test_missing_price_and_value_render_empty(self):
        """Should render null price and value as empty cells."""
        result = render_portfolio([HoldingRecord(symbol="MSFT", quantity=Decimal("2"))])

        assert split_row(table_lines(result.markdown)[2]) == ["MSFT", "2", "", "", ""]

    def test_pipe_in_symbol_is_escaped(self):
        """Should escape pipes in the symbol."""
        result = render_portfolio([HoldingRecord(symbol="BRK|B", quantity=Decimal("1"))])

        row = table_lines(result.markdown)[2]
        assert row.startswith("| BRK\\|B |")

    def test_keeps_input_order(self):
        """Should not sort holdings."""
        holdings = [HoldingRecord(symbol=s, quantity=Decimal("1")) for s in ["ZZZ", "AAA", "MMM"]]

        rows = table_lines(render_portfolio(holdings).markdown)[2:]

        assert [split_row(row)[0] for row in rows] == ["ZZZ", "AAA", "MMM"]


class TestHoldingRecord:
    """Test holding validation."""

    def test_rejects_blank_symbol(self):
        """Should reject whitespace-only symbols."""
        with pytest.raises(ValidationError, match="Symbol is required"):
            HoldingRecord(symbol="   ", quantity=Decimal("1"))

    def test_rejects_empty_symbol(self):
        """Should reject empty symbols."""
        with pytest.raises(ValidationError):
            HoldingRecord(symbol="", quantity=Decimal("1"))

    def test_quantity_is_exact_decimal(self):
        """Should store quantities as Decimal."""
        holding = HoldingRecord(symbol="X", quantity="0.1")
        assert holding.quantity == Decimal("0.1")
