"""Renderer for portfolio holdings."""

from finmark.models import ConversionResult, HoldingRecord, InputFormat
from finmark.renderers.markdown import escape_cell, format_decimal, log_render_result, table

HOLDING_COLUMNS = ["Symbol", "Quantity", "Price", "Value", "Currency"]


def render_portfolio(holdings: list[HoldingRecord]) -> ConversionResult:
    """Render holdings as a markdown table, one row per holding in input order."""
    rows = [
        [
            escape_cell(holding.symbol),
            format_decimal(holding.quantity),
            format_decimal(holding.price),
            format_decimal(holding.value),
            escape_cell(holding.currency),
        ]
        for holding in holdings
    ]

    result = ConversionResult(
        markdown="\n".join(table(HOLDING_COLUMNS, rows)) + "\n",
        format=InputFormat.PORTFOLIO.value,
        item_count=len(rows),
    )

    log_render_result(result, "Portfolio")
    return result
