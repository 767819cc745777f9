"""Shared markdown helpers used by every renderer."""

import re
from datetime import date
from decimal import Decimal

from finmark.models import ConversionResult
from finmark.renderers.validation import logger

_NEWLINES = re.compile(r"[\r\n]+")


def escape_cell(value: str | None) -> str:
    """
    Make a value safe for a single markdown table cell.

    Pipes are escaped so they are not read as column separators and
    line breaks collapse to a single space so the row stays on one line.
    """
    if value is None:
        return ""
    return _NEWLINES.sub(" ", value).replace("|", "\\|")


def format_decimal(value: Decimal | None) -> str:
    """Render an exact decimal in plain (non-scientific) notation."""
    if value is None:
        return ""
    return format(value, "f")


def format_date(value: date | None) -> str:
    """Render a date as ISO-8601."""
    if value is None:
        return ""
    return value.isoformat()


def table_row(cells: list[str]) -> str:
    """Join already-escaped cells into a markdown table row."""
    return "| " + " | ".join(cells) + " |"


def separator_row(column_count: int) -> str:
    """Header separator with one --- cell per column."""
    return table_row(["---"] * column_count)


def table(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Build a complete markdown table as a list of lines."""
    lines = [table_row([escape_cell(h) for h in headers]), separator_row(len(headers))]
    lines.extend(table_row(row) for row in rows)
    return lines


def log_render_result(result: ConversionResult, renderer_name: str, input_size: int | None = None) -> None:
    """
    Log rendering results for debugging.

    Args:
        result: The conversion result
        renderer_name: Name of the renderer
        input_size: Number of input rows, when known
    """
    if input_size is not None and input_size != result.item_count:
        logger.info(
            f"{renderer_name}: Rendered {result.item_count} items "
            f"({input_size - result.item_count} of {input_size} dropped, "
            f"{len(result.markdown)} chars)"
        )
    else:
        logger.info(f"{renderer_name}: Rendered {result.item_count} items ({len(result.markdown)} chars)")
