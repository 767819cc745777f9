"""Renderer for raw comma or tab delimited text."""

from finmark.models import ConversionResult, InputFormat
from finmark.renderers.markdown import escape_cell, log_render_result, separator_row, table_row

NO_CONTENT_MARKDOWN = "_No content provided._\n"

DELIMITERS = (",", "\t")


def render_raw_csv(text: str) -> ConversionResult:
    """
    Render delimited text as a markdown table.

    The first non-empty line is always the header. Data rows are emitted
    with however many cells they have; there is no column reconciliation.
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    if not lines:
        return ConversionResult(markdown=NO_CONTENT_MARKDOWN, format=InputFormat.RAW_CSV.value, item_count=0)

    header = _split_line(lines[0])
    output = [table_row(header), separator_row(len(header))]
    for line in lines[1:]:
        output.append(table_row(_split_line(line)))

    result = ConversionResult(
        markdown="\n".join(output) + "\n",
        format=InputFormat.RAW_CSV.value,
        item_count=max(len(lines) - 1, 0),
    )

    log_render_result(result, "Raw CSV")
    return result


def _split_line(line: str) -> list[str]:
    """
    Split a line on commas or tabs, keeping delimiters inside double quotes.

    Escaped quotes ("") are not supported; quote characters are dropped
    from the resulting cells.
    """
    cells: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char in DELIMITERS and not in_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
    cells.append("".join(current))

    return [_clean_cell(cell) for cell in cells]


def _clean_cell(cell: str) -> str:
    return escape_cell(cell.replace('"', "").strip())
