"""Renderer for multi-sheet Excel workbooks (.xlsx via openpyxl, legacy .xls via xlrd)."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from io import BytesIO

import openpyxl
import xlrd

from finmark.models import ConversionResult, InputFormat
from finmark.renderers.markdown import (
    escape_cell,
    format_decimal,
    log_render_result,
    separator_row,
    table_row,
)
from finmark.renderers.validation import DecodeFailure, logger, validate_file_contents

EMPTY_SHEET_MARKDOWN = "_Empty sheet_"

# Compound File Binary header used by legacy .xls workbooks
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

# A sheet is (name, rows); each row holds rendered cell text with
# None where the workbook has no cell.
Sheet = tuple[str, list[list[str | None]]]


def render_workbook(contents: bytes) -> ConversionResult:
    """
    Render every sheet of a workbook as its own markdown table.

    The first populated row of each sheet is treated as the header.
    The item count is the number of data rows across all sheets.

    Raises:
        MissingRequiredPayload: If the file is empty
        DecodeFailure: If the bytes are not a readable workbook
    """
    validate_file_contents(contents)

    try:
        if contents.startswith(OLE2_SIGNATURE):
            sheets = _read_xls(contents)
        else:
            sheets = _read_xlsx(contents)
    except Exception as e:
        logger.error(f"Workbook decoding failed: {e}")
        raise DecodeFailure(f"Failed to read workbook: {e}") from e

    blocks: list[str] = []
    data_rows = 0

    for name, rows in sheets:
        block, emitted = _render_sheet(name, rows)
        blocks.append(block)
        data_rows += emitted

    result = ConversionResult(
        markdown="\n\n".join(blocks) + "\n",
        format=InputFormat.EXCEL.value,
        item_count=data_rows,
    )

    log_render_result(result, f"Workbook ({len(sheets)} sheets)")
    return result


def _render_sheet(name: str, rows: list[list[str | None]]) -> tuple[str, int]:
    """Render one sheet, returning the markdown block and its data row count."""
    lines = [f"## Sheet: {escape_cell(name)}", ""]

    column_count = max((_populated_width(row) for row in rows), default=0)
    if column_count == 0:
        lines.append(EMPTY_SHEET_MARKDOWN)
        return "\n".join(lines), 0

    emitted = 0
    for row in rows:
        if _populated_width(row) == 0:
            continue

        cells = [escape_cell(cell) for cell in row[:column_count]]
        cells.extend([""] * (column_count - len(cells)))
        lines.append(table_row(cells))

        if emitted == 0:
            lines.append(separator_row(column_count))
        emitted += 1

    return "\n".join(lines), max(emitted - 1, 0)


def _populated_width(row: list[str | None]) -> int:
    """Index of the last present cell plus one."""
    for index in range(len(row) - 1, -1, -1):
        if row[index] is not None:
            return index + 1
    return 0


def _read_xlsx(contents: bytes) -> list[Sheet]:
    # Formulas come from one load, their cached results from a second one
    formulas = openpyxl.load_workbook(BytesIO(contents), data_only=False)
    try:
        values = openpyxl.load_workbook(BytesIO(contents), data_only=True)
        try:
            sheets = []
            for worksheet in formulas.worksheets:
                cached = values[worksheet.title]
                rows = [
                    [_xlsx_cell_text(cell, cached) for cell in row]
                    for row in worksheet.iter_rows()
                ]
                sheets.append((worksheet.title, rows))
            return sheets
        finally:
            values.close()
    finally:
        formulas.close()


def _xlsx_cell_text(cell, cached_sheet) -> str | None:
    value = cell.value
    if value is None:
        return None

    if cell.data_type == "f":
        result = cached_sheet[cell.coordinate].value
        if result is not None and not isinstance(result, (str, bool)):
            return _format_value(result)
        formula = getattr(value, "text", value)  # ArrayFormula keeps its source in .text
        return str(formula).lstrip("=")

    if cell.data_type == "e":
        return ""

    return _format_value(value)


def _format_value(value) -> str:
    """Render a typed cell value."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return format_decimal(Decimal(repr(value)))


def _read_xls(contents: bytes) -> list[Sheet]:
    book = xlrd.open_workbook(file_contents=contents)
    try:
        sheets = []
        for sheet in book.sheets():
            rows = [
                [_xls_cell_text(cell, book.datemode) for cell in sheet.row(row_index)]
                for row_index in range(sheet.nrows)
            ]
            sheets.append((sheet.name, rows))
        return sheets
    finally:
        book.release_resources()


def _xls_cell_text(cell, datemode: int) -> str | None:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_TEXT:
        return cell.value
    if cell.ctype == xlrd.XL_CELL_NUMBER:
        return _format_number(cell.value)
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, datemode).isoformat()
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return "TRUE" if cell.value else "FALSE"
    # XL_CELL_ERROR
    return ""
