"""Fixture builders shared by the renderer tests."""

import re
import zipfile
from io import BytesIO

import openpyxl

_UNESCAPED_PIPE = re.compile(r"(?<!\\)\|")


def split_row(row: str) -> list[str]:
    """Split a rendered markdown row into its cells, honouring escaped pipes."""
    inner = row.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|") and not inner.endswith("\\|"):
        inner = inner[:-1]
    return [cell.strip() for cell in _UNESCAPED_PIPE.split(inner)]


def table_lines(markdown: str) -> list[str]:
    """Lines of the markdown that belong to a table."""
    return [line for line in markdown.splitlines() if line.startswith("|")]


def make_xlsx(sheets: dict[str, list[list]]) -> bytes:
    """Build an .xlsx workbook in memory; sheet order follows the dict."""
    workbook = openpyxl.Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        worksheet = workbook.create_sheet(title=name)
        for row in rows:
            worksheet.append(row)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def set_cached_formula_results(contents: bytes, results: dict[str, str]) -> bytes:
    """
    Store cached results for formulas in an .xlsx, as Excel does on save.

    openpyxl writes formulas without a cached value; ``results`` maps formula
    text (without the leading ``=``) to the value to store beside it.
    """
    buffer = BytesIO()
    with zipfile.ZipFile(BytesIO(contents)) as source, zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename.startswith("xl/worksheets/"):
                text = data.decode("utf-8")
                for formula, value in results.items():
                    cached = f"<f>{formula}</f><v>{value}</v>"
                    text = re.sub(rf"<f>{re.escape(formula)}</f>(?:<v\s*/>|<v></v>)?", lambda _: cached, text)
                data = text.encode("utf-8")
            target.writestr(item, data)
    return buffer.getvalue()


def make_pdf(pages: list[list[str]]) -> bytes:
    """Build a minimal text PDF with one entry per page, each a list of text lines."""
    page_count = len(pages)
    page_ids = [4 + 2 * i for i in range(page_count)]
    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    for page_id, lines in zip(page_ids, pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>"
            ).encode()
        )
        operations = ["BT", "/F1 12 Tf", "16 TL", "72 720 Td"]
        for line in lines:
            operations.append(f"({line}) Tj T*")
        operations.append("ET")
        stream = "\n".join(operations).encode()
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    output = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(output)
    output += f"xref\n0 {len(objects) + 1}\n".encode()
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode()
    output += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(output)
