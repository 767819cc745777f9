"""Renderer for unstructured PDF documents such as statements and reports."""

import re
from io import BytesIO

import pdfplumber

from finmark.models import ConversionResult, InputFormat
from finmark.renderers.markdown import log_render_result
from finmark.renderers.validation import DecodeFailure, logger, validate_file_contents

NO_TEXT_MARKDOWN = (
    "_No extractable text found. The document may be scanned or image-based; "
    "OCR is not implemented._\n"
)

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")


def render_document(contents: bytes, filename: str | None = None) -> ConversionResult:
    """
    Render the text of a PDF as markdown paragraphs.

    Raises:
        MissingRequiredPayload: If the file is empty
        DecodeFailure: If the bytes are not a readable PDF
    """
    validate_file_contents(contents)

    page_texts, page_count = _extract_text(contents)
    full_text = "\n\n".join(page_texts)

    if not full_text.strip():
        logger.warning(f"Document {filename or '(unnamed)'}: No text content extracted")
        return ConversionResult(markdown=NO_TEXT_MARKDOWN, format=InputFormat.STATEMENT.value, item_count=0)

    normalized = full_text.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = _PARAGRAPH_BREAK.split(normalized)

    lines = [f"## Document: {filename or 'document.pdf'}", "", f"_Pages: {page_count}_"]
    for paragraph in paragraphs:
        collapsed = " ".join(part.strip() for part in paragraph.split("\n") if part.strip())
        if collapsed:
            lines.append("")
            lines.append(collapsed)

    # Count is the raw split count, empty paragraphs included
    result = ConversionResult(
        markdown="\n".join(lines) + "\n",
        format=InputFormat.STATEMENT.value,
        item_count=len(paragraphs),
    )

    log_render_result(result, f"Document ({page_count} pages)")
    return result


def _extract_text(contents: bytes) -> tuple[list[str], int]:
    """
    Extract text per page in reading order.

    Returns:
        (page_texts, page_count) tuple
    """
    try:
        with pdfplumber.open(BytesIO(contents)) as pdf:
            page_texts = [page.extract_text() or "" for page in pdf.pages]
            return page_texts, len(pdf.pages)
    except Exception as e:
        logger.error(f"PDF extraction failed: {e}")
        raise DecodeFailure(f"Failed to extract PDF content: {e}") from e
