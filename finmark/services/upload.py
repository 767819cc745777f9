"""File upload processing service."""

import logging

from finmark.models import ConversionResult, FileUploadRequest, InputFormat
from finmark.renderers.document import render_document
from finmark.renderers.raw_csv import render_raw_csv
from finmark.renderers.validation import UnrecognizedUpload, decode_text_contents, validate_file_contents
from finmark.renderers.workbook import render_workbook

logger = logging.getLogger(__name__)

EXTENSION_FORMATS = {
    ".pdf": InputFormat.STATEMENT,
    ".csv": InputFormat.RAW_CSV,
    ".xlsx": InputFormat.EXCEL,
    ".xls": InputFormat.EXCEL,
}


def detect_format(
    filename: str | None, content_type: str | None = None, hint: str | None = None
) -> InputFormat:
    """
    Resolve the input format of an uploaded file.

    Priority: explicit hint, then filename extension, then content type.
    Anything still unresolved is treated as delimited text.
    """
    # Caller hint wins when it names a known format
    if hint:
        try:
            return InputFormat[hint.upper()]
        except KeyError:
            logger.debug(f"Ignoring unknown format hint: {hint!r}")

    # Check filename extension
    if filename:
        filename_lower = filename.lower()
        for extension, input_format in EXTENSION_FORMATS.items():
            if filename_lower.endswith(extension):
                return input_format

    # Check declared content type
    if content_type:
        content_type_lower = content_type.lower()
        if "pdf" in content_type_lower:
            return InputFormat.STATEMENT
        if "csv" in content_type_lower:
            return InputFormat.RAW_CSV
        if "spreadsheet" in content_type_lower or "excel" in content_type_lower:
            return InputFormat.EXCEL

    # Best-effort text parse rather than rejecting the upload
    return InputFormat.RAW_CSV


def process_upload(upload: FileUploadRequest) -> ConversionResult:
    """
    Convert an uploaded file to markdown.

    Raises:
        MissingRequiredPayload: If the file is empty
        UnrecognizedUpload: If the resolved format has no file renderer
        DecodeFailure: If the file cannot be read as the resolved format
    """
    validate_file_contents(upload.contents)

    input_format = detect_format(upload.filename, upload.content_type, upload.format_hint)
    logger.info(f"Processing upload {upload.filename or '(unnamed)'} as {input_format.value}")

    if input_format == InputFormat.STATEMENT:
        return render_document(upload.contents, upload.filename)
    elif input_format == InputFormat.RAW_CSV:
        return render_raw_csv(decode_text_contents(upload.contents))
    elif input_format == InputFormat.EXCEL:
        return render_workbook(upload.contents)

    raise UnrecognizedUpload(
        f"Unsupported file type: {upload.content_type or 'unknown content type'} "
        f"(resolved format {input_format.value} has no file converter)",
        content_type=upload.content_type,
    )
