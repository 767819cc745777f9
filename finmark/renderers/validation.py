"""Conversion errors and shared input validation for renderers."""

import logging

# Configure logging for renderers
logger = logging.getLogger("finmark.renderers")


class ConversionError(Exception):
    """Base class for failures that abort a conversion."""

    pass


class MissingRequiredPayload(ConversionError):
    """Raised when the payload required by the declared format is absent or empty."""

    pass


class UnsupportedFormat(ConversionError):
    """Raised when a format is not accepted by the entry point it was sent to."""

    pass


class UnrecognizedUpload(ConversionError):
    """Raised when an upload cannot be mapped to any renderer."""

    def __init__(self, message: str, content_type: str | None = None):
        super().__init__(message)
        self.content_type = content_type


class DecodeFailure(ConversionError):
    """Raised when a byte stream cannot be parsed as the expected binary format."""

    pass


def validate_file_contents(contents: bytes) -> None:
    """
    Validate uploaded file contents before rendering.

    Raises:
        MissingRequiredPayload: If the file is empty
    """
    if not contents:
        raise MissingRequiredPayload("File is empty")


def decode_text_contents(contents: bytes) -> str:
    """
    Decode uploaded delimited text.

    Args:
        contents: Raw file bytes

    Returns:
        Decoded text content

    Raises:
        MissingRequiredPayload: If the file is empty
    """
    validate_file_contents(contents)

    # utf-8-sig first so a BOM does not leak into the first header cell
    encodings = ["utf-8-sig", "cp1252"]

    for encoding in encodings:
        try:
            return contents.decode(encoding)
        except UnicodeDecodeError:
            continue

    # latin-1 maps every byte; only reached for the few bytes cp1252 leaves undefined
    return contents.decode("latin-1")
