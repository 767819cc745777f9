"""Conversion of structured JSON requests to markdown."""

import logging
from typing import Any

from pydantic import TypeAdapter

from finmark.models import (
    ConversionRequest,
    ConversionResult,
    InputFormat,
    PortfolioRequest,
    RawCsvRequest,
    StatementRequest,
    TransactionsRequest,
)
from finmark.renderers.portfolio import render_portfolio
from finmark.renderers.raw_csv import render_raw_csv
from finmark.renderers.statement import render_transactions
from finmark.renderers.validation import MissingRequiredPayload, UnsupportedFormat

logger = logging.getLogger(__name__)

_request_adapter: TypeAdapter[ConversionRequest] = TypeAdapter(ConversionRequest)

# Formats that only make sense for file uploads
UPLOAD_ONLY_FORMATS = {InputFormat.EXCEL}


def parse_conversion_request(data: dict[str, Any]) -> ConversionRequest:
    """
    Build a typed request from decoded JSON.

    Raises:
        MissingRequiredPayload: If no format is declared
        UnsupportedFormat: If the format is unknown or only valid for uploads
        pydantic.ValidationError: If the payload does not match its format
    """
    raw_format = data.get("format")
    if raw_format is None:
        raise MissingRequiredPayload("Input format is required")

    try:
        input_format = InputFormat(raw_format)
    except ValueError:
        raise UnsupportedFormat(f"Unknown format: {raw_format}")

    if input_format in UPLOAD_ONLY_FORMATS:
        raise UnsupportedFormat(f"{input_format.value} is only supported for file uploads")

    return _request_adapter.validate_python(data)


def convert_request(request: ConversionRequest) -> ConversionResult:
    """
    Render a structured request with the renderer matching its format.

    Raises:
        MissingRequiredPayload: If the payload for the declared format is absent or empty
        UnsupportedFormat: If the request type has no renderer
    """
    logger.info(f"Converting {request.format} request")

    if isinstance(request, TransactionsRequest):
        if not request.transactions:
            raise MissingRequiredPayload("Transactions are required for format TRANSACTIONS")
        return render_transactions(request.transactions)

    elif isinstance(request, StatementRequest):
        # Metadata alone is not a statement
        if not request.transactions:
            raise MissingRequiredPayload("Transactions are required for format STATEMENT")
        return render_transactions(request.transactions, request.metadata)

    elif isinstance(request, PortfolioRequest):
        if not request.holdings:
            raise MissingRequiredPayload("Holdings are required for format PORTFOLIO")
        return render_portfolio(request.holdings)

    elif isinstance(request, RawCsvRequest):
        if not request.raw_content or not request.raw_content.strip():
            raise MissingRequiredPayload("Raw content is required for format RAW_CSV")
        return render_raw_csv(request.raw_content)

    raise UnsupportedFormat(f"Unsupported request type: {type(request).__name__}")
