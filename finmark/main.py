"""FastAPI application for finmark."""

from typing import Any

from fastapi import Body, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from finmark.config import settings
from finmark.logging_config import configure_logging
from finmark.models import ConversionResult, FileUploadRequest
from finmark.renderers.time_series import normalize_time_series, render_time_series
from finmark.renderers.validation import (
    ConversionError,
    DecodeFailure,
    MissingRequiredPayload,
    UnrecognizedUpload,
    UnsupportedFormat,
)
from finmark.services.convert import convert_request, parse_conversion_request
from finmark.services.upload import process_upload

app = FastAPI(
    title="finmark",
    description="Convert financial data (transactions, portfolio, CSV, PDF, Excel) to LLM-friendly markdown",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    """Initialize on startup."""
    configure_logging(settings.log_level)
    settings.log_config()


def _to_http_error(error: ConversionError) -> HTTPException:
    """Map a conversion failure to a client-facing status."""
    if isinstance(error, (MissingRequiredPayload, UnsupportedFormat)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, UnrecognizedUpload):
        return HTTPException(
            status_code=415, detail={"message": str(error), "content_type": error.content_type}
        )
    if isinstance(error, DecodeFailure):
        return HTTPException(status_code=422, detail=str(error))
    return HTTPException(status_code=500, detail=f"Conversion error: {error}")


def _validation_detail(error: ValidationError) -> list[dict[str, Any]]:
    return [{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in error.errors()]


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/api/v1/financial/convert", response_model=ConversionResult)
def convert_to_markdown(payload: dict[str, Any] = Body(...)):
    """Convert structured JSON (transactions, portfolio, statement, raw CSV text) to markdown."""
    try:
        request = parse_conversion_request(payload)
        return convert_request(request)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e))
    except ConversionError as e:
        raise _to_http_error(e)


@app.post("/api/v1/financial/upload", response_model=ConversionResult)
async def upload_file(file: UploadFile = File(...), format: str | None = Form(None)):
    """Convert an uploaded PDF, Excel or CSV file to markdown."""
    # Read file contents fully before handing them to a renderer
    contents = await file.read()
    if len(contents) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail=f"File exceeds {settings.max_upload_mb} MB limit")

    upload = FileUploadRequest(
        contents=contents,
        filename=file.filename,
        content_type=file.content_type,
        format_hint=format,
    )

    try:
        return process_upload(upload)
    except ConversionError as e:
        raise _to_http_error(e)


@app.post("/api/v1/financial/time-series", response_model=ConversionResult)
def time_series_to_markdown(payload: dict[str, Any] = Body(...)):
    """Convert a market-data time series (Alpha Vantage shape) to a markdown table."""
    try:
        return render_time_series(payload)
    except ConversionError as e:
        raise _to_http_error(e)


@app.post("/api/llm-data/normalize")
def normalize(payload: dict[str, Any] = Body(...)):
    """Return a compact, LLM-friendly form of a market-data time series."""
    try:
        return normalize_time_series(payload).to_compact()
    except ConversionError as e:
        raise _to_http_error(e)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "finmark.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.dev_mode,
    )
