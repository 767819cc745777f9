"""Normalizer and renderer for market-data time series (Alpha Vantage shape)."""

import math
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from finmark.models import ConversionResult, NormalizedTimeSeries, TimeSeriesBar
from finmark.renderers.markdown import escape_cell, format_decimal, log_render_result, table
from finmark.renderers.validation import MissingRequiredPayload

TIME_SERIES_FORMAT = "TIME_SERIES"
TIME_SERIES_COLUMNS = ["Time", "Open", "High", "Low", "Close", "Volume"]


def normalize_time_series(payload: dict[str, Any]) -> NormalizedTimeSeries:
    """
    Reduce a provider time-series payload to a compact list of bars.

    Bars are ordered newest first. A bar missing any price or its volume
    is dropped; the rest of the series is still returned.

    Raises:
        MissingRequiredPayload: If the payload does not have the expected shape
    """
    meta = payload.get("Meta Data")
    if not isinstance(meta, dict):
        raise MissingRequiredPayload("Unsupported JSON shape: missing 'Meta Data' object")

    symbol = _string_value(meta.get("2. Symbol"))
    interval = _string_value(meta.get("4. Interval"))
    time_zone = _string_value(meta.get("6. Time Zone"))
    if symbol is None or interval is None or time_zone is None:
        raise MissingRequiredPayload("Unsupported JSON shape: missing symbol, interval or time zone fields")

    series_key = next((key for key in payload if key.startswith("Time Series")), None)
    if series_key is None:
        raise MissingRequiredPayload("Unsupported JSON shape: no 'Time Series' key found")

    series = payload[series_key]
    if not isinstance(series, dict):
        raise MissingRequiredPayload("Unsupported JSON shape: time series is not an object")

    bars = []
    for timestamp in sorted(series, reverse=True):
        bar = _parse_bar(timestamp, series[timestamp])
        if bar is not None:
            bars.append(bar)

    return NormalizedTimeSeries(
        symbol=symbol,
        interval=normalize_interval(interval),
        time_zone=time_zone,
        bars=bars,
    )


def render_time_series(payload: dict[str, Any]) -> ConversionResult:
    """Render a provider time-series payload as a markdown table."""
    normalized = normalize_time_series(payload)

    rows = [
        [
            escape_cell(bar.time),
            format_decimal(bar.open),
            format_decimal(bar.high),
            format_decimal(bar.low),
            format_decimal(bar.close),
            str(bar.volume),
        ]
        for bar in normalized.bars
    ]

    heading = (
        f"## {escape_cell(normalized.symbol)} "
        f"({escape_cell(normalized.interval)}, {escape_cell(normalized.time_zone)})"
    )
    lines = [heading, ""] + table(TIME_SERIES_COLUMNS, rows)

    result = ConversionResult(markdown="\n".join(lines) + "\n", format=TIME_SERIES_FORMAT, item_count=len(rows))

    series_key = next((key for key in payload if key.startswith("Time Series")), "")
    log_render_result(result, "Time series", input_size=len(payload.get(series_key) or {}))
    return result


def normalize_interval(raw: str) -> str:
    """Shorten provider interval labels: 5min -> 5m, Daily -> 1d."""
    value = raw.strip()
    lower = value.lower()

    if lower.endswith("min"):
        return lower[: -len("min")] + "m"
    if "daily" in lower:
        return "1d"
    if "weekly" in lower:
        return "1w"
    if "monthly" in lower:
        return "1mo"

    return value


def to_time_label(timestamp: str) -> str:
    """HH:MM for full timestamps, best effort for anything else."""
    try:
        return datetime.strptime(timestamp, "%Y-%m-%d %H:%M:%S").strftime("%H:%M")
    except ValueError:
        pass

    space = timestamp.find(" ")
    if space <= 0 or space + 1 >= len(timestamp):
        return timestamp

    time_part = timestamp[space + 1 :]
    parts = time_part.split(":")
    if len(parts) <= 2:
        return time_part
    return ":".join(parts[:2])


def _parse_bar(timestamp: str, bar: Any) -> TimeSeriesBar | None:
    if not isinstance(bar, dict):
        return None

    open_ = _to_decimal(bar.get("1. open"))
    high = _to_decimal(bar.get("2. high"))
    low = _to_decimal(bar.get("3. low"))
    close = _to_decimal(bar.get("4. close"))
    volume = _to_int(bar.get("5. volume"))

    if open_ is None or high is None or low is None or close is None or volume is None:
        # Malformed rows are skipped, not fatal
        return None

    return TimeSeriesBar(
        time=to_time_label(timestamp),
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=volume,
    )


def _string_value(value: Any) -> str | None:
    return None if value is None else str(value)


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # Fractional volumes are truncated
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return None
