"""Data models for finmark."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InputFormat(str, Enum):
    """Supported input formats."""

    TRANSACTIONS = "TRANSACTIONS"
    PORTFOLIO = "PORTFOLIO"
    RAW_CSV = "RAW_CSV"
    STATEMENT = "STATEMENT"
    EXCEL = "EXCEL"  # File uploads only


class TransactionRecord(BaseModel):
    """One transaction from a bank, card or bookkeeping export."""

    model_config = ConfigDict(frozen=True)

    date: date
    description: str | None = None
    amount: Decimal  # Exact decimal, never a float
    category: str | None = None
    currency: str | None = None
    account_id: str | None = None


class HoldingRecord(BaseModel):
    """One position in a portfolio."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    quantity: Decimal
    price: Decimal | None = None
    value: Decimal | None = None
    currency: str | None = None

    @field_validator("symbol")
    @classmethod
    def symbol_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Symbol is required")
        return v


class StatementContext(BaseModel):
    """Optional header metadata for a statement."""

    model_config = ConfigDict(frozen=True)

    account_name: str | None = None
    account_id: str | None = None
    period_start: date | None = None
    period_end: date | None = None
    opening_balance: Decimal | None = None
    closing_balance: Decimal | None = None
    currency: str | None = None


class TransactionsRequest(BaseModel):
    """List of transactions."""

    model_config = ConfigDict(frozen=True)

    format: Literal["TRANSACTIONS"] = "TRANSACTIONS"
    transactions: list[TransactionRecord] | None = None


class PortfolioRequest(BaseModel):
    """Portfolio holdings."""

    model_config = ConfigDict(frozen=True)

    format: Literal["PORTFOLIO"] = "PORTFOLIO"
    holdings: list[HoldingRecord] | None = None


class RawCsvRequest(BaseModel):
    """Raw CSV or table text pasted from a spreadsheet or bank export."""

    model_config = ConfigDict(frozen=True)

    format: Literal["RAW_CSV"] = "RAW_CSV"
    raw_content: str | None = None


class StatementRequest(BaseModel):
    """Statement metadata plus its transactions."""

    model_config = ConfigDict(frozen=True)

    format: Literal["STATEMENT"] = "STATEMENT"
    metadata: StatementContext | None = None
    transactions: list[TransactionRecord] | None = None


# The format tag and its payload travel together; pydantic picks the
# variant from the "format" field.
ConversionRequest = Annotated[
    Union[TransactionsRequest, PortfolioRequest, RawCsvRequest, StatementRequest],
    Field(discriminator="format"),
]


class FileUploadRequest(BaseModel):
    """An uploaded file, fully read into memory."""

    model_config = ConfigDict(frozen=True)

    contents: bytes
    filename: str | None = None
    content_type: str | None = None
    format_hint: str | None = None


class ConversionResult(BaseModel):
    """Markdown produced by a renderer."""

    model_config = ConfigDict(frozen=True)

    markdown: str
    format: str
    item_count: int = Field(ge=0)  # Rows actually emitted


class TimeSeriesBar(BaseModel):
    """A single OHLCV bar."""

    model_config = ConfigDict(frozen=True)

    time: str
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int


class NormalizedTimeSeries(BaseModel):
    """Compact form of a provider time-series payload."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    interval: str
    time_zone: str
    bars: list[TimeSeriesBar] = Field(default_factory=list)

    def to_compact(self) -> dict:
        """Short-key mapping used by the normalize endpoint."""
        return {
            "s": self.symbol,
            "i": self.interval,
            "tz": self.time_zone,
            "d": [
                [bar.time, bar.open, bar.high, bar.low, bar.close, bar.volume]
                for bar in self.bars
            ],
        }
