"""Renderer for transaction lists and bank statements."""

from finmark.models import ConversionResult, InputFormat, StatementContext, TransactionRecord
from finmark.renderers.markdown import (
    escape_cell,
    format_date,
    format_decimal,
    log_render_result,
    table,
)

TRANSACTION_COLUMNS = ["Date", "Description", "Amount", "Category", "Currency", "Account"]


def render_transactions(
    transactions: list[TransactionRecord], metadata: StatementContext | None = None
) -> ConversionResult:
    """
    Render transactions as a markdown table.

    When statement metadata is supplied a header block with one bullet per
    present field comes first and the result is labelled STATEMENT.
    Rows keep input order.
    """
    lines: list[str] = []

    if metadata is not None:
        header = _statement_header(metadata)
        if header:
            lines.extend(header)
            lines.append("")

    rows = [_transaction_cells(txn) for txn in transactions]
    lines.extend(table(TRANSACTION_COLUMNS, rows))

    label = InputFormat.STATEMENT if metadata is not None else InputFormat.TRANSACTIONS
    result = ConversionResult(markdown="\n".join(lines) + "\n", format=label.value, item_count=len(rows))

    log_render_result(result, label.value.title())
    return result


def _transaction_cells(txn: TransactionRecord) -> list[str]:
    return [
        format_date(txn.date),
        escape_cell(txn.description),
        format_decimal(txn.amount),
        escape_cell(txn.category),
        escape_cell(txn.currency),
        escape_cell(txn.account_id),
    ]


def _statement_header(metadata: StatementContext) -> list[str]:
    """Bullet lines for the metadata fields that are present, in fixed order."""
    fields = [
        ("Account Name", metadata.account_name),
        ("Account ID", metadata.account_id),
        ("Period Start", format_date(metadata.period_start) if metadata.period_start else None),
        ("Period End", format_date(metadata.period_end) if metadata.period_end else None),
        (
            "Opening Balance",
            format_decimal(metadata.opening_balance) if metadata.opening_balance is not None else None,
        ),
        (
            "Closing Balance",
            format_decimal(metadata.closing_balance) if metadata.closing_balance is not None else None,
        ),
        ("Currency", metadata.currency),
    ]

    bullets = [f"- **{label}:** {escape_cell(value)}" for label, value in fields if value is not None]
    if not bullets:
        return []

    return ["## Statement", ""] + bullets
