"""
CSV Import/Export

Import is two-phase: `parse_transactions_csv` builds an ImportPreview and
nothing is stored until the caller commits it. Export writes the rows of a
month in the same five-column layout the importer reads.

The format is deliberately plain: comma separated, no quoting, no escaping.
A description containing a comma does not survive a round trip.
"""

from datetime import date
from typing import Iterable, Optional

import structlog

from cashflow.models.finance import Transaction
from cashflow.models.transfer import ImportPreview, ValidationIssue
from cashflow.services.storage.interface import CashflowError
from cashflow.validation.validator import TransactionRowValidator


logger = structlog.get_logger("cashflow.transfer.csv")

EXPORT_HEADER = "Date,Description,Type,Category,Amount"

TEMPLATE_ROWS: tuple[str, ...] = (
    "2024-01-15,Sample Income,income,Gaji,5000000",
    "2024-01-16,Sample Expense,expense,Makanan,150000",
)


class ImportBlockedError(CashflowError):
    """Raised when a preview that contains errors is committed."""

    def __init__(self, preview: ImportPreview):
        self.preview = preview
        super().__init__(
            f"Import blocked: {len(preview.issues)} row(s) failed validation"
        )


def _split(line: str) -> list[str]:
    return [value.strip() for value in line.split(",")]


def parse_transactions_csv(text: str) -> ImportPreview:
    """
    Read transaction rows from CSV text.

    The first non-empty line is the header. Blank lines are skipped but
    still count towards the line numbers quoted in error messages.
    """
    numbered = [
        (number, line)
        for number, line in enumerate(text.splitlines(), start=1)
        if line.strip()
    ]
    if not numbered:
        return ImportPreview()

    _, header_line = numbered[0]
    validator = TransactionRowValidator(_split(header_line))
    if validator.header_issue is not None:
        logger.info("csv_header_rejected", missing=validator.missing_columns)
        return ImportPreview(issues=[validator.header_issue])

    transactions: list[Transaction] = []
    issues: list[ValidationIssue] = []
    for number, line in numbered[1:]:
        draft, issue = validator.validate_row(_split(line), number)
        if issue is not None:
            issues.append(issue)
        else:
            transactions.append(Transaction.from_draft(draft))

    logger.debug(
        "csv_parsed",
        valid_rows=len(transactions),
        invalid_rows=len(issues),
    )
    return ImportPreview(transactions=transactions, issues=issues)


def ensure_committable(preview: ImportPreview) -> None:
    """Raise ImportBlockedError unless the preview is free of errors."""
    if preview.has_errors:
        raise ImportBlockedError(preview)


def format_amount(amount: float) -> str:
    """Integral amounts print without a decimal point: 5000000, 12.5"""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def export_transactions_csv(transactions: Iterable[Transaction]) -> str:
    """Header line plus one unescaped line per transaction, joined by \\n."""
    rows = [EXPORT_HEADER]
    for t in transactions:
        rows.append(",".join([
            t.date.isoformat(),
            t.description,
            t.type.value,
            t.category,
            format_amount(t.amount),
        ]))
    return "\n".join(rows)


def csv_template() -> str:
    """A downloadable example file in the import layout."""
    return "\n".join([EXPORT_HEADER, *TEMPLATE_ROWS])


def report_filename(month: str) -> str:
    return f"cashflow-report-{month}.csv"


def backup_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"cashflow-backup-{day.isoformat()}.json"
