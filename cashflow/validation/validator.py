"""
CSV Row Validation

Each data row of an import file goes through four checks, in order, and
stops at the first failure:

1. PRESENCE - date, description, type, category and amount are all non-empty
2. TYPE     - type is exactly "income" or "expense"
3. AMOUNT   - amount parses to a finite number greater than zero
4. DATE     - date is a real calendar date written YYYY-MM-DD

One row produces at most one issue. The message names the physical line
number of the row in the file, so the user can find it in a spreadsheet.

IMPORTANT: Validation never fixes a row. A bad row is reported and left out;
the import gate then refuses the whole file.
"""

import math
import re
from datetime import date
from typing import Optional

from cashflow.models.finance import TransactionDraft, TransactionType
from cashflow.models.transfer import ValidationIssue


REQUIRED_COLUMNS: tuple[str, ...] = ("date", "description", "type", "category", "amount")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _row_issue(line_number: int, field: str, issue_type: str, text: str) -> ValidationIssue:
    return ValidationIssue(
        row=line_number,
        field=field,
        issue_type=issue_type,
        message=f"Row {line_number}: {text}",
    )


def parse_amount(raw: str) -> Optional[float]:
    """A finite positive float, or None."""
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def parse_iso_date(raw: str) -> Optional[date]:
    """A calendar date from strict YYYY-MM-DD text, or None."""
    if not _ISO_DATE.match(raw):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


class TransactionRowValidator:
    """
    Validates the header and data rows of a transaction CSV.

    Build it from the header line; it remembers where each required column
    sits so data rows can list their columns in any order.
    """

    def __init__(self, header: list[str]):
        self.columns = [name.strip().lower() for name in header]
        self.missing_columns = [c for c in REQUIRED_COLUMNS if c not in self.columns]
        self._positions = {
            name: self.columns.index(name)
            for name in REQUIRED_COLUMNS
            if name in self.columns
        }

    @property
    def header_issue(self) -> Optional[ValidationIssue]:
        if not self.missing_columns:
            return None
        return ValidationIssue(
            field="header",
            issue_type="missing_columns",
            message=f"Missing required columns: {', '.join(self.missing_columns)}",
        )

    def _field(self, values: list[str], name: str) -> str:
        position = self._positions[name]
        return values[position].strip() if position < len(values) else ""

    def validate_row(
        self,
        values: list[str],
        line_number: int,
    ) -> tuple[Optional[TransactionDraft], Optional[ValidationIssue]]:
        """
        Check one split data row.

        Returns (draft, None) when the row is valid, (None, issue) otherwise.
        """
        fields = {name: self._field(values, name) for name in REQUIRED_COLUMNS}

        # Stage 1: presence
        empty = [name for name, value in fields.items() if not value]
        if empty:
            return None, _row_issue(line_number, empty[0], "missing", "Missing required data")

        # Stage 2: direction
        if fields["type"] not in (TransactionType.INCOME.value, TransactionType.EXPENSE.value):
            return None, _row_issue(
                line_number, "type", "invalid_type",
                "Type must be 'income' or 'expense'",
            )

        amount = parse_amount(fields["amount"])
        if amount is None:
            return None, _row_issue(
                line_number, "amount", "invalid_amount",
                "Amount must be positive",
            )

        parsed_date = parse_iso_date(fields["date"])
        if parsed_date is None:
            return None, _row_issue(
                line_number, "date", "invalid_date",
                "Invalid date format",
            )

        draft = TransactionDraft(
            date=parsed_date,
            description=fields["description"],
            amount=amount,
            type=TransactionType(fields["type"]),
            category=fields["category"],
        )
        return draft, None
