"""Import validation."""

from cashflow.validation.validator import (
    REQUIRED_COLUMNS,
    TransactionRowValidator,
    parse_amount,
    parse_iso_date,
)

__all__ = [
    "REQUIRED_COLUMNS",
    "TransactionRowValidator",
    "parse_amount",
    "parse_iso_date",
]
