"""CSV import/export and JSON backups."""

from cashflow.transfer.backup import (
    BackupFormatError,
    build_snapshot,
    dump_snapshot,
    load_snapshot,
)
from cashflow.transfer.csv_codec import (
    EXPORT_HEADER,
    ImportBlockedError,
    backup_filename,
    csv_template,
    ensure_committable,
    export_transactions_csv,
    format_amount,
    parse_transactions_csv,
    report_filename,
)

__all__ = [
    "EXPORT_HEADER",
    "BackupFormatError",
    "ImportBlockedError",
    "backup_filename",
    "build_snapshot",
    "csv_template",
    "dump_snapshot",
    "ensure_committable",
    "export_transactions_csv",
    "format_amount",
    "load_snapshot",
    "parse_transactions_csv",
    "report_filename",
]
