"""
Import/Export Services

CSV export for spreadsheets and JSON import for restoring or migrating data.
"""

from moodspend.services.transfer.csv_export import CSV_COLUMNS, export_csv
from moodspend.services.transfer.json_import import InvalidImportPayload, parse_import

__all__ = [
    "CSV_COLUMNS",
    "InvalidImportPayload",
    "export_csv",
    "parse_import",
]
