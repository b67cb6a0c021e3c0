"""
CSV Export

Every field is quoted, so commas, quotes and newlines inside free text
survive a round trip through any CSV reader. Rows are joined with a bare
newline and there is no trailing newline after the last row.
"""

import csv
import io
from typing import Iterable

from moodspend.models.expense import ExpenseRecord


CSV_COLUMNS = ["id", "date", "amount", "category", "description", "payment", "mood"]


def _row(record: ExpenseRecord) -> list[str]:
    values = record.to_storage_dict()
    return ["" if values.get(column) is None else str(values[column]) for column in CSV_COLUMNS]


def export_csv(records: Iterable[ExpenseRecord]) -> str:
    """Render records as CSV text with the fixed column header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(",".join(CSV_COLUMNS) + "\n")
    for record in records:
        writer.writerow(_row(record))
    return buffer.getvalue().rstrip("\n")
