from __future__ import annotations

from typing import Dict, List, Sequence

from exam_results.errors import NoDataError

StudentRecord = Dict[str, str]


def normalize_grid(grid: Sequence[Sequence[str]]) -> List[StudentRecord]:
    """
    Turn a raw sheet grid into one record per data row.

    Row 0 holds the headers. Cells are paired with headers by position; a
    short row gets "" for the missing cells and extra cells are dropped.
    """
    if len(grid) < 2:
        raise NoDataError("No data found in the Google Sheet")

    headers = list(grid[0])
    records = []
    for row in grid[1:]:
        record = {}
        for index, header in enumerate(headers):
            record[header] = row[index] if index < len(row) and row[index] else ""
        records.append(record)
    return records
