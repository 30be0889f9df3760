"""Preview frame for showing an extracted table in the UI."""

from typing import Optional

import pandas as pd

from tablescan.models.table import Table


def header_labels(table: Table) -> list[str]:
    """
    Column labels for the preview.

    Blank header cells and columns beyond the header become "Column N".
    Repeated labels get a numeric suffix so every label is unique.
    """
    header = table.header
    labels: list[str] = []
    for index in range(table.column_count):
        base = header[index].strip() if index < len(header) else ""
        base = base or f"Column {index + 1}"
        label, n = base, 1
        while label in labels:
            n += 1
            label = f"{base} ({n})"
        labels.append(label)
    return labels


def build_preview_frame(table: Optional[Table]) -> Optional[pd.DataFrame]:
    """Data rows of the table as a DataFrame; short rows are padded with ""."""
    if table is None or table.is_empty:
        return None

    body = table.padded_rows()[1:]
    return pd.DataFrame(body, columns=header_labels(table), dtype=str)
