"""Table model produced by extraction and consumed by preview and export."""

from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class Table:
    """
    Ordered rows of string cells.

    The first row is conventionally the header. Rows may have different
    lengths; missing cells are treated as empty strings wherever a
    rectangular view is needed.
    """
    rows: list[list[str]] = field(default_factory=list)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable]) -> "Table":
        """Build a table, turning every cell into a string (None -> "")."""
        return cls(rows=[[_cell_to_str(cell) for cell in row] for row in rows])

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 0

    @property
    def header(self) -> list[str]:
        return self.rows[0] if self.rows else []

    @property
    def body(self) -> list[list[str]]:
        return self.rows[1:]

    @property
    def column_count(self) -> int:
        """Width of the widest row."""
        return max((len(row) for row in self.rows), default=0)

    def padded_rows(self) -> list[list[str]]:
        """Rows padded with empty cells to the widest row."""
        width = self.column_count
        return [row + [""] * (width - len(row)) for row in self.rows]


def _cell_to_str(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
