from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Import processing models.

ImportRow exists only during one import pass; ImportResult is the summary
returned to the caller (not persisted).
"""

__all__ = [
    "ImportRow",
    "ImportResult",
]


@dataclass
class ImportRow:
    """One worksheet data row with its validation outcome.

    row_number is the worksheet row number (1-based, header included) so
    error messages point at the row the user sees in the spreadsheet.
    """
    row_number: int
    raw_values: dict[str, Any]
    valid: bool = False
    errors: list[str] = field(default_factory=list)
    values: dict[str, Any] | None = None  # normalized insert payload when valid

    def error_message(self) -> str:
        return f"Row {self.row_number}: {', '.join(self.errors)}"


@dataclass
class ImportResult:
    success: bool = False
    message: str = "Import process started."
    processed_rows: int = 0
    upserted_count: int = 0
    skipped_count: int = 0
    errors: list[str] = field(default_factory=list)
