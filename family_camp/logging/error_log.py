from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from family_camp.models.error_record import ErrorRecord
from family_camp.models.import_result import ImportRow

"""Import error log (JSON Lines).

- Fixed schema per line (see ErrorRecord)
- One file per run: `logs/import-errors-YYYYMMDD-HHMMSS.log` (UTC), created
  lazily on the first flush that has records
- Serial use only (one import per CLI run)
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. flush() appends JSON Lines."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"import-errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def add_invalid_rows(self, file_name: str, rows: list[ImportRow]) -> None:
        for row in rows:
            self.append(
                ErrorRecord.create(file_name, row.row_number, "VALIDATION_ERROR", ", ".join(row.errors))
            )

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records. Returns the file path, or None if nothing was written."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
