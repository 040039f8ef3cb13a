from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import IO, Any

from ..db.store import StoreError
from ..excel.reader import SheetRow, read_registrant_sheet
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.import_result import ImportResult, ImportRow
from .progress import RowProgress
from .validation import validate_registrant_fields

"""Registrant spreadsheet import.

Linear flow: parse -> validate every data row -> single upsert of the valid
batch -> summary. Validation is a pure fold (validate_rows) so the rules can
be exercised without a store.

The upsert is keyed on full_name. Two different people sharing a name are
merged into one record; this is a known limitation of the conflict key.
"""

logger = logging.getLogger(__name__)

CONFLICT_COLUMN = "full_name"
NO_DATA_MESSAGE = "No data rows found in the file."
GROUP_REMINDER = "Remember to manually assign groups if needed for newly imported participants."


class ImportFailure(Exception):
    """Fatal import error (no data, rejected upsert)."""


def validate_row(row: SheetRow) -> ImportRow:
    raw = row.values
    check = validate_registrant_fields(
        raw.get("full_name"),
        raw.get("age"),
        raw.get("gender"),
        raw.get("church_location"),
    )
    return ImportRow(
        row_number=row.row_number,
        raw_values=dict(raw),
        valid=check.ok,
        errors=list(check.errors),
        values=check.values,
    )


def validate_rows(
    rows: Iterable[SheetRow], progress: RowProgress | None = None
) -> tuple[list[ImportRow], list[ImportRow]]:
    """Split data rows into (valid, invalid), preserving worksheet order."""
    valid: list[ImportRow] = []
    invalid: list[ImportRow] = []
    for row in rows:
        checked = validate_row(row)
        (valid if checked.valid else invalid).append(checked)
        if progress is not None:
            progress.advance()
    return valid, invalid


def import_file(
    source: Path | bytes | IO[bytes],
    store: Any,
    *,
    file_name: str | None = None,
    error_log: ErrorLogBuffer | None = None,
    show_progress: bool | None = None,
) -> ImportResult:
    """Import registrants from an uploaded workbook.

    Never raises: every failure is reported through the returned ImportResult.
    """
    result = ImportResult()
    name = file_name or (source.name if isinstance(source, Path) else "upload.xlsx")
    logger.info(f"Starting import process... file={name}")

    try:
        sheet = read_registrant_sheet(source)
        if not sheet.rows:
            raise ImportFailure(NO_DATA_MESSAGE)

        with RowProgress(len(sheet.rows), enabled=show_progress) as progress:
            valid, invalid = validate_rows(sheet.rows, progress)

        result.processed_rows = len(valid) + len(invalid)
        result.skipped_count = len(invalid)
        result.errors.extend(r.error_message() for r in invalid)
        if error_log is not None:
            error_log.add_invalid_rows(name, invalid)

        if valid:
            logger.info(f"Attempting to upsert {len(valid)} valid registrants...")
            try:
                count = store.upsert([r.values for r in valid], conflict_column=CONFLICT_COLUMN)
            except StoreError as e:
                raise ImportFailure(f"Database error during upsert: {e}") from e

            result.upserted_count = count
            result.success = True
            result.message = (
                f"Import finished. Processed: {result.processed_rows}, "
                f"Upserted/Updated: {result.upserted_count}, Skipped: {result.skipped_count}."
            )
            logger.info(GROUP_REMINDER)
        elif result.errors:
            result.message = (
                f"Import completed with validation errors. Processed: {result.processed_rows}, "
                f"Skipped: {result.skipped_count}. See errors for details."
            )
        else:
            result.message = "Import file processed, but no valid registrant data found to import."
    except Exception as e:
        result.success = False
        result.message = f"Import failed: {e}"
        result.errors.append(str(e))
        logger.error(result.message)
        if error_log is not None:
            error_log.append(ErrorRecord.create(name, -1, "IMPORT_FAILED", str(e)))

    if result.success:
        logger.info(result.message)
    elif result.skipped_count > 0:
        logger.warning(f"Skipped {result.skipped_count} rows due to validation errors.")
    for err in result.errors:
        logger.debug(f"import error: {err}")

    return result
