from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import pandas as pd

from ..config.loader import DEFAULT_EVENT_TITLE
from ..excel.writer import SheetSpec, write_workbook
from ..models.registrant import GROUP_NUMBERS, UNASSIGNED_KEY, Registrant, group_key

"""Roster spreadsheet export.

Sheets, in order:
- "All Participants": every registrant in input order, with Assigned Group
  ("None" when unassigned)
- "Group N" for each group 1..5 with at least one member
- "Unassigned" only when at least one registrant has no group
"""

logger = logging.getLogger(__name__)

EXPORT_FILE_PREFIX = "family-camp-export"
EXPORT_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
ALL_SHEET_NAME = "All Participants"
ALL_COLUMNS = ["Full Name", "Age", "Gender", "Location", "Assigned Group"]
GROUP_COLUMNS = ALL_COLUMNS[:-1]
EXPORT_FAILED_MESSAGE = "Failed to export participants. Please try again."


class ExportError(Exception):
    pass


@dataclass(frozen=True)
class ExportFile:
    file_name: str
    mime_type: str
    content: bytes

    def write_to(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.file_name
        path.write_bytes(self.content)
        return path


def export_file_name(today: date) -> str:
    return f"{EXPORT_FILE_PREFIX}-{today.strftime('%Y-%m-%d')}.xlsx"


def _frame(registrants: list[Registrant], with_group: bool) -> pd.DataFrame:
    records = []
    for r in registrants:
        record = {
            "Full Name": r.full_name,
            "Age": r.age,
            "Gender": r.gender_label,
            "Location": r.location_label,
        }
        if with_group:
            record["Assigned Group"] = r.assigned_group if r.assigned_group is not None else "None"
        records.append(record)
    return pd.DataFrame(records, columns=ALL_COLUMNS if with_group else GROUP_COLUMNS)


def build_sheets(registrants: list[Registrant], event_title: str = DEFAULT_EVENT_TITLE) -> list[SheetSpec]:
    sheets = [
        SheetSpec(
            name=ALL_SHEET_NAME,
            title=f"{event_title} - {ALL_SHEET_NAME}",
            frame=_frame(registrants, with_group=True),
        )
    ]
    for number in GROUP_NUMBERS:
        members = [r for r in registrants if r.assigned_group == number]
        if not members:
            continue
        name = group_key(number)
        sheets.append(SheetSpec(name=name, title=f"{event_title} - {name}", frame=_frame(members, with_group=False)))

    unassigned = [r for r in registrants if r.assigned_group is None]
    if unassigned:
        sheets.append(
            SheetSpec(
                name=UNASSIGNED_KEY,
                title=f"{event_title} - {UNASSIGNED_KEY} Participants",
                frame=_frame(unassigned, with_group=False),
            )
        )
    return sheets


def export_roster(
    registrants: list[Registrant],
    *,
    event_title: str = DEFAULT_EVENT_TITLE,
    today: date | None = None,
) -> ExportFile | None:
    """Build the roster workbook. Returns None (no-op) for an empty roster.

    Raises:
        ExportError: workbook construction failed; nothing is returned.
    """
    if not registrants:
        logger.warning("No participants to export.")
        return None

    try:
        content = write_workbook(build_sheets(registrants, event_title))
    except Exception as e:
        logger.debug(f"export failed: {e!r}")
        raise ExportError(EXPORT_FAILED_MESSAGE) from e

    file_name = export_file_name(today or date.today())
    logger.info(f"Exported {len(registrants)} participants to {file_name}")
    return ExportFile(file_name=file_name, mime_type=EXPORT_MIME_TYPE, content=content)
