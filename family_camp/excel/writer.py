from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

import pandas as pd
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

"""Styled multi-sheet workbook writer.

Sheet layout (1-based rows):
    1  title band, merged across the column span, 16pt bold
    2  blank spacer
    3  bold column header row
    4+ data rows
"""

TITLE_ROW = 1
HEADER_ROW = 3
DEFAULT_COLUMN_WIDTH = 15
TITLE_FONT_SIZE = 16

COLUMN_WIDTHS = {
    "Full Name": 30,
    "Age": 8,
    "Gender": 10,
    "Location": 20,
    "Assigned Group": 16,
}


@dataclass(frozen=True)
class SheetSpec:
    name: str
    title: str
    frame: pd.DataFrame


def _style_sheet(worksheet: Worksheet, spec: SheetSpec) -> None:
    ncols = max(len(spec.frame.columns), 1)

    title_cell = worksheet.cell(row=TITLE_ROW, column=1, value=spec.title)
    worksheet.merge_cells(start_row=TITLE_ROW, start_column=1, end_row=TITLE_ROW, end_column=ncols)
    title_cell.font = Font(size=TITLE_FONT_SIZE, bold=True)
    title_cell.alignment = Alignment(horizontal="center", vertical="center")

    for col_idx, col_name in enumerate(spec.frame.columns, start=1):
        worksheet.cell(row=HEADER_ROW, column=col_idx).font = Font(bold=True)
        width = COLUMN_WIDTHS.get(str(col_name), DEFAULT_COLUMN_WIDTH)
        worksheet.column_dimensions[get_column_letter(col_idx)].width = width


def write_workbook(sheets: list[SheetSpec]) -> bytes:
    """Render sheets (in order) into xlsx bytes.

    Nothing is returned unless the whole workbook was built; a failure on any
    sheet propagates before the buffer is handed out.
    """
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for spec in sheets:
            spec.frame.to_excel(writer, sheet_name=spec.name, index=False, startrow=HEADER_ROW - 1)
            _style_sheet(writer.sheets[spec.name], spec)
    return buffer.getvalue()
