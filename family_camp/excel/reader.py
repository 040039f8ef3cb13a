from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import IO, Any

import pandas as pd

"""Upload reader for registrant spreadsheets.

- Only the first worksheet is read.
- The header row is row 1 for template files (keys full_name / age / gender /
  church_location). Files produced by the exporter carry a title band and a
  spacer row first, with display labels ("Full Name", "Location", ...); the
  header is searched in the first HEADER_SCAN_ROWS rows so those re-import.
- Only empty cells count as missing; text such as "NA" or "None" is kept.
- Fully empty rows are skipped. Row numbers are worksheet row numbers (1-based).
"""

HEADER_SCAN_ROWS = 5

# display label (normalized) -> field key
HEADER_ALIASES = {
    "location": "church_location",
}


class SheetReadError(Exception):
    """Raised when the workbook cannot be opened or has no worksheet."""


@dataclass
class SheetRow:
    row_number: int
    values: dict[str, Any]


@dataclass
class SheetData:
    sheet_name: str
    header_row_number: int
    columns: list[str]
    rows: list[SheetRow] = field(default_factory=list)


def normalize_header(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    key = "_".join(str(value).strip().lower().split())
    return HEADER_ALIASES.get(key, key)


def read_first_sheet(source: Path | bytes | IO[bytes]) -> tuple[str, pd.DataFrame]:
    """Read the first worksheet raw (no header applied).

    Parameters
    ----------
    source: file path, raw bytes of an upload, or a binary file object
    """
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    try:
        xls = pd.ExcelFile(source, engine="openpyxl")
    except Exception as e:
        raise SheetReadError(f"Could not read the uploaded file: {e}") from e
    if not xls.sheet_names:
        raise SheetReadError("Could not find worksheet in the uploaded file.")
    name = str(xls.sheet_names[0])
    # 生読み: 型推論のみ pandas に任せ、ヘッダ行は後段で決定
    # 空セルだけを欠損とする ("NA", "None" などは名前として残す)
    df = xls.parse(xls.sheet_names[0], header=None, keep_default_na=False, na_values=[""])
    return name, df


def _find_header_index(df: pd.DataFrame) -> int:
    for idx in range(min(HEADER_SCAN_ROWS, df.shape[0])):
        keys = {normalize_header(v) for v in df.iloc[idx].tolist()}
        if "full_name" in keys:
            return idx
    return 0


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SheetData:
    """Apply the header row and convert data rows to column-key dicts.

    An empty sheet yields SheetData with no rows; deciding that this is an
    error is up to the caller.
    """
    if df.shape[0] == 0:
        return SheetData(sheet_name=sheet_name, header_row_number=1, columns=[], rows=[])

    header_idx = _find_header_index(df)
    columns = [normalize_header(c) for c in df.iloc[header_idx].tolist()]
    rows: list[SheetRow] = []
    for idx in range(header_idx + 1, df.shape[0]):
        raw = df.iloc[idx]
        if raw.isna().all():
            continue
        values: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if not col or col in values:
                continue
            values[col] = None if pd.isna(val) else val
        rows.append(SheetRow(row_number=idx + 1, values=values))
    return SheetData(
        sheet_name=sheet_name,
        header_row_number=header_idx + 1,
        columns=[c for c in columns if c],
        rows=rows,
    )


def read_registrant_sheet(source: Path | bytes | IO[bytes]) -> SheetData:
    name, df = read_first_sheet(source)
    return normalize_sheet(df, name)
