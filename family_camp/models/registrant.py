from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

"""Registrant domain model and the closed value sets shared by the
registration form, the importer and the exporter.

All eligibility / membership rules live here so the entry points cannot drift:
- MIN_AGE: registrants younger than this are hidden at read time (never deleted)
- Gender / ChurchLocation: closed enumerations
- GROUP_NUMBERS: camp sub-groups 1..5, None means unassigned
"""

__all__ = [
    "MIN_AGE",
    "GROUP_NUMBERS",
    "UNASSIGNED_KEY",
    "Gender",
    "ChurchLocation",
    "Registrant",
    "group_key",
]

MIN_AGE = 12
GROUP_NUMBERS: tuple[int, ...] = (1, 2, 3, 4, 5)
UNASSIGNED_KEY = "Unassigned"


class Gender(Enum):
    MALE = "Male"
    FEMALE = "Female"

    @classmethod
    def parse(cls, raw: str) -> Gender | None:
        """Case-insensitive lookup. Returns None when no member matches."""
        lowered = raw.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


class ChurchLocation(Enum):
    """Allowed church locations. Matching is exact (case-sensitive)."""
    BAY = "Bay"
    BINAN = "Biñan"
    CABUYAO = "Cabuyao"
    CALAMBA = "Calamba"
    LOS_BANOS = "Los Baños"
    SAN_PABLO = "San Pablo"
    SANTA_CRUZ = "Santa Cruz"
    VICTORIA = "Victoria"

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]

    @classmethod
    def parse(cls, raw: str) -> ChurchLocation | None:
        for member in cls:
            if member.value == raw:
                return member
        return None


def group_key(assigned_group: int | None) -> str:
    """Bucket name for an assigned group value ("Group N" or "Unassigned")."""
    if assigned_group is None:
        return UNASSIGNED_KEY
    return f"Group {assigned_group}"


@dataclass(frozen=True)
class Registrant:
    """One registration record as stored in the `registrants` table."""
    id: Any  # opaque (uuid / bigint depending on backend)
    full_name: str
    age: int
    gender: Gender | None
    church_location: ChurchLocation | str | None
    assigned_group: int | None = None
    created_at: datetime | None = None

    @property
    def group_label(self) -> str:
        return group_key(self.assigned_group)

    @property
    def gender_label(self) -> str:
        return self.gender.value if self.gender is not None else ""

    @property
    def location_label(self) -> str:
        loc = self.church_location
        if loc is None:
            return ""
        return loc.value if isinstance(loc, ChurchLocation) else str(loc)

    @staticmethod
    def from_row(row: dict[str, Any]) -> Registrant:
        """Build a Registrant from a store row (column name -> value).

        Unknown location strings are kept verbatim: rows written before the
        location set was closed must still be displayable.
        """
        gender_raw = row.get("gender")
        gender = Gender.parse(gender_raw) if isinstance(gender_raw, str) else None
        loc_raw = row.get("church_location")
        location: ChurchLocation | str | None = None
        if isinstance(loc_raw, str):
            location = ChurchLocation.parse(loc_raw) or loc_raw
        group = row.get("assigned_group")
        return Registrant(
            id=row.get("id"),
            full_name=str(row.get("full_name") or ""),
            age=int(row.get("age") or 0),
            gender=gender,
            church_location=location,
            assigned_group=int(group) if group is not None else None,
            created_at=row.get("created_at"),
        )
