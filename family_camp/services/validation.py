from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from ..models.registrant import MIN_AGE, ChurchLocation, Gender

"""Field validation shared by the registration form and the spreadsheet importer.

Every check runs independently so a single record can report several
problems at once. Accepted values are normalized (trimmed strings, int age,
canonical gender casing) into the column names of the registrants table.
"""

__all__ = [
    "FieldCheck",
    "parse_age",
    "validate_registrant_fields",
]


@dataclass
class FieldCheck:
    values: dict[str, Any] | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_age(value: Any) -> int | None:
    """Return the integer age, or None when the value is not an integral number.

    Accepts ints, integral floats (spreadsheet numbers) and numeric strings.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        if math.isfinite(number) and number.is_integer():
            return int(number)
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_registrant_fields(
    full_name: Any,
    age: Any,
    gender: Any,
    church_location: Any,
    *,
    min_name_length: int = 1,
    under_age_message: str | None = None,
) -> FieldCheck:
    """Check one record. under_age_message replaces the default age-limit error."""
    check = FieldCheck()

    name = _text(full_name)
    if not name:
        check.errors.append("Full Name is missing")
    elif len(name) < min_name_length:
        check.errors.append(f"Full name must be at least {min_name_length} characters.")

    parsed_age: int | None = None
    if _is_blank(age):
        check.errors.append("Age is missing")
    else:
        parsed_age = parse_age(age)
        if parsed_age is None:
            check.errors.append(f'Invalid age format: "{_text(age)}"')
        elif parsed_age < MIN_AGE:
            check.errors.append(under_age_message or f"Age must be {MIN_AGE} or older, found: {parsed_age}")

    gender_text = _text(gender)
    gender_value = None
    if not gender_text:
        check.errors.append("Gender is missing")
    else:
        gender_value = Gender.parse(gender_text)
        if gender_value is None:
            check.errors.append(f'Invalid gender: "{gender_text}". Must be Male or Female.')

    location_text = _text(church_location)
    location_value = None
    if not location_text:
        check.errors.append("Location is missing")
    else:
        location_value = ChurchLocation.parse(location_text)
        if location_value is None:
            check.errors.append(f'Invalid location: "{location_text}". Must match allowed values.')

    if check.errors:
        return check

    check.values = {
        "full_name": name,
        "age": parsed_age,
        "gender": gender_value.value,  # type: ignore[union-attr]
        "church_location": location_value.value,  # type: ignore[union-attr]
    }
    return check
