from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..db.store import StoreError
from ..models.registrant import MIN_AGE, Registrant
from .validation import validate_registrant_fields

"""Single registrant registration (form submission)."""

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
UNDER_AGE_MESSAGE = f"Must be {MIN_AGE} or older to register."


@dataclass
class RegistrationOutcome:
    success: bool
    message: str
    registrant: Registrant | None = None
    errors: list[str] = field(default_factory=list)


def register(store: Any, full_name: Any, age: Any, gender: Any, church_location: Any) -> RegistrationOutcome:
    check = validate_registrant_fields(
        full_name,
        age,
        gender,
        church_location,
        min_name_length=MIN_NAME_LENGTH,
        under_age_message=UNDER_AGE_MESSAGE,
    )
    if not check.ok:
        return RegistrationOutcome(
            success=False,
            message=f"Registration failed: {', '.join(check.errors)}",
            errors=check.errors,
        )

    values = dict(check.values or {})
    values["assigned_group"] = None
    try:
        registrant = store.insert(values)
    except StoreError as e:
        logger.error(f"registration insert failed: {e}")
        return RegistrationOutcome(success=False, message=f"Registration failed: {e}", errors=[str(e)])

    logger.info("Registration successful!")
    return RegistrationOutcome(success=True, message="Registration successful!", registrant=registrant)
