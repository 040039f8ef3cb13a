"""Domain models for the family camp roster tools.

Registrant and its closed value sets, import processing records and the
structured error record used by the JSON Lines error log.
"""

from .error_record import ErrorRecord
from .import_result import ImportResult, ImportRow
from .registrant import (
    GROUP_NUMBERS,
    MIN_AGE,
    UNASSIGNED_KEY,
    ChurchLocation,
    Gender,
    Registrant,
    group_key,
)

__all__ = [
    # Registrant
    "Registrant",
    "Gender",
    "ChurchLocation",
    "MIN_AGE",
    "GROUP_NUMBERS",
    "UNASSIGNED_KEY",
    "group_key",
    # Import processing
    "ImportRow",
    "ImportResult",
    "ErrorRecord",
]
