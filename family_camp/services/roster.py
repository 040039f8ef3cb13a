from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..db.store import StoreError
from ..models.registrant import MIN_AGE, UNASSIGNED_KEY, Registrant

"""Roster loading, grouping and name search.

load_roster() is the only function here that talks to the store; grouping and
search work on the already-loaded list.
"""

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load group details. Please try refreshing."
NO_TERM_MESSAGE = "Please enter a name to search."

GroupedRoster = dict[str, list[Registrant]]


@dataclass
class RosterLoad:
    """Outcome of one load. On failure the lists are empty and error is set."""
    registrants: list[Registrant] = field(default_factory=list)
    groups: GroupedRoster = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SearchStatus(Enum):
    NO_TERM = "no_term"
    NOT_FOUND = "not_found"
    FOUND = "found"


@dataclass(frozen=True)
class SearchOutcome:
    status: SearchStatus
    matches: tuple[Registrant, ...] = ()
    message: str = ""


def _name_key(registrant: Registrant) -> tuple[str, str]:
    return (registrant.full_name.casefold(), registrant.full_name)


def _bucket_order(key: str) -> tuple[int, Any]:
    # "Group N" ascending, then anything else, "Unassigned" last
    if key == UNASSIGNED_KEY:
        return (2, 0)
    number = key.removeprefix("Group ").strip()
    if number.isdigit():
        return (0, int(number))
    return (1, key)


def group_registrants(registrants: list[Registrant]) -> GroupedRoster:
    """Partition registrants into "Group N" / "Unassigned" buckets.

    Buckets are ordered by group number with Unassigned last; members are
    ordered by full name. The result depends only on the input set, so
    grouping the same list twice gives identical buckets.
    """
    buckets: dict[str, list[Registrant]] = {}
    for registrant in registrants:
        buckets.setdefault(registrant.group_label, []).append(registrant)
    return {
        key: sorted(buckets[key], key=_name_key)
        for key in sorted(buckets, key=_bucket_order)
    }


def load_roster(store: Any) -> RosterLoad:
    """Fetch eligible registrants and group them. No retry on failure."""
    try:
        rows = store.fetch_eligible(MIN_AGE)
    except StoreError as e:
        logger.error(f"Error fetching registrant data: {e}")
        return RosterLoad(error=LOAD_FAILED_MESSAGE)

    registrants = [r for r in rows if r.age >= MIN_AGE]
    groups = group_registrants(registrants)
    logger.debug(f"roster loaded registrants={len(registrants)} groups={len(groups)}")
    return RosterLoad(registrants=registrants, groups=groups)


def load_admin_listing(store: Any) -> RosterLoad:
    """Eligible registrants newest first (management view). Not grouped."""
    try:
        rows = store.fetch_recent(MIN_AGE)
    except StoreError as e:
        logger.error(f"Error fetching registrants: {e}")
        return RosterLoad(error=str(e) or "Failed to fetch registrants.")
    return RosterLoad(registrants=[r for r in rows if r.age >= MIN_AGE])


def find_by_name(registrants: list[Registrant], term: str | None) -> SearchOutcome:
    """Case-insensitive substring search over full names."""
    if term is None or not term.strip():
        return SearchOutcome(status=SearchStatus.NO_TERM, message=NO_TERM_MESSAGE)

    needle = term.lower()
    matches = tuple(r for r in registrants if needle in r.full_name.lower())
    if not matches:
        return SearchOutcome(
            status=SearchStatus.NOT_FOUND,
            message=f'Participant "{term}" not found.',
        )
    return SearchOutcome(
        status=SearchStatus.FOUND,
        matches=matches,
        message=f"Found {len(matches)} participant(s):",
    )
