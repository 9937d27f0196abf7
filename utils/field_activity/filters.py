# utils/field_activity/filters.py
"""
Search, Filter and Sort for Field Activity

Pure functions over in-memory snapshots:
- query(): activity table view (email search + activity tag filter + sort)
- toggle_sort(): header-click state transition
- search_user_roles(): role directory search
- replace_user_role(): swap in the persisted copy of an edited record

Inputs are never mutated; every function returns a new list or state.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Sequence

from .constants import (
    ALL_ACTIVITIES,
    SORT_ASC,
    SORT_DESC,
    SORT_LOGGED_AT,
    SORT_USER_EMAIL,
)
from .models import ActivityLog, QueryState, UserRoleRecord

logger = logging.getLogger(__name__)

# Unparseable timestamps sort below every real one
_LOWEST_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


# =============================================================================
# ACTIVITY TABLE
# =============================================================================

def _matches(log: ActivityLog, term: str, activity: str) -> bool:
    if term not in log.user_email.lower():
        return False
    return activity == ALL_ACTIVITIES or log.has_activity(activity)


_SORT_KEYS: Dict[str, Callable[[ActivityLog], object]] = {
    SORT_LOGGED_AT: lambda log: log.logged_at or _LOWEST_TIMESTAMP,
    SORT_USER_EMAIL: lambda log: log.user_email.lower(),
}


def query(logs: Sequence[ActivityLog], state: QueryState) -> List[ActivityLog]:
    """
    Filter and sort the activity table.

    A log is kept when its email contains the search term (case-insensitive,
    empty term matches everything) and, unless the filter is "All", its tags
    include the selected activity exactly.

    Sorting is stable in both directions: logs with equal keys stay in input
    order. An unknown sort column leaves the filtered order as is.
    """
    term = state.search_term.lower()
    filtered = [log for log in logs if _matches(log, term, state.filter_activity)]

    key = _SORT_KEYS.get(state.sort_column)
    if key is None:
        return filtered

    return sorted(filtered, key=key, reverse=state.sort_direction == SORT_DESC)


def toggle_sort(state: QueryState, column: str) -> QueryState:
    """
    Apply a click on a sortable column header.

    Same column flips the direction. A new column starts descending for
    logged_at (newest first) and ascending otherwise.
    """
    if column == state.sort_column:
        direction = SORT_ASC if state.sort_direction == SORT_DESC else SORT_DESC
        return replace(state, sort_direction=direction)

    direction = SORT_DESC if column == SORT_LOGGED_AT else SORT_ASC
    return replace(state, sort_column=column, sort_direction=direction)


def sort_indicator(state: QueryState, column: str) -> str:
    """Arrow for a column header, empty when the column is not sorted."""
    if state.sort_column != column:
        return ''
    return '▲' if state.sort_direction == SORT_ASC else '▼'


# =============================================================================
# ROLE DIRECTORY
# =============================================================================

def search_user_roles(records: Sequence[UserRoleRecord], term: str) -> List[UserRoleRecord]:
    """Case-insensitive match on first name, last name, team or role."""
    if not term:
        return list(records)

    needle = term.lower()

    def matches(record: UserRoleRecord) -> bool:
        fields = (record.first_name, record.last_name, record.team, record.role)
        return any(value is not None and needle in value.lower() for value in fields)

    return [r for r in records if matches(r)]


def replace_user_role(records: Sequence[UserRoleRecord], saved: UserRoleRecord) -> List[UserRoleRecord]:
    """Return a copy of ``records`` with the entry for ``saved.id`` replaced."""
    return [saved if r.id == saved.id else r for r in records]
