# utils/field_activity/models.py
"""
Typed records for the field activity dashboard.

Rows arrive from the store as loosely-typed mappings. The ``from_record``
constructors here are the validation boundary: once a record has been
built, the aggregation and query code can rely on its field types.

Coercion rules:
- ``activity_type`` that is missing, not a list, or not decodable degrades
  to an empty tuple. Non-string tags are dropped. Order and duplicates are
  kept.
- ``logged_at`` is parsed to a timezone-aware datetime (naive values are
  taken as UTC, numbers as epoch seconds). Unparseable values become
  ``None``.
- A log without ``id`` or ``user_email`` raises ``MalformedRecord``.
"""

import json
import numbers
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from .constants import (
    ALL_ACTIVITIES,
    NAME_ABBREVIATION_MAX_LENGTH,
    NO_LEADER_EMAIL,
    SORT_DESC,
    SORT_LOGGED_AT,
)
from .exceptions import MalformedRecord

logger = logging.getLogger(__name__)


# =============================================================================
# COERCION HELPERS
# =============================================================================

def coerce_activity_types(value: Any) -> Tuple[str, ...]:
    """Normalize a raw ``activity_type`` value to an ordered tuple of tags."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return ()

    if not isinstance(value, (list, tuple)):
        return ()

    return tuple(tag for tag in value if isinstance(tag, str))


def parse_logged_at(value: Any) -> Optional[datetime]:
    """Parse a raw timestamp to an aware datetime, or None when unparseable."""
    if value is None:
        return None

    if isinstance(value, datetime) and not isinstance(value, pd.Timestamp):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    if isinstance(value, bool):
        return None

    # Numbers are epoch seconds
    unit = 's' if isinstance(value, numbers.Real) else None

    try:
        parsed = pd.to_datetime(value, utc=True, errors='coerce', unit=unit)
    except (TypeError, ValueError):
        return None

    if not isinstance(parsed, pd.Timestamp) or pd.isna(parsed):
        return None

    return parsed.to_pydatetime()


def _clean_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


# =============================================================================
# ACTIVITY LOG
# =============================================================================

@dataclass(frozen=True)
class ActivityLog:
    """One field visit logged by a salesperson."""
    id: Any
    user_id: Any
    user_email: str
    activity_types: Tuple[str, ...] = ()
    logged_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'ActivityLog':
        """
        Build from an ``activity_logs`` row.

        Raises:
            MalformedRecord: if ``id`` or ``user_email`` is missing
        """
        log_id = record.get('id')
        if log_id is None:
            raise MalformedRecord("Activity log has no id", dict(record))

        email = record.get('user_email')
        if not isinstance(email, str) or not email.strip():
            raise MalformedRecord(f"Activity log {log_id} has no user_email", dict(record))

        return cls(
            id=log_id,
            user_id=record.get('user_id'),
            user_email=email,
            activity_types=coerce_activity_types(record.get('activity_type')),
            logged_at=parse_logged_at(record.get('logged_at')),
        )

    def has_activity(self, activity: str) -> bool:
        return activity in self.activity_types

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'user_email': self.user_email,
            'activity_type': list(self.activity_types),
            'logged_at': self.logged_at,
        }


# =============================================================================
# AGGREGATION RESULTS
# =============================================================================

@dataclass(frozen=True)
class SalesmanSummary:
    """Per-email sales totals."""
    email: str
    user_id: Any = None
    overall_sales: int = 0
    special_sales: int = 0

    @classmethod
    def placeholder(cls) -> 'SalesmanSummary':
        """Leader shown when there are no logs at all."""
        return cls(email=NO_LEADER_EMAIL, overall_sales=0, special_sales=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'email': self.email,
            'user_id': self.user_id,
            'overall_sales': self.overall_sales,
            'special_sales': self.special_sales,
        }


@dataclass(frozen=True)
class SalesAnalysis:
    """Special-sales leader plus the top overall salesmen."""
    leader: SalesmanSummary
    top_ten: List[SalesmanSummary] = field(default_factory=list)


# =============================================================================
# QUERY STATE
# =============================================================================

@dataclass(frozen=True)
class QueryState:
    """
    Search/filter/sort settings for the activity table.

    ``search_term`` is stripped on construction.
    """
    search_term: str = ''
    filter_activity: str = ALL_ACTIVITIES
    sort_column: str = SORT_LOGGED_AT
    sort_direction: str = SORT_DESC

    def __post_init__(self):
        object.__setattr__(self, 'search_term', (self.search_term or '').strip())

    def with_search(self, term: str) -> 'QueryState':
        return replace(self, search_term=term or '')

    def with_activity(self, activity: str) -> 'QueryState':
        return replace(self, filter_activity=activity or ALL_ACTIVITIES)


# =============================================================================
# USER ROLES
# =============================================================================

@dataclass(frozen=True)
class UserRoleRecord:
    """A row of ``user_roles``. Replaced whole on update."""
    id: Any
    user_id: Any = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    team: Optional[str] = None
    name_abbreviation: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'UserRoleRecord':
        """
        Build from a ``user_roles`` row.

        The store spells the abbreviation column ``name_abreviation``;
        values longer than three characters are truncated.

        Raises:
            MalformedRecord: if ``id`` is missing
        """
        record_id = record.get('id')
        if record_id is None:
            raise MalformedRecord("User role record has no id", dict(record))

        abbreviation = _clean_optional_str(record.get('name_abreviation'))
        if abbreviation is not None and len(abbreviation) > NAME_ABBREVIATION_MAX_LENGTH:
            logger.warning(f"Truncating name abbreviation for user role {record_id}")
            abbreviation = abbreviation[:NAME_ABBREVIATION_MAX_LENGTH]

        return cls(
            id=record_id,
            user_id=record.get('user_id'),
            first_name=_clean_optional_str(record.get('first_name')),
            last_name=_clean_optional_str(record.get('last_name')),
            role=_clean_optional_str(record.get('role')),
            team=_clean_optional_str(record.get('team')),
            name_abbreviation=abbreviation,
        )

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return ' '.join(parts)

    def to_update_params(self) -> Dict[str, Any]:
        """Bind parameters for the full-record update, keyed by store column."""
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'role': self.role,
            'team': self.team,
            'name_abreviation': self.name_abbreviation,
        }
