# utils/field_activity/queries.py
"""
SQL Queries and Data Loading for Field Activity

Handles all database interactions:
- Activity logs from activity_logs (newest first)
- Role records from user_roles, optionally scoped to a team
- Full-record role updates
- Session role lookup

Rows are validated into typed records here. Malformed rows are logged and
skipped; database failures raise FetchError / UpdateError so callers can
keep whatever they loaded before.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from utils.db import get_db_engine
from .access_control import resolve_role
from .constants import NAME_ABBREVIATION_MAX_LENGTH, USER_ROLES
from .exceptions import FetchError, MalformedRecord, UpdateError
from .models import ActivityLog, UserRoleRecord

logger = logging.getLogger(__name__)


ACTIVITY_LOGS_QUERY = """
    SELECT
        id,
        user_id,
        user_email,
        activity_type,
        logged_at
    FROM activity_logs
    ORDER BY logged_at DESC
"""

USER_ROLES_QUERY = """
    SELECT
        id,
        user_id,
        first_name,
        last_name,
        role,
        team,
        name_abreviation
    FROM user_roles
"""


class ActivityQueries:
    """
    Data loading class for the field activity dashboard.

    Usage:
        queries = ActivityQueries()

        logs = queries.fetch_activity_logs()
        team = queries.fetch_team_for_user(user_id)
        users = queries.fetch_user_roles(team=team)
        saved = queries.update_user_role(edited)
    """

    def __init__(self, engine=None):
        self._engine = engine

    @property
    def engine(self):
        """Lazy load database engine."""
        if self._engine is None:
            self._engine = get_db_engine()
        return self._engine

    # =========================================================================
    # ACTIVITY LOGS
    # =========================================================================

    def fetch_activity_logs(self) -> List[ActivityLog]:
        """
        Load every activity log, newest first.

        Returns:
            List of ActivityLog (empty when the table is empty)

        Raises:
            FetchError: if the database query fails
        """
        rows = self._fetch_rows(ACTIVITY_LOGS_QUERY, {}, "activity_logs")

        logs = []
        for row in rows:
            try:
                logs.append(ActivityLog.from_record(row))
            except MalformedRecord as e:
                logger.warning(f"Skipping malformed activity log: {e}")

        logger.info(f"Loaded {len(logs)} activity logs ({len(rows) - len(logs)} skipped)")
        return logs

    # =========================================================================
    # USER ROLES
    # =========================================================================

    def fetch_user_roles(self, team: Optional[str] = None) -> List[UserRoleRecord]:
        """
        Load role records, optionally only those of one team.

        Raises:
            FetchError: if the database query fails
        """
        query = USER_ROLES_QUERY
        params: Dict[str, Any] = {}

        if team is not None:
            query += " WHERE team = :team"
            params['team'] = team

        query += " ORDER BY last_name, first_name"

        rows = self._fetch_rows(query, params, "user_roles")

        records = []
        for row in rows:
            try:
                records.append(UserRoleRecord.from_record(row))
            except MalformedRecord as e:
                logger.warning(f"Skipping malformed user role: {e}")

        logger.info(f"Loaded {len(records)} user roles (team={team})")
        return records

    def fetch_team_for_user(self, user_id: Any) -> str:
        """
        Team of the signed-in user, used to scope the role list.

        Raises:
            FetchError: if the lookup fails or the user has no team
        """
        rows = self._fetch_rows(
            "SELECT team FROM user_roles WHERE user_id = :user_id",
            {'user_id': user_id},
            "user_team"
        )

        team = rows[0].get('team') if rows else None
        if not team:
            logger.error(f"Could not determine team for user {user_id}")
            raise FetchError("Could not determine logged-in user team.")

        return team

    def get_user_role(self, user_id: Any) -> str:
        """Role for the session; 'rep' when missing or on lookup failure."""
        try:
            rows = self._fetch_rows(
                "SELECT role FROM user_roles WHERE user_id = :user_id",
                {'user_id': user_id},
                "user_role"
            )
        except FetchError as e:
            logger.error(f"Error fetching user role, defaulting: {e}")
            return resolve_role(None)

        return resolve_role(rows[0].get('role') if rows else None)

    def update_user_role(self, record: UserRoleRecord) -> UserRoleRecord:
        """
        Persist every editable column of ``record`` and return the stored row.

        Callers should replace their local copy with the returned record.

        Raises:
            UpdateError: invalid role/abbreviation, missing row, or database failure
        """
        if record.role not in USER_ROLES:
            raise UpdateError(f"Invalid role: {record.role}")

        abbreviation = record.name_abbreviation or ''
        if len(abbreviation) > NAME_ABBREVIATION_MAX_LENGTH:
            raise UpdateError(
                f"Name abbreviation must be at most {NAME_ABBREVIATION_MAX_LENGTH} characters"
            )

        update = text("""
            UPDATE user_roles
            SET first_name = :first_name,
                last_name = :last_name,
                role = :role,
                team = :team,
                name_abreviation = :name_abreviation
            WHERE id = :id
        """)
        select = text(USER_ROLES_QUERY + " WHERE id = :id")

        try:
            with self.engine.begin() as conn:
                conn.execute(update, record.to_update_params())
                row = conn.execute(select, {'id': record.id}).mappings().first()
        except SQLAlchemyError as e:
            logger.error(f"Error updating user role {record.id}: {e}")
            raise UpdateError(f"Failed to save user role: {e}") from e

        if row is None:
            logger.warning(f"User role {record.id} not found for update")
            raise UpdateError(f"User role {record.id} not found")

        try:
            saved = UserRoleRecord.from_record(dict(row))
        except MalformedRecord as e:
            raise UpdateError(str(e)) from e

        logger.info(f"User role {saved.id} updated (role={saved.role}, team={saved.team})")
        return saved

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _fetch_rows(
        self,
        query: str,
        params: dict,
        query_name: str = "query"
    ) -> List[Dict[str, Any]]:
        """
        Execute a SELECT and return rows as dicts.

        Raises:
            FetchError: wrapping any SQLAlchemy error
        """
        try:
            logger.debug(f"Executing {query_name}")
            with self.engine.connect() as conn:
                result = conn.execute(text(query), params)
                rows = [dict(row) for row in result.mappings()]
            logger.debug(f"{query_name} returned {len(rows)} rows")
            return rows
        except SQLAlchemyError as e:
            logger.error(f"Error executing {query_name}: {e}")
            raise FetchError(f"Failed to load {query_name}: {e}") from e
