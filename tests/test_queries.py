"""Tests for the data layer against an in-memory SQLite store."""

import json
from datetime import datetime, timezone

import pytest
from sqlalchemy import text

from utils.field_activity.exceptions import FetchError, UpdateError
from utils.field_activity.models import UserRoleRecord
from utils.field_activity.queries import ActivityQueries


def insert_logs(engine, rows):
    with engine.begin() as conn:
        conn.execute(
            text("""
                INSERT INTO activity_logs (id, user_id, user_email, activity_type, logged_at)
                VALUES (:id, :user_id, :user_email, :activity_type, :logged_at)
            """),
            rows,
        )


class TestFetchActivityLogs:

    def test_loads_newest_first(self, engine):
        insert_logs(engine, [
            {'id': 1, 'user_id': 'u1', 'user_email': 'a@x.com',
             'activity_type': json.dumps(['Sold']), 'logged_at': '2024-05-01 09:00:00'},
            {'id': 2, 'user_id': 'u2', 'user_email': 'b@x.com',
             'activity_type': json.dumps(['Not Home', 'Mosquito Sale']), 'logged_at': '2024-05-02 09:00:00'},
        ])

        logs = ActivityQueries(engine).fetch_activity_logs()

        assert [log.id for log in logs] == [2, 1]
        assert logs[0].activity_types == ('Not Home', 'Mosquito Sale')
        assert logs[1].logged_at == datetime(2024, 5, 1, 9, tzinfo=timezone.utc)

    def test_malformed_rows_skipped(self, engine):
        insert_logs(engine, [
            {'id': 1, 'user_id': 'u1', 'user_email': None,
             'activity_type': '["Sold"]', 'logged_at': '2024-05-01 09:00:00'},
            {'id': 2, 'user_id': 'u2', 'user_email': 'b@x.com',
             'activity_type': 'garbage', 'logged_at': 'not a date'},
        ])

        logs = ActivityQueries(engine).fetch_activity_logs()

        assert [log.id for log in logs] == [2]
        assert logs[0].activity_types == ()
        assert logs[0].logged_at is None

    def test_empty_table(self, engine):
        assert ActivityQueries(engine).fetch_activity_logs() == []

    def test_database_failure_raises_fetch_error(self, engine):
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE activity_logs"))

        with pytest.raises(FetchError):
            ActivityQueries(engine).fetch_activity_logs()


class TestUserRoles:

    def test_fetch_scoped_to_team(self, engine, seed_roles):
        records = ActivityQueries(engine).fetch_user_roles(team='North')

        # ordered by last name
        assert [r.last_name for r in records] == ['Cruz', 'Lane']
        assert records[1].name_abbreviation == 'ADL'

    def test_fetch_all_teams(self, engine, seed_roles):
        assert len(ActivityQueries(engine).fetch_user_roles()) == 4

    def test_team_for_user(self, engine, seed_roles):
        assert ActivityQueries(engine).fetch_team_for_user('u-admin') == 'North'

    @pytest.mark.parametrize("user_id", ['u-noteam', 'u-missing'])
    def test_team_for_user_missing(self, engine, seed_roles, user_id):
        with pytest.raises(FetchError, match="Could not determine logged-in user team."):
            ActivityQueries(engine).fetch_team_for_user(user_id)

    def test_get_user_role(self, engine, seed_roles):
        queries = ActivityQueries(engine)
        assert queries.get_user_role('u-south') == 'manager'
        assert queries.get_user_role('u-missing') == 'rep'

    def test_get_user_role_defaults_on_failure(self, engine):
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE user_roles"))
        assert ActivityQueries(engine).get_user_role('u-admin') == 'rep'


class TestUpdateUserRole:

    def test_update_returns_stored_record(self, engine, seed_roles):
        queries = ActivityQueries(engine)
        edited = UserRoleRecord(
            id=2, user_id='u-rep', first_name='Bo', last_name='Cruz',
            role='manager', team='South', name_abbreviation='BOC',
        )

        saved = queries.update_user_role(edited)

        assert saved == edited
        reloaded = queries.fetch_user_roles(team='South')
        assert sorted(r.id for r in reloaded) == [2, 3]

    def test_invalid_role_rejected(self, engine, seed_roles):
        with pytest.raises(UpdateError, match="Invalid role"):
            ActivityQueries(engine).update_user_role(UserRoleRecord(id=2, role='boss'))

        assert ActivityQueries(engine).get_user_role('u-rep') == 'rep'

    def test_long_abbreviation_rejected(self, engine, seed_roles):
        record = UserRoleRecord(id=2, role='rep', name_abbreviation='ABCD')
        with pytest.raises(UpdateError):
            ActivityQueries(engine).update_user_role(record)

    def test_missing_record(self, engine, seed_roles):
        with pytest.raises(UpdateError, match="not found"):
            ActivityQueries(engine).update_user_role(UserRoleRecord(id=99, role='rep'))
