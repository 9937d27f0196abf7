"""Tests for password hashing and e-mail login."""

from types import SimpleNamespace

import pytest
from sqlalchemy import text

import utils.auth
from utils.auth import AuthManager
from utils.field_activity.queries import ActivityQueries


@pytest.fixture
def auth():
    return AuthManager()


@pytest.fixture
def seed_users(engine, seed_roles, auth):
    pwd_hash, salt = auth.hash_password("secret123")
    with engine.begin() as conn:
        conn.execute(
            text("""
                INSERT INTO users (id, email, password_hash, password_salt, is_active)
                VALUES (:id, :email, :password_hash, :password_salt, :is_active)
            """),
            [
                {'id': 'u-admin', 'email': 'ada@field.com', 'password_hash': pwd_hash,
                 'password_salt': salt, 'is_active': 1},
                {'id': 'u-gone', 'email': 'gone@field.com', 'password_hash': pwd_hash,
                 'password_salt': salt, 'is_active': 0},
                {'id': 'u-norole', 'email': 'new@field.com', 'password_hash': pwd_hash,
                 'password_salt': salt, 'is_active': 1},
            ],
        )


def test_hash_and_verify(auth):
    pwd_hash, salt = auth.hash_password("pw")

    assert auth.verify_password("pw", pwd_hash, salt)
    assert not auth.verify_password("wrong", pwd_hash, salt)
    assert auth.hash_password("pw", salt)[0] == pwd_hash


def test_authenticate_success(auth, seed_users, engine):
    ok, info = auth.authenticate("ADA@field.com ", "secret123")

    assert ok
    assert info['id'] == 'u-admin'
    assert info['role'] == 'admin'
    assert info['team'] == 'North'
    assert info['full_name'] == 'Ada Lane'

    with engine.connect() as conn:
        last_login = conn.execute(text("SELECT last_login FROM users WHERE id = 'u-admin'")).scalar()
    assert last_login is not None


def test_user_without_role_row_is_rep(auth, seed_users):
    ok, info = auth.authenticate("new@field.com", "secret123")

    assert ok
    assert info['role'] == 'rep'
    assert info['full_name'] == 'new@field.com'


@pytest.mark.parametrize("email, password, message", [
    ("ada@field.com", "nope", "Invalid email or password"),
    ("nobody@field.com", "secret123", "Invalid email or password"),
    ("gone@field.com", "secret123", "Account is inactive"),
])
def test_authenticate_failures(auth, seed_users, email, password, message):
    ok, result = auth.authenticate(email, password)

    assert not ok
    assert message in result['error']


def test_sign_in_role_comes_from_role_lookup(auth, seed_users, monkeypatch):
    calls = []

    def fake_lookup(self, user_id):
        calls.append(user_id)
        return 'manager'

    monkeypatch.setattr(ActivityQueries, 'get_user_role', fake_lookup)

    ok, info = auth.authenticate("ada@field.com", "secret123")

    assert ok
    assert calls == ['u-admin']
    assert info['role'] == 'manager'


def test_unknown_stored_role_signs_in_as_rep(auth, seed_users, engine):
    with engine.begin() as conn:
        conn.execute(text("UPDATE user_roles SET role = 'overlord' WHERE user_id = 'u-admin'"))

    ok, info = auth.authenticate("ada@field.com", "secret123")

    assert ok
    assert info['role'] == 'rep'
    assert info['team'] == 'North'


class _SessionState(dict):
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        self[name] = value


def test_logout_clears_user_and_loaded_data(auth, monkeypatch):
    # Only session state is available, so any other streamlit call would fail
    fake_st = SimpleNamespace(session_state=_SessionState(
        authenticated=True,
        user_id='u-admin',
        user_email='ada@field.com',
        user_role='admin',
        activity_logs=[],
        query_state=object(),
        user_roles=[],
        commission_sales=[],
        unrelated='kept',
    ))
    monkeypatch.setattr(utils.auth, 'st', fake_st)

    auth.logout()

    assert dict(fake_st.session_state) == {'unrelated': 'kept'}
