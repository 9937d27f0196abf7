# utils/auth.py
"""
Sign-in and Session Handling

Salespeople sign in with their e-mail and password from the ``users``
table. Their role and team come from ``user_roles``; anyone without a
role row is a rep. Session keys set on login:

    authenticated, user_id, user_email, user_role,
    user_team, user_fullname, login_time

Sessions expire after SESSION_TIMEOUT_HOURS.
"""

import streamlit as st
import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple, List
import logging
from sqlalchemy.exc import SQLAlchemyError
from .db import execute_query, execute_update
from .config import config
from .field_activity.queries import ActivityQueries

logger = logging.getLogger(__name__)

LOGIN_QUERY = """
    SELECT
        u.id,
        u.email,
        u.password_hash,
        u.password_salt,
        u.is_active,
        r.team,
        r.first_name,
        r.last_name
    FROM users u
    LEFT JOIN user_roles r ON r.user_id = u.id
    WHERE LOWER(u.email) = LOWER(:email)
"""

USER_SESSION_KEYS = [
    'authenticated', 'user_id', 'user_email', 'user_role',
    'user_team', 'user_fullname', 'login_time',
]

# Loaded snapshots and widget state that belong to the signed-in user
DATA_SESSION_KEYS = [
    'activity_logs', 'activity_analysis', 'activity_counts', 'query_state',
    'activity_search', 'activity_filter',
    'user_roles', 'user_search', 'commission_sales',
]

INVALID_LOGIN = "Invalid email or password"


class AuthManager:
    """
    Login, logout and page guards for the Streamlit session.

    Usage:
        auth = AuthManager()

        ok, result = auth.authenticate(email, password)
        if ok:
            auth.login(result)

        auth.require_role(['admin'])
    """

    def __init__(self):
        self.session_timeout = timedelta(
            hours=config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        )

    # ==================== PASSWORDS ====================

    def hash_password(self, password: str, salt: str = None) -> Tuple[str, str]:
        """
        SHA256 of password + salt.

        Returns:
            (hex digest, salt); a fresh salt is generated when none is given
        """
        salt = salt or secrets.token_hex(32)
        return hashlib.sha256((password + salt).encode()).hexdigest(), salt

    def verify_password(self, password: str, stored_hash: str, salt: str) -> bool:
        candidate, _ = self.hash_password(password, salt)
        return secrets.compare_digest(candidate, stored_hash or '')

    # ==================== LOGIN ====================

    def authenticate(self, email: str, password: str) -> Tuple[bool, Dict]:
        """
        Check credentials against the users table.

        Args:
            email: Address as typed; matched case-insensitively
            password: Plain text password

        Returns:
            (True, user info) or (False, {"error": message})
        """
        email = (email or '').strip()

        try:
            rows = execute_query(LOGIN_QUERY, {'email': email})
        except SQLAlchemyError as e:
            logger.error(f"Login query failed for {email}: {e}")
            return False, {"error": "Sign in failed. Please try again."}

        if not rows:
            logger.warning(f"Sign in attempt for unknown e-mail: {email}")
            return False, {"error": INVALID_LOGIN}

        user = rows[0]

        if not user['is_active']:
            logger.warning(f"Sign in attempt for inactive account: {email}")
            return False, {"error": "Account is inactive. Please contact your manager."}

        if not self.verify_password(password, user['password_hash'], user['password_salt']):
            logger.warning(f"Wrong password for {email}")
            return False, {"error": INVALID_LOGIN}

        self._touch_last_login(user['id'])

        name = ' '.join(p for p in (user.get('first_name'), user.get('last_name')) if p)
        role = ActivityQueries().get_user_role(user['id'])
        logger.info(f"{email} signed in as {role}")

        return True, {
            'id': user['id'],
            'email': user['email'],
            'role': role,
            'team': user.get('team'),
            'full_name': name or user['email'],
            'login_time': datetime.now(),
        }

    def _touch_last_login(self, user_id):
        try:
            execute_update(
                "UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = :user_id",
                {'user_id': user_id}
            )
        except SQLAlchemyError as e:
            # Not worth failing a sign in over
            logger.warning(f"last_login not updated for {user_id}: {e}")

    # ==================== SESSION ====================

    def check_session(self) -> bool:
        """True while signed in and within the session timeout."""
        if not st.session_state.get('authenticated'):
            return False

        login_time = st.session_state.get('login_time')
        if login_time and datetime.now() - login_time > self.session_timeout:
            logger.info(f"Session timed out for {st.session_state.get('user_email')}")
            self.logout()
            return False

        return True

    def login(self, user_info: Dict):
        st.session_state.authenticated = True
        st.session_state.user_id = user_info['id']
        st.session_state.user_email = user_info['email']
        st.session_state.user_role = user_info['role']
        st.session_state.user_team = user_info.get('team')
        st.session_state.user_fullname = user_info['full_name']
        st.session_state.login_time = user_info['login_time']

    def logout(self):
        """Forget the user and everything loaded for them."""
        email = st.session_state.get('user_email', 'Unknown')

        for key in USER_SESSION_KEYS + DATA_SESSION_KEYS:
            st.session_state.pop(key, None)

        logger.info(f"{email} signed out")

    # ==================== PAGE GUARDS ====================

    def require_auth(self) -> bool:
        """Stop the page unless signed in."""
        if not self.check_session():
            st.warning("⚠️ Please login to access this page")
            st.stop()
            return False
        return True

    def require_role(self, allowed_roles: List[str]) -> bool:
        """
        Stop the page unless the user's role is allowed.

        Usage:
            auth.require_role(['admin'])
        """
        if not self.require_auth():
            return False

        role = st.session_state.get('user_role', '')
        if role not in allowed_roles:
            logger.warning(f"{st.session_state.get('user_email')} ({role}) denied, needs {allowed_roles}")
            st.error("🚫 You do not have permission to view this page.")
            st.stop()
            return False

        return True

    def is_admin(self) -> bool:
        return st.session_state.get('user_role') == 'admin'

    # ==================== USER INFO ====================

    def get_user_display_name(self) -> str:
        return st.session_state.get('user_fullname') or st.session_state.get('user_email', 'User')

    def get_user_id(self) -> Optional[str]:
        return st.session_state.get('user_id')


__all__ = ['AuthManager']
