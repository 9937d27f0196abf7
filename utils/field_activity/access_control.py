# utils/field_activity/access_control.py
"""
Role-based Access Control for Field Activity

- admin: dashboard + role editor for their team
- manager / rep / trainee: dashboard only

A user without a user_roles row (or with an unknown role) is treated as
a rep.
"""

import logging
from typing import Optional

from .constants import DEFAULT_ROLE, USER_ADMIN_ROLES, USER_ROLES

logger = logging.getLogger(__name__)


def resolve_role(raw_role: Optional[str]) -> str:
    """Normalize a stored role, falling back to the default rep role."""
    role = (raw_role or '').strip().lower()
    if role not in USER_ROLES:
        if raw_role:
            logger.warning(f"Unknown role '{raw_role}', using '{DEFAULT_ROLE}'")
        return DEFAULT_ROLE
    return role


class AccessControl:
    """
    Page-level permissions for the signed-in user.

    Usage:
        access = AccessControl(user_role=st.session_state.user_role)

        if access.can_manage_users():
            ...
    """

    def __init__(self, user_role: Optional[str]):
        self.user_role = resolve_role(user_role)

    def can_manage_users(self) -> bool:
        return can_manage_users(self.user_role)

    def get_access_label(self) -> str:
        if self.can_manage_users():
            return "🔓 Admin Access"
        return "👤 Rep Access" if self.user_role in ('rep', 'trainee') else "👥 Manager Access"


def can_manage_users(role: Optional[str]) -> bool:
    """Only admins may edit role records."""
    return resolve_role(role) in USER_ADMIN_ROLES
