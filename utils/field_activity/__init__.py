# utils/field_activity/__init__.py
"""
Field Activity Module

Utilities for the field sales activity dashboard.

Components:
- models: Typed records + validation of raw store rows
- metrics: Special sales leader and top salesmen rankings
- filters: Activity table search/filter/sort, role directory search
- queries: Loading logs and role records, persisting role edits
- access_control: Role gating (admin-only role editor)
- commission: Tiered commission calculator
- charts: Altair visualizations
- export: Formatted Excel report generation

Usage:
    from utils.field_activity import (
        ActivityQueries,
        ActivityMetrics,
        QueryState,
        aggregate,
        query,
        toggle_sort,
    )
"""

from .models import (
    ActivityLog,
    SalesmanSummary,
    SalesAnalysis,
    QueryState,
    UserRoleRecord,
)
from .exceptions import (
    FieldActivityError,
    FetchError,
    UpdateError,
    MalformedRecord,
)
from .metrics import ActivityMetrics, aggregate, summaries_frame
from .filters import (
    query,
    toggle_sort,
    search_user_roles,
    replace_user_role,
)
from .access_control import AccessControl, resolve_role, can_manage_users
from .queries import ActivityQueries
from .charts import ActivityCharts
from .export import ActivityExport

# Constants
from .constants import (
    ACTIVITY_TYPES,
    ALL_ACTIVITIES,
    SPECIAL_SALES_ACTIVITIES,
    USER_ROLES,
    SORT_LOGGED_AT,
    SORT_USER_EMAIL,
)

__all__ = [
    # Models
    'ActivityLog',
    'SalesmanSummary',
    'SalesAnalysis',
    'QueryState',
    'UserRoleRecord',

    # Errors
    'FieldActivityError',
    'FetchError',
    'UpdateError',
    'MalformedRecord',

    # Core
    'ActivityMetrics',
    'aggregate',
    'summaries_frame',
    'query',
    'toggle_sort',
    'search_user_roles',
    'replace_user_role',

    # Classes
    'AccessControl',
    'resolve_role',
    'can_manage_users',
    'ActivityQueries',
    'ActivityCharts',
    'ActivityExport',

    # Constants
    'ACTIVITY_TYPES',
    'ALL_ACTIVITIES',
    'SPECIAL_SALES_ACTIVITIES',
    'USER_ROLES',
    'SORT_LOGGED_AT',
    'SORT_USER_EMAIL',
]

__version__ = '1.0.0'
