# utils/field_activity/constants.py
"""
Constants for Field Activity Module

Centralized configuration for:
- Activity vocabulary and sales categories
- Role definitions
- Query defaults and sort columns
- Commission tiers
- Color schemes and chart settings
"""

# =====================================================================
# ACTIVITY VOCABULARY
# =====================================================================

NOT_HOME = 'Not Home'
SOLD = 'Sold'
NO_SOLICITING = 'No Soliciting'
MOSQUITO_SALE = 'Mosquito Sale'
TREE_AND_SHRUB_SALE = 'Tree and Shrub Sale'

ACTIVITY_TYPES = [
    NOT_HOME,
    SOLD,
    NO_SOLICITING,
    MOSQUITO_SALE,
    TREE_AND_SHRUB_SALE,
]

# Each occurrence of these tags counts toward special sales
SPECIAL_SALES_ACTIVITIES = frozenset([MOSQUITO_SALE, TREE_AND_SHRUB_SALE])

# Sentinel for "no activity filter"
ALL_ACTIVITIES = 'All'

ACTIVITY_FILTER_OPTIONS = [ALL_ACTIVITIES] + ACTIVITY_TYPES

# =====================================================================
# LEADERBOARD
# =====================================================================

TOP_SALESMEN_LIMIT = 10

# Display placeholder when nobody has logged anything yet
NO_LEADER_EMAIL = 'N/A'

# =====================================================================
# QUERY STATE
# =====================================================================

SORT_LOGGED_AT = 'logged_at'
SORT_USER_EMAIL = 'user_email'
SORT_COLUMNS = [SORT_LOGGED_AT, SORT_USER_EMAIL]

SORT_ASC = 'asc'
SORT_DESC = 'desc'

# =====================================================================
# ROLE DEFINITIONS
# =====================================================================

USER_ROLES = ['rep', 'manager', 'admin', 'trainee']

DEFAULT_ROLE = 'rep'

# Only admins may open the role editor
USER_ADMIN_ROLES = ['admin']

NAME_ABBREVIATION_MAX_LENGTH = 3

# =====================================================================
# COMMISSION
# =====================================================================

# (revenue threshold in USD, commission rate), ascending
COMMISSION_TIERS = [
    (3000, 0.03),
    (4000, 0.04),
    (5000, 0.05),
    (6000, 0.06),
    (7000, 0.07),
    (8000, 0.08),
    (9000, 0.09),
]

PAYMENT_EZPAY = 'Ezpay'
PAYMENT_PREPAY = 'Prepay'
PAYMENT_TYPES = [PAYMENT_EZPAY, PAYMENT_PREPAY]

# (minimum prepay share in percent, bonus rate), checked top-down
PREPAY_BONUS_STEPS = [
    (40, 0.03),
    (25, 0.02),
]

# =====================================================================
# COLOR SCHEME
# =====================================================================

COLORS = {
    "sold": "#2ca02c",                 # Green
    "special": "#FFA500",              # Orange
    "not_home": "#aec7e8",             # Light Blue
    "no_soliciting": "#d62728",        # Red
    "podium": "#FACC15",               # Gold (top 3)
    "rank": "#E5E7EB",                 # Gray
    "text_dark": "#333333",
    "text_light": "#666666",
}

ACTIVITY_COLORS = {
    NOT_HOME: COLORS["not_home"],
    SOLD: COLORS["sold"],
    NO_SOLICITING: COLORS["no_soliciting"],
    MOSQUITO_SALE: COLORS["special"],
    TREE_AND_SHRUB_SALE: "#8c564b",
}

ROLE_BADGES = {
    'admin': '🔴',
    'manager': '🟡',
}

# =====================================================================
# CHART DIMENSIONS
# =====================================================================

CHART_HEIGHT = 360

# =====================================================================
# EXCEL EXPORT
# =====================================================================

EXCEL_STYLES = {
    "header_fill_color": "1f77b4",
    "header_font_color": "FFFFFF",
    "datetime_format": 'YYYY-MM-DD HH:MM',
}
