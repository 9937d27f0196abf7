# utils/field_activity/fragments.py
"""
Streamlit Fragments for Field Activity

Uses @st.fragment so the activity table reruns on its own widgets
(search, activity filter, sort headers) without re-rendering the
leaderboard above it.

Session keys:
- query_state: QueryState for the activity table
- user_roles: list[UserRoleRecord] shown in the role editor
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Sequence

import pandas as pd
import streamlit as st

from .charts import ActivityCharts
from .constants import (
    ACTIVITY_FILTER_OPTIONS,
    ROLE_BADGES,
    SORT_LOGGED_AT,
    SORT_USER_EMAIL,
    USER_ROLES,
    NAME_ABBREVIATION_MAX_LENGTH,
)
from .exceptions import UpdateError
from .export import ActivityExport
from .filters import query, replace_user_role, search_user_roles, sort_indicator, toggle_sort
from .models import ActivityLog, QueryState, SalesAnalysis, UserRoleRecord
from .queries import ActivityQueries

logger = logging.getLogger(__name__)


def get_query_state() -> QueryState:
    if 'query_state' not in st.session_state:
        st.session_state.query_state = QueryState()
    return st.session_state.query_state


def logs_display_frame(logs: Sequence[ActivityLog]) -> pd.DataFrame:
    """Table rows for st.dataframe, in the given order."""
    return pd.DataFrame(
        {
            'Salesman': [log.user_email for log in logs],
            'Activities': [', '.join(log.activity_types) for log in logs],
            'Logged At': [log.logged_at for log in logs],
        },
        columns=['Salesman', 'Activities', 'Logged At']
    )


# =============================================================================
# LEADERBOARD
# =============================================================================

def render_leader_cards(analysis: SalesAnalysis):
    """Top performer and special sales cards."""
    col1, col2 = st.columns(2)

    with col1:
        st.metric(
            "🥇 Top Special Sales Performer",
            analysis.leader.email,
            help="Most Mosquito / Tree and Shrub sales, ties broken by overall sales"
        )
    with col2:
        st.metric(
            "🦟 Special Sales",
            f"{analysis.leader.special_sales:,}",
            delta=f"{analysis.leader.overall_sales:,} overall",
            delta_color="off",
            help="Each Mosquito Sale or Tree and Shrub Sale tag counts once"
        )


def render_top_salesmen(analysis: SalesAnalysis):
    """Top 10 overall salesmen list with chart."""
    st.markdown("#### 🏆 Top 10 Overall Salesmen")

    if not analysis.top_ten:
        st.info("No sales recorded yet.")
        return

    for rank, salesman in enumerate(analysis.top_ten, start=1):
        medal = "🟨" if rank <= 3 else "⬜"
        st.markdown(f"{medal} **{rank}.** {salesman.email} · {salesman.overall_sales:,} sales")

    with st.expander("📊 Chart"):
        chart = ActivityCharts.build_top_salesmen_chart(analysis.top_ten)
        st.altair_chart(chart, use_container_width=True)


# =============================================================================
# FRAGMENT: ACTIVITY TABLE
# =============================================================================

def _on_sort_click(column: str):
    st.session_state.query_state = toggle_sort(get_query_state(), column)


def _on_search_change():
    st.session_state.query_state = get_query_state().with_search(
        st.session_state.get('activity_search', '')
    )


def _on_activity_change():
    st.session_state.query_state = get_query_state().with_activity(
        st.session_state.get('activity_filter')
    )


@st.fragment
def activity_table_fragment(
    logs: List[ActivityLog],
    analysis: SalesAnalysis,
    fragment_key: str = "activity"
):
    """
    Searchable, filterable, sortable activity log.

    The query runs on every rerun of this fragment; the loaded log list
    itself is never modified.
    """
    state = get_query_state()

    col_search, col_filter = st.columns([3, 1])
    with col_search:
        st.text_input(
            "Search",
            placeholder="Search salesman by email...",
            key='activity_search',
            on_change=_on_search_change,
            label_visibility="collapsed"
        )
    with col_filter:
        st.selectbox(
            "Activity",
            options=ACTIVITY_FILTER_OPTIONS,
            key='activity_filter',
            on_change=_on_activity_change,
            label_visibility="collapsed"
        )

    col_email, col_time, _ = st.columns([1, 1, 2])
    with col_email:
        st.button(
            f"Salesman {sort_indicator(state, SORT_USER_EMAIL)}".strip(),
            key=f"{fragment_key}_sort_email",
            on_click=_on_sort_click,
            args=(SORT_USER_EMAIL,),
            use_container_width=True
        )
    with col_time:
        st.button(
            f"Logged At {sort_indicator(state, SORT_LOGGED_AT)}".strip(),
            key=f"{fragment_key}_sort_time",
            on_click=_on_sort_click,
            args=(SORT_LOGGED_AT,),
            use_container_width=True
        )

    visible = query(logs, get_query_state())

    if not visible:
        st.info("No activities match your filters.")
        return

    st.dataframe(
        logs_display_frame(visible),
        hide_index=True,
        use_container_width=True,
        column_config={
            'Logged At': st.column_config.DatetimeColumn('Logged At', format="YYYY-MM-DD HH:mm"),
        }
    )
    st.caption(f"Showing {len(visible):,} of {len(logs):,} activities")

    excel = ActivityExport().create_report(analysis, visible, get_query_state())
    st.download_button(
        label="📥 Download Excel",
        data=excel,
        file_name=f"field_activity_{datetime.now():%Y%m%d_%H%M}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key=f"{fragment_key}_export"
    )


# =============================================================================
# ROLE EDITOR
# =============================================================================

def render_user_table(records: Sequence[UserRoleRecord], search_term: str):
    """Role directory with an Edit button per row."""
    visible = search_user_roles(records, search_term)

    if not visible:
        st.info("No users match your search criteria.")
        return

    header = st.columns([2, 2, 1, 2, 1, 1])
    for col, label in zip(header, ["First Name", "Last Name", "Abbr.", "Team", "Role", ""]):
        col.markdown(f"**{label}**")

    for record in visible:
        cols = st.columns([2, 2, 1, 2, 1, 1])
        cols[0].write(record.first_name or "-")
        cols[1].write(record.last_name or "-")
        cols[2].write(record.name_abbreviation or "-")
        cols[3].write(record.team or "-")
        cols[4].write(f"{ROLE_BADGES.get(record.role, '🟢')} {record.role or '-'}")
        if cols[5].button("✏️ Edit", key=f"edit_user_{record.id}"):
            edit_user_dialog(record)


@st.dialog("Edit User Role")
def edit_user_dialog(record: UserRoleRecord):
    """Modal editor; only one edit can be open at a time."""
    with st.form(f"edit_user_form_{record.id}"):
        first_name = st.text_input("First Name", value=record.first_name or "")
        last_name = st.text_input("Last Name", value=record.last_name or "")
        role = st.selectbox(
            "Role",
            options=USER_ROLES,
            index=USER_ROLES.index(record.role) if record.role in USER_ROLES else 0,
            format_func=str.capitalize
        )
        team = st.text_input("Team", value=record.team or "")
        abbreviation = st.text_input(
            "Name Abbreviation",
            value=record.name_abbreviation or "",
            max_chars=NAME_ABBREVIATION_MAX_LENGTH
        )

        col_save, col_cancel = st.columns(2)
        with col_save:
            save = st.form_submit_button("💾 Save Changes", type="primary", use_container_width=True)
        with col_cancel:
            cancel = st.form_submit_button("Cancel", use_container_width=True)

    if cancel:
        st.rerun()

    if save:
        edited = replace(
            record,
            first_name=first_name.strip() or None,
            last_name=last_name.strip() or None,
            role=role,
            team=team.strip() or None,
            name_abbreviation=abbreviation.strip() or None,
        )
        try:
            with st.spinner("Saving..."):
                saved = ActivityQueries().update_user_role(edited)
        except UpdateError as e:
            st.error(f"❌ {e}")
            return

        st.session_state.user_roles = replace_user_role(
            st.session_state.get('user_roles', []), saved
        )
        st.toast(f"✅ Saved {saved.full_name or saved.id}")
        st.rerun()
