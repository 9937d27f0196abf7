# app.py
"""
Field Sales Activity Dashboard - Main Entry Point

Version: 1.0.0
"""

import streamlit as st
from utils.auth import AuthManager
from utils.db import check_db_connection, get_connection_pool_status, reset_db_engine
from utils.config import config
from utils.field_activity import AccessControl
import logging

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.get_app_setting("ENABLE_DEBUG_MODE") else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Field Sales Tracker"
APP_ICON = "🦎"
APP_VERSION = "1.0.0"

st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# ==================== CUSTOM CSS ====================

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 0.5rem;
        color: #15803d;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .welcome-box {
        background: linear-gradient(135deg, #15803d 0%, #22c55e 100%);
        color: white;
        padding: 2rem;
        border-radius: 0.75rem;
        margin-bottom: 2rem;
    }

    .welcome-title {
        font-size: 1.75rem;
        font-weight: 600;
        margin-bottom: 0.5rem;
    }

    .info-card {
        background: #f8f9fa;
        padding: 1.5rem;
        border-radius: 0.5rem;
        border-left: 4px solid #15803d;
        margin-bottom: 1rem;
    }

    .footer {
        text-align: center;
        color: #888;
        padding: 1rem;
        margin-top: 3rem;
        border-top: 1px solid #eee;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)

# ==================== INITIALIZATION ====================

auth = AuthManager()

# ==================== HELPER FUNCTIONS ====================

def show_login_page():
    """Display the login page"""
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Door-to-door sales activity and leaderboards</p>', unsafe_allow_html=True)

    db_ok, db_error = check_db_connection()
    if not db_ok:
        st.error(f"⚠️ {db_error}")
        st.info("Please check your network connection or contact your manager.")
        return

    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        with st.form("login_form", clear_on_submit=False):
            st.markdown("#### 🔐 Sign In")

            email = st.text_input(
                "Email",
                placeholder="you@company.com",
                key="login_email"
            )
            password = st.text_input(
                "Password",
                type="password",
                placeholder="Enter your password",
                key="login_password"
            )

            submit = st.form_submit_button(
                "🔑 Sign In",
                type="primary",
                use_container_width=True
            )

            if submit:
                if not email or not password:
                    st.warning("Please enter both email and password")
                else:
                    with st.spinner("Authenticating..."):
                        success, result = auth.authenticate(email, password)

                    if success:
                        auth.login(result)
                        st.success("✅ Signed in!")
                        st.rerun()
                    else:
                        st.error(result.get("error", "Authentication failed"))


def show_main_app():
    """Display the main application after login"""
    access = AccessControl(st.session_state.get('user_role'))

    with st.sidebar:
        st.markdown(f"### 👤 {auth.get_user_display_name()}")
        st.caption(st.session_state.get('user_email', ''))
        st.info(access.get_access_label())
        st.caption(f"Role: {access.user_role} | Team: {st.session_state.get('user_team') or '-'}")
        st.markdown("---")

        if st.button("🚪 Sign Out", use_container_width=True):
            auth.logout()
            st.rerun()

    st.markdown(f"""
    <div class="welcome-box">
        <div class="welcome-title">Welcome, {auth.get_user_display_name()}! 👋</div>
        <div>Pick a page from the sidebar to get started.</div>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("### 📊 Pages")

    st.markdown("""
    <div class="info-card">
        <strong>📊 Sales Dashboard</strong><br>
        <span style="color: #666;">Special sales leader, top 10 salesmen and the full activity log.</span>
    </div>
    """, unsafe_allow_html=True)

    if access.can_manage_users():
        st.markdown("""
        <div class="info-card">
            <strong>👥 Manage Users</strong><br>
            <span style="color: #666;">Edit names, roles, teams and abbreviations for your team.</span>
        </div>
        """, unsafe_allow_html=True)

    if config.is_feature_enabled("COMMISSION_CALCULATOR"):
        st.markdown("""
        <div class="info-card">
            <strong>🦎 Commission Calculator</strong><br>
            <span style="color: #666;">Estimate tiered commission and prepay bonus.</span>
        </div>
        """, unsafe_allow_html=True)

    if auth.is_admin():
        st.markdown("---")
        with st.expander("🔧 System Status (Admin Only)"):
            pool_status = get_connection_pool_status()

            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("DB Status", pool_status.get("status", "OK"))
            with col2:
                st.metric("Connections Used", pool_status.get("checked_out", 0))
            with col3:
                st.metric("Available", pool_status.get("checked_in", 0))

            if st.button("🔌 Reconnect Database"):
                reset_db_engine()
                st.rerun()

    st.markdown(f"""
    <div class="footer">
        <strong>{APP_NAME}</strong> v{APP_VERSION}
    </div>
    """, unsafe_allow_html=True)


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    if not auth.check_session():
        show_login_page()
    else:
        show_main_app()


if __name__ == "__main__":
    main()
