# security.py

import streamlit as st

from backend_service import create_backend
from config import APP_NAME, get_backend_settings

VIEW_STATE_PREFIX = "view_state::"


def get_user_session():
    """Return (and initialise if needed) the session dict for auth."""
    if "authenticated" not in st.session_state:
        st.session_state["authenticated"] = False
        st.session_state["role"] = None
        st.session_state["user"] = None
    if "active_section" not in st.session_state:
        st.session_state["active_section"] = None
    if "active_page_label" not in st.session_state:
        st.session_state["active_page_label"] = None

    return {
        "authenticated": st.session_state["authenticated"],
        "role": st.session_state["role"],
        "user": st.session_state["user"]
    }


def get_backend():
    """
    One backend client per browser session.
    The Supabase client carries the signed-in user's auth session, so it
    must never be shared between sessions (no st.cache_resource here).
    """
    if "backend" not in st.session_state:
        st.session_state["backend"] = create_backend(get_backend_settings(st.secrets))
    return st.session_state["backend"]


def ensure_logged_in(auth_service):
    """
    If not logged in, render login UI and update session on success.
    auth_service = AuthService(...)
    """
    st.title(f"{APP_NAME} Admin Login")
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        login_btn = st.form_submit_button("Log in")

    if login_btn:
        result = auth_service.login(email, password)
        if result.authenticated:
            st.session_state["authenticated"] = True
            st.session_state["role"] = result.role
            st.session_state["user"] = result.user
            st.rerun()
        else:
            st.error(result.error or "Login failed.")


# --- Per-view state ---

def get_view_state(name, factory):
    """Return the state object for view `name`, creating it with `factory()` on first use."""
    key = f"{VIEW_STATE_PREFIX}{name}"
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def clear_view_states():
    """Forget every view's data so the next active view fetches fresh."""
    for key in [k for k in st.session_state.keys() if str(k).startswith(VIEW_STATE_PREFIX)]:
        del st.session_state[key]
