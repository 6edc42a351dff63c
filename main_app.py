import importlib
import logging

import streamlit as st

from auth.auth_service import AuthService
from common.layout import render_frame

from config import ALL_PAGES, APP_NAME, SECTION_ICONS, configure_logging
from security import (
    ensure_logged_in,
    get_backend,
    get_user_session,
)
from ui_nav import build_sidebar

configure_logging()
logger = logging.getLogger(__name__)

# -------------------------------------------
# PAGE CONFIG
# -------------------------------------------
st.set_page_config(
    page_title=f"{APP_NAME} Admin",
    page_icon="🐝",
    layout="wide",
    initial_sidebar_state="expanded"
)

# 1. Backend + auth / session ------------------------
try:
    backend = get_backend()
except Exception as e:
    logger.exception("Could not create the backend client")
    st.error(str(e))
    st.stop()

session = get_user_session()
auth = AuthService(backend)

if not session["authenticated"]:
    ensure_logged_in(auth)  # will render login form or set session
    st.stop()

user = session["user"]

# 2. Draw sidebar + get nav state ---------------------
nav_state = build_sidebar(
    user=user,
    section_icons=SECTION_ICONS,
    all_pages=ALL_PAGES,
)

if nav_state["logout"]:
    success, message = auth.logout()
    if success:
        # wipe session & rerun -> back to the login screen
        st.session_state.clear()
        st.rerun()
    st.error(message)

active_section = nav_state["active_section"]
active_page_label = nav_state["active_page_label"]

# 3. Load and render the chosen page ------------------
module_path = ALL_PAGES[active_section][active_page_label]["module"]

try:
    module = importlib.import_module(f"apps.{module_path}")
    body_component, meta = module.render_page(role=session["role"], backend=backend)
except ModuleNotFoundError:
    # "Coming soon" placeholder
    logger.warning("No module for page '%s' (%s)", active_page_label, module_path)
    body_component = None
    meta = {
        "title_override": active_page_label,
        "last_updated": "N/A",
        "owner": "TBD",
        "data_source": "N/A",
        "coming_soon": True
    }
except Exception as e:
    # Catch any other error from within the page module
    logger.exception("Failed to build page '%s'", active_page_label)
    st.error(f"An error occurred while rendering '{active_page_label}'.")
    st.exception(e)
    st.stop()

# 4. Wrap it in the frame -----------------------------
render_frame(
    title_override = meta.get("title_override", active_page_label),
    body_component = body_component,
    last_updated   = meta.get("last_updated", "N/A"),
    owner          = meta.get("owner", "TBD"),
    data_source    = meta.get("data_source", "N/A"),
    coming_soon    = meta.get("coming_soon", False)
)
