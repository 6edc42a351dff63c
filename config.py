# config.py

import logging
import os

from dotenv import load_dotenv

APP_NAME = "Acehive"

# Which views exist in the admin dashboard.
# Each section has pages. Each page maps to a module under apps/.
ALL_PAGES = {
    "Admin Dashboard": {
        "Home": {
            "module": "dashboard.summary_panel",
            "icon": "🏡",
        },
        "Database": {
            "module": "dashboard.database_viewer",
            "icon": "🗄️",
        },
        "Edit Database": {
            "module": "dashboard.edit_database",
            "icon": "✏️",
        },
    },
}

# Sidebar icons for each section
SECTION_ICONS = {
    "Admin Dashboard": "🗃️",
}

# --- Tables ---

RESOURCE_TABLE = "resources"
ROW_ID_FIELD = "id"

# Tables the Database viewer can browse (table name -> label)
BROWSABLE_TABLES = {
    "resources": "Resources",
    "feedback": "Feedback",
    "collaborations": "Collaborations",
}

# Tables the Edit view can mutate. Only resources for now.
EDITABLE_TABLES = {
    "resources": "Resources",
}

# --- Resource fields ---

CATEGORY_FIELD = "resource_type"
YEAR_FIELD = "year"
TITLE_FIELD = "title"

RESOURCE_TYPES = ["CT Paper", "Sem Paper", "Study Material"]
YEAR_OPTIONS = ["1st Year", "2nd Year", "3rd Year"]

# Hidden from the Database viewer when browsing `resources`
HIDDEN_RESOURCE_COLUMNS = ("description", "file_urls", "id", "tags", "created_at")

# Never rendered or editable in the Edit view
EDIT_EXCLUDED_COLUMNS = ("description", "created_at", "file_urls", "tags", "id")

# Summary cards: (key, label, resource_type filter or None, accent colour)
SUMMARY_CARDS = [
    {"key": "total", "label": "Total", "resource_type": None, "color": "#00BFFF"},
    {"key": "ct_papers", "label": "CT Papers", "resource_type": "CT Paper", "color": "#FF5733"},
    {"key": "sem_papers", "label": "Sem Papers", "resource_type": "Sem Paper", "color": "#28A745"},
    {"key": "study_materials", "label": "Study Material", "resource_type": "Study Material", "color": "#FFC107"},
]

# --- Backend settings ---

# Pick up a local .env when running outside Streamlit Cloud
load_dotenv()


def _read_secret(secrets, name):
    """Look a value up in st.secrets first, then the environment."""
    if secrets is not None:
        try:
            value = secrets.get(name)
        except Exception:
            # No secrets.toml at all; fall back to the environment
            value = None
        if value:
            return value
    return os.environ.get(name)


def get_backend_settings(secrets=None) -> dict:
    """
    Return {"url": ..., "key": ...} for the Supabase project.

    `secrets` is normally `st.secrets`; tests pass a plain dict.
    """
    url = _read_secret(secrets, "SUPABASE_URL")
    key = _read_secret(secrets, "SUPABASE_KEY") or _read_secret(secrets, "SUPABASE_ANON_KEY")
    if not url or not key:
        raise RuntimeError(
            "Supabase is not configured. Set SUPABASE_URL and SUPABASE_KEY "
            "in .streamlit/secrets.toml or the environment."
        )
    return {"url": url, "key": key}


# --- Logging ---

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level=None):
    """Set up the root handler once. Safe to call on every Streamlit rerun."""
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
