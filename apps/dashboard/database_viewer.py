"""
apps/dashboard/database_viewer.py

This is a **read-only** table viewer for admins.

- Pick one of the browsable tables (Resources, Feedback, Collaborations).
- For Resources, filter by year, resource type and title, then "Apply".
  Long-text / bookkeeping columns are hidden for Resources.
- Switching table re-fetches the whole table and clears the filter inputs.
- Refresh re-fetches the whole table and drops the "Filters Applied" view;
  the filter inputs keep their values so they can be applied again.

There are no destructive actions here. Editing lives in `edit_database.py`.
"""

from datetime import datetime

import pandas as pd
import streamlit as st

from common.view_state import ERROR, IDLE, LOADED, BrowseState
from config import BROWSABLE_TABLES, RESOURCE_TABLE, RESOURCE_TYPES, YEAR_OPTIONS
from security import get_view_state

# Widget key -> BrowseState filter name
FILTER_WIDGETS = {
    "db_filter_year": "year",
    "db_filter_type": "resource_type",
    "db_filter_title": "title",
}
TABLE_WIDGET = "db_table_select"


class Page:
    def __init__(self, role: str, backend):
        self.role = role
        self.backend = backend
        self.state = get_view_state("database", BrowseState)

        self.meta = {
            "title_override": "Database Table Viewer",
            "owner": "Acehive Admins",
            "last_updated": datetime.now().strftime("%Y-%m-%d %H:%M"),
            "data_source": "Supabase",
            "coming_soon": False,
        }

        # Prime widget values from the state so the widgets never need defaults.
        # A fresh state (view just became active) overrides any leftovers.
        fresh = self.state.status == IDLE
        if fresh or TABLE_WIDGET not in st.session_state:
            st.session_state[TABLE_WIDGET] = self.state.table
        for widget_key, filter_name in FILTER_WIDGETS.items():
            if fresh or widget_key not in st.session_state:
                st.session_state[widget_key] = self.state.filters[filter_name]

    # --- Callbacks (run before the next script run) ---

    def _clear_filter_widgets(self):
        for widget_key in FILTER_WIDGETS:
            st.session_state[widget_key] = ""

    def _on_table_change(self):
        self.state.select_table(st.session_state[TABLE_WIDGET])
        self._clear_filter_widgets()

    def _on_refresh(self):
        self.state.request_fetch()

    def _on_apply(self):
        for widget_key, filter_name in FILTER_WIDGETS.items():
            self.state.set_filter(filter_name, st.session_state.get(widget_key, ""))
        self.state.apply_filters()

    def _on_reset(self):
        self.state.reset_filters()
        self._clear_filter_widgets()

    # --- Sections ---

    def _render_table_picker(self):
        c1, c2, _ = st.columns([2, 1, 3])
        c1.selectbox(
            "Table",
            options=list(BROWSABLE_TABLES.keys()),
            format_func=lambda name: BROWSABLE_TABLES[name],
            key=TABLE_WIDGET,
            on_change=self._on_table_change,
            label_visibility="collapsed",
        )
        c2.button("Refresh", key="db_refresh", type="primary", on_click=self._on_refresh, use_container_width=True)

    def _render_filters(self):
        """Filters only make sense for the resources table."""
        if self.state.table != RESOURCE_TABLE:
            return

        c1, c2, c3, c4, c5 = st.columns([2, 2, 3, 1, 1])
        c1.selectbox(
            "Year",
            options=[""] + YEAR_OPTIONS,
            format_func=lambda v: "Select Year" if v == "" else v,
            key="db_filter_year",
            label_visibility="collapsed",
        )
        c2.selectbox(
            "Resource Type",
            options=[""] + RESOURCE_TYPES,
            format_func=lambda v: "Select Resource Type" if v == "" else v,
            key="db_filter_type",
            label_visibility="collapsed",
        )
        c3.text_input(
            "Title",
            placeholder="Search by title...",
            key="db_filter_title",
            label_visibility="collapsed",
        )
        c4.button("Apply Filters", key="db_apply", on_click=self._on_apply, use_container_width=True)
        c5.button("Reset Filters", key="db_reset", on_click=self._on_reset, use_container_width=True)

        if self.state.filters_applied:
            b1, b2 = st.columns([5, 1])
            b1.info("Filters Applied")
            b2.button("Remove Filters", key="db_remove_filters", on_click=self._on_reset)

    def _render_table(self):
        if self.state.status == ERROR:
            st.error(self.state.error)
            return

        if not self.state.displayed:
            st.info("No data available for the selected filters.")
            return

        df = pd.DataFrame(self.state.projected_rows(), columns=self.state.columns())
        st.caption(f"Showing **{len(df)}** of {len(self.state.rows)} rows.")
        st.dataframe(df, use_container_width=True, hide_index=True)

    # --- This is the "recipe" function that gets returned ---

    def render_body(self, role: str) -> None:
        st.subheader("🗄️ Database Table Viewer")

        self._render_table_picker()
        self._render_filters()

        if self.state.status not in (LOADED, ERROR):
            with st.spinner(f"Loading '{self.state.table}'..."):
                self.state.load_if_needed(self.backend)

        self._render_table()


# -----------------------------------------------------------------------------
# META HEADER DETAILS BACK TO MAIN
# -----------------------------------------------------------------------------

def render_page(role: str, backend) -> (callable, dict):
    """
    This is the public function that main_app.py interacts with.
    """
    page = Page(role=role, backend=backend)
    return page.render_body, page.meta
