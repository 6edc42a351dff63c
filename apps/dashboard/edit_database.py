"""
apps/dashboard/edit_database.py

Inline editor for the resources table.

- "Edit" turns a row into text inputs. Several rows can be open at once,
  each with its own pending copy of the row.
- "Save" sends the whole pending row to the backend, then reloads the
  table. Nothing changes on screen until the backend has confirmed.
- The 🗑️ button only *selects* a row for deletion. The delete request is
  sent after the confirmation prompt.
- The title search is re-applied to the full table whenever the search box
  changes and after every reload. Streamlit commits a text input on Enter
  or when it loses focus, not per keystroke.
"""

from datetime import datetime

import streamlit as st

from common.view_state import ERROR, IDLE, LOADED, EditState
from config import EDITABLE_TABLES, ROW_ID_FIELD, TITLE_FIELD
from security import get_view_state

SEARCH_WIDGET = "edit_search"


def _cell_text(value) -> str:
    return "" if value is None else str(value)


def _field_key(row_id, field) -> str:
    return f"edit::{row_id}::{field}"


class Page:
    def __init__(self, role: str, backend):
        self.role = role
        self.backend = backend
        self.state = get_view_state("edit", EditState)

        self.meta = {
            "title_override": "Edit Database Table",
            "owner": "Acehive Admins",
            "last_updated": datetime.now().strftime("%Y-%m-%d %H:%M"),
            "data_source": f"Supabase · {self.state.table}",
            "coming_soon": False,
        }

        if self.state.status == IDLE:
            st.session_state[SEARCH_WIDGET] = self.state.search_query

    # --- Callbacks ---

    def _on_refresh(self):
        self.state.request_fetch()

    def _on_search(self):
        self.state.search(st.session_state.get(SEARCH_WIDGET, ""))

    def _on_edit(self, row_id):
        self.state.enable_editing(row_id)

    def _on_cancel_edit(self, row_id):
        self.state.cancel_editing(row_id)

    def _on_field_change(self, row_id, field):
        if self.state.is_editing(row_id):
            self.state.update_field(row_id, field, st.session_state[_field_key(row_id, field)])

    def _on_save(self, row_id):
        if not self.state.is_editing(row_id):
            return
        # Pick up text typed but not yet committed by its own on_change.
        # Untouched inputs still show the seeded text; skip them so the
        # buffer keeps the row's original values (None, numbers, lists).
        buffer = self.state.edit_buffers[row_id]
        for field in self.state.columns():
            key = _field_key(row_id, field)
            if key in st.session_state and st.session_state[key] != _cell_text(buffer.get(field)):
                self.state.update_field(row_id, field, st.session_state[key])
        self.state.save_changes(row_id, self.backend)

    def _on_delete(self, row_id):
        self.state.request_delete(row_id)

    def _on_confirm_delete(self):
        self.state.confirm_delete(self.backend)

    def _on_cancel_delete(self):
        self.state.cancel_delete()

    # --- Sections ---

    def _render_toolbar(self):
        c1, c2, c3 = st.columns([2, 1, 4])
        c1.selectbox(
            "Table",
            options=list(EDITABLE_TABLES.keys()),
            format_func=lambda name: EDITABLE_TABLES[name],
            key="edit_table_select",
            label_visibility="collapsed",
        )
        c2.button("Refresh", key="edit_refresh", type="primary", on_click=self._on_refresh, use_container_width=True)
        c3.text_input(
            "Search",
            placeholder=f"Search by {TITLE_FIELD}",
            key=SEARCH_WIDGET,
            on_change=self._on_search,
            label_visibility="collapsed",
        )

    def _render_flash(self):
        flash = self.state.pop_flash()
        if not flash:
            return
        level, message = flash
        if level == "success":
            st.success(message)
        else:
            st.error(message)

    def _render_delete_prompt(self):
        if self.state.pending_delete is None:
            return
        with st.container(border=True):
            st.markdown("##### Confirm Delete")
            st.warning("Are you sure you want to delete this record? This action cannot be undone.")
            c1, c2, _ = st.columns([1, 1, 4])
            c1.button("Confirm", type="primary", on_click=self._on_confirm_delete, key="edit_confirm_delete")
            c2.button("Cancel", on_click=self._on_cancel_delete, key="edit_cancel_delete")

    def _render_row(self, row, columns):
        row_id = row.get(ROW_ID_FIELD)
        editing = self.state.is_editing(row_id)
        buffer = self.state.edit_buffers.get(row_id, {})

        cells = st.columns(len(columns) + 1)
        for cell, field in zip(cells, columns):
            if editing:
                cell.text_input(
                    field,
                    value=_cell_text(buffer.get(field, row.get(field))),
                    key=_field_key(row_id, field),
                    on_change=self._on_field_change,
                    args=(row_id, field),
                    label_visibility="collapsed",
                )
            else:
                cell.write(_cell_text(row.get(field)))

        actions = cells[-1]
        a1, a2, a3 = actions.columns(3)
        if editing:
            a1.button("Save", key=f"save::{row_id}", type="primary", on_click=self._on_save, args=(row_id,))
            a2.button("Cancel", key=f"cancel::{row_id}", on_click=self._on_cancel_edit, args=(row_id,))
        else:
            a1.button("Edit", key=f"edit_btn::{row_id}", on_click=self._on_edit, args=(row_id,))
        a3.button("🗑️", key=f"delete::{row_id}", on_click=self._on_delete, args=(row_id,))

    def _render_table(self):
        if self.state.status == ERROR:
            st.error(self.state.error)
            return

        if not self.state.displayed:
            st.info("No data available in the selected table.")
            return

        columns = self.state.columns()
        header = st.columns(len(columns) + 1)
        for cell, column in zip(header, columns):
            cell.markdown(f"**{column}**")
        header[-1].markdown("**Actions**")

        for row in self.state.displayed:
            self._render_row(row, columns)

    # --- This is the "recipe" function that gets returned ---

    def render_body(self, role: str) -> None:
        st.subheader("✏️ Edit Database Table")

        self._render_toolbar()
        self._render_flash()
        self._render_delete_prompt()

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
