"""
common/view_state.py

Per-view state for the three admin dashboard views.

Each view owns one of these objects (kept in `st.session_state` by
`security.get_view_state`) and drops it when the user navigates away.
The page modules only render; every transition lives here so it can be
tested without Streamlit.

Fetch lifecycle, for every view:

    IDLE ──(mount / refresh / table switch)──> LOADING
    LOADING ──(fetch ok)──> LOADED
    LOADING ──(fetch failed)──> ERROR      (Summary Panel goes back to LOADED)

A view in IDLE or LOADING is fetched exactly once by `load_if_needed()`.
"""

import logging

from backend_service import BackendError
from common.row_filters import filter_rows, project_row, search_rows, visible_columns
from config import (
    BROWSABLE_TABLES,
    CATEGORY_FIELD,
    EDIT_EXCLUDED_COLUMNS,
    EDITABLE_TABLES,
    HIDDEN_RESOURCE_COLUMNS,
    RESOURCE_TABLE,
    ROW_ID_FIELD,
    SUMMARY_CARDS,
)

logger = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
LOADED = "loaded"
ERROR = "error"

FETCH_ERROR_MESSAGE = "Error fetching data from Supabase"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


# --- Summary Panel ---

class SummaryState:
    """Four resource counts: total plus one per resource type."""

    def __init__(self, table: str = RESOURCE_TABLE, cards=None):
        self.table = table
        self.cards = cards or SUMMARY_CARDS
        self.counts = {card["key"]: 0 for card in self.cards}
        self.status = IDLE

    @property
    def loading(self) -> bool:
        return self.status in (IDLE, LOADING)

    def request_refresh(self):
        self.status = LOADING

    def fetch(self, backend):
        """
        Issue one count per card. Counts are only replaced once all of them
        came back; on failure the previous counts stay on screen.
        """
        self.status = LOADING
        try:
            fresh = {}
            for card in self.cards:
                if card["resource_type"] is None:
                    count = backend.count(self.table)
                else:
                    count = backend.count(self.table, CATEGORY_FIELD, card["resource_type"])
                fresh[card["key"]] = count or 0
            self.counts.update(fresh)
        except BackendError:
            logger.exception("Error fetching resource counts")
        finally:
            self.status = LOADED

    def load_if_needed(self, backend) -> bool:
        if self.loading:
            self.fetch(backend)
            return True
        return False


# --- Shared table fetching ---

class TableViewState:
    """
    Full row set + displayed row set for one table, with the fetch state machine.

    Every fetch gets a generation number. A result is only applied if no newer
    fetch was started in the meantime, so the latest request always wins.
    """

    def __init__(self, table: str):
        self.table = table
        self.status = IDLE
        self.error = ""
        self.rows = []
        self.displayed = []
        self.flash = None
        self._generation = 0

    # --- fetch lifecycle ---

    def request_fetch(self):
        self.status = LOADING

    def begin_fetch(self) -> int:
        self._generation += 1
        self.status = LOADING
        self.error = ""
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def finish_fetch(self, token: int, rows) -> bool:
        if not self.is_current(token):
            logger.debug("Dropping stale fetch %s for '%s'", token, self.table)
            return False
        self.rows = list(rows or [])
        self.status = LOADED
        self._on_rows_loaded()
        return True

    def fail_fetch(self, token: int, message: str) -> bool:
        if not self.is_current(token):
            return False
        self.rows = []
        self.displayed = []
        self.error = message
        self.status = ERROR
        return True

    def fetch(self, backend):
        token = self.begin_fetch()
        try:
            rows = backend.select_all(self.table)
        except BackendError as e:
            self.fail_fetch(token, UNEXPECTED_ERROR_MESSAGE if e.unexpected else FETCH_ERROR_MESSAGE)
            return
        self.finish_fetch(token, rows)

    def load_if_needed(self, backend) -> bool:
        if self.status in (IDLE, LOADING):
            self.fetch(backend)
            return True
        return False

    def _on_rows_loaded(self):
        self.displayed = list(self.rows)

    # --- one-shot messages ---

    def set_flash(self, level: str, message: str):
        self.flash = (level, message)

    def pop_flash(self):
        flash, self.flash = self.flash, None
        return flash


# --- Browse / Filter view ---

class BrowseState(TableViewState):
    FILTER_KEYS = ("resource_type", "year", "title")

    def __init__(self, table: str = RESOURCE_TABLE):
        if table not in BROWSABLE_TABLES:
            raise ValueError(f"Unknown table: {table}")
        super().__init__(table)
        self.filters = self._empty_filters()
        self.filters_applied = False

    @staticmethod
    def _empty_filters():
        return {"resource_type": "", "year": "", "title": ""}

    def select_table(self, name: str):
        if name not in BROWSABLE_TABLES:
            raise ValueError(f"Unknown table: {name}")
        self.table = name
        self.filters = self._empty_filters()
        self.filters_applied = False
        self.request_fetch()

    def set_filter(self, key: str, value):
        if key not in self.FILTER_KEYS:
            raise ValueError(f"Unknown filter: {key}")
        self.filters[key] = value or ""

    def _on_rows_loaded(self):
        self.displayed = list(self.rows)
        self.filters_applied = False

    def apply_filters(self):
        self.displayed = filter_rows(
            self.rows,
            resource_type=self.filters["resource_type"],
            year=self.filters["year"],
            title_query=self.filters["title"],
        )
        self.filters_applied = True

    def reset_filters(self):
        self.filters = self._empty_filters()
        self.displayed = list(self.rows)
        self.filters_applied = False

    @property
    def hidden_columns(self):
        return HIDDEN_RESOURCE_COLUMNS if self.table == RESOURCE_TABLE else ()

    def columns(self):
        return visible_columns(self.displayed, self.hidden_columns)

    def projected_rows(self):
        return [project_row(row, self.hidden_columns) for row in self.displayed]


# --- Edit / Delete view ---

class EditState(TableViewState):
    def __init__(self, table: str = RESOURCE_TABLE):
        if table not in EDITABLE_TABLES:
            raise ValueError(f"Table '{table}' cannot be edited")
        super().__init__(table)
        self.search_query = ""
        self.edit_buffers = {}
        self.pending_delete = None

    def _on_rows_loaded(self):
        # Rows that vanished from the table can no longer be edited
        present = {row.get(ROW_ID_FIELD) for row in self.rows}
        for row_id in [rid for rid in self.edit_buffers if rid not in present]:
            del self.edit_buffers[row_id]
        self.displayed = search_rows(self.rows, self.search_query)

    def search(self, query: str):
        self.search_query = query or ""
        self.displayed = search_rows(self.rows, self.search_query)

    def columns(self):
        return visible_columns(self.displayed, EDIT_EXCLUDED_COLUMNS)

    def _find_row(self, row_id):
        for row in self.rows:
            if row.get(ROW_ID_FIELD) == row_id:
                return row
        return None

    # --- inline editing ---

    def is_editing(self, row_id) -> bool:
        return row_id in self.edit_buffers

    def enable_editing(self, row_id) -> bool:
        row = self._find_row(row_id)
        if row is None:
            return False
        self.edit_buffers[row_id] = dict(row)
        return True

    def update_field(self, row_id, field: str, value):
        if row_id not in self.edit_buffers:
            raise ValueError(f"Row {row_id!r} is not being edited")
        self.edit_buffers[row_id][field] = value

    def cancel_editing(self, row_id):
        self.edit_buffers.pop(row_id, None)

    def save_changes(self, row_id, backend) -> bool:
        buffer = self.edit_buffers.get(row_id)
        if buffer is None:
            raise ValueError(f"Row {row_id!r} is not being edited")

        success, message = backend.update_row(self.table, row_id, buffer)
        if not success:
            self.set_flash("error", message)
            return False

        self.edit_buffers.pop(row_id, None)
        self.fetch(backend)
        self.set_flash("success", message)
        return True

    # --- two-phase delete ---

    def request_delete(self, row_id):
        self.pending_delete = row_id

    def cancel_delete(self):
        self.pending_delete = None

    def confirm_delete(self, backend) -> bool:
        row_id = self.pending_delete
        if row_id is None:
            return False
        try:
            success, message = backend.delete_row(self.table, row_id)
            if not success:
                self.set_flash("error", message)
                return False
            self.edit_buffers.pop(row_id, None)
            self.fetch(backend)
            self.set_flash("success", message)
            return True
        finally:
            self.pending_delete = None
