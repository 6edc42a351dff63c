"""
Acehive Backend Service (The "Gatekeeper")

===============================================================================
PURPOSE:
===============================================================================
This file is the **single, central gatekeeper** for all interactions with the
hosted Supabase project (table storage + auth).

NO OTHER FILE IN THE APPLICATION SHOULD EVER CALL THE SUPABASE CLIENT.

All page modules (e.g., `apps/dashboard/edit_database.py`) go through a
`BackendService` instance, which is created once per browser session by
`security.get_backend()`.

===============================================================================
CONTRACT:
===============================================================================
- "Read" functions return plain Python data and RAISE `BackendError` on
  failure. The caller decides what to show.
- "Write" functions never raise for backend failures. They return a
  `(success, message)` tuple, exactly like the admin UIs expect.
- Nothing is cached and nothing is retried here. Every call goes to the
  backend.

===============================================================================
QUICK NAVIGATION / FUNCTION LIST
===============================================================================
    [R] Reads
    - count(): Exact row count, optionally filtered by one equality predicate.
    - select_all(): Every row of a table.

    [W] Writes
    - update_row(): Update one row by primary key.
    - delete_row(): Delete one row by primary key.

    [A] Auth
    - sign_in(): Email/password sign-in. Returns the signed-in user.
    - sign_out(): Ends the session on the backend.
"""

import logging

from postgrest.exceptions import APIError
from supabase import Client, create_client

from config import ROW_ID_FIELD

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """
    Raised by read calls when the backend rejects a request or the client
    fails before getting an answer.

    `unexpected` is True for anything that is not an API error response
    (network failure, bad client setup, ...).
    """

    def __init__(self, message: str, unexpected: bool = False):
        super().__init__(message)
        self.message = message
        self.unexpected = unexpected


def _error_message(exc) -> str:
    """Best human-readable message for a client exception."""
    message = getattr(exc, "message", None)
    return message or str(exc) or exc.__class__.__name__


class BackendService:
    def __init__(self, client: Client):
        self.client = client

    # --- [R] Reads ---

    def _execute(self, query, action: str):
        """[PRIVATE] Runs a built query and maps client errors to BackendError."""
        try:
            return query.execute()
        except APIError as e:
            logger.error("Backend rejected %s: %s", action, _error_message(e))
            raise BackendError(_error_message(e)) from e
        except Exception as e:
            logger.exception("Unexpected failure during %s", action)
            raise BackendError(_error_message(e), unexpected=True) from e

    def count(self, table: str, column=None, value=None):
        """
        Exact row count for `table`.
        When `column` is given, only rows where `column == value` are counted.
        Returns whatever the backend reports, which may be None.
        """
        logger.debug("count %s where %s=%r", table, column, value)
        query = self.client.table(table).select("*", count="exact")
        if column is not None:
            query = query.eq(column, value)
        response = self._execute(query, f"count on '{table}'")
        return response.count

    def select_all(self, table: str) -> list:
        """Every row of `table` as a list of dicts."""
        logger.debug("select * from %s", table)
        response = self._execute(self.client.table(table).select("*"), f"select on '{table}'")
        return list(response.data or [])

    # --- [W] Writes ---

    def update_row(self, table: str, row_id, row: dict):
        """Overwrite the row whose primary key is `row_id` with `row`."""
        logger.info("Updating %s.%s=%r", table, ROW_ID_FIELD, row_id)
        try:
            self.client.table(table).update(row).eq(ROW_ID_FIELD, row_id).execute()
            return True, "Changes saved successfully!"
        except Exception as e:
            logger.error("Update of %s row %r failed: %s", table, row_id, _error_message(e))
            return False, f"Error saving changes: {_error_message(e)}"

    def delete_row(self, table: str, row_id):
        """Delete the row whose primary key is `row_id`."""
        logger.info("Deleting %s.%s=%r", table, ROW_ID_FIELD, row_id)
        try:
            self.client.table(table).delete().eq(ROW_ID_FIELD, row_id).execute()
            return True, "Record deleted successfully!"
        except Exception as e:
            logger.error("Delete of %s row %r failed: %s", table, row_id, _error_message(e))
            return False, f"Error deleting record: {_error_message(e)}"

    # --- [A] Auth ---

    def sign_in(self, email: str, password: str):
        """Sign in with email/password. Returns the backend's user object."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.warning("Sign-in failed for %s: %s", email, _error_message(e))
            raise BackendError(_error_message(e)) from e
        logger.info("Signed in %s", email)
        return response.user

    def sign_out(self):
        try:
            self.client.auth.sign_out()
            logger.info("Signed out")
            return True, "Signed out."
        except Exception as e:
            logger.error("Sign-out failed: %s", _error_message(e))
            return False, f"Error logging out: {_error_message(e)}"


def create_backend(settings: dict) -> BackendService:
    """Builds a BackendService for the settings from `config.get_backend_settings()`."""
    return BackendService(create_client(settings["url"], settings["key"]))
