"""
tests/test_view_state.py

State machines behind the three admin views, driven with FakeBackend.
"""

import unittest

from backend_service import BackendError
from common.view_state import (
    ERROR,
    FETCH_ERROR_MESSAGE,
    IDLE,
    LOADED,
    LOADING,
    UNEXPECTED_ERROR_MESSAGE,
    BrowseState,
    EditState,
    SummaryState,
    TableViewState,
)
from tests.fakes import FakeBackend


def resource(row_id, title, resource_type="CT Paper", year="1st Year"):
    return {
        "id": row_id,
        "title": title,
        "resource_type": resource_type,
        "year": year,
        "description": "desc",
        "file_urls": [],
        "tags": [],
        "created_at": "2024-05-01T10:00:00",
    }


RESOURCES = [
    resource(1, "Calculus I", "CT Paper", "1st Year"),
    resource(2, "Physics", "Sem Paper", "1st Year"),
    resource(3, "Calculus II", "CT Paper", "2nd Year"),
]


class TestSummaryState(unittest.TestCase):
    def test_starts_loading_until_first_fetch(self):
        state = SummaryState()
        self.assertTrue(state.loading)
        backend = FakeBackend({"resources": RESOURCES})
        self.assertTrue(state.load_if_needed(backend))
        self.assertFalse(state.loading)
        self.assertFalse(state.load_if_needed(backend))

    def test_four_counts(self):
        backend = FakeBackend({"resources": RESOURCES})
        state = SummaryState()
        state.fetch(backend)
        self.assertEqual(
            state.counts,
            {"total": 3, "ct_papers": 2, "sem_papers": 1, "study_materials": 0},
        )
        self.assertEqual(len(backend.calls_named("count")), 4)
        self.assertEqual(backend.calls_named("count")[0], ("count", "resources", None, None))
        self.assertIn(("count", "resources", "resource_type", "Study Material"), backend.calls)

    def test_missing_count_defaults_to_zero(self):
        backend = FakeBackend()
        backend.counts = {None: 5, "CT Paper": None, "Sem Paper": 2, "Study Material": None}
        state = SummaryState()
        state.fetch(backend)
        self.assertEqual(state.counts["total"], 5)
        self.assertEqual(state.counts["ct_papers"], 0)
        self.assertEqual(state.counts["study_materials"], 0)

    def test_failure_keeps_previous_counts_and_clears_loading(self):
        backend = FakeBackend({"resources": RESOURCES})
        state = SummaryState()
        state.fetch(backend)

        backend.read_error = BackendError("boom")
        state.request_refresh()
        self.assertTrue(state.loading)
        with self.assertLogs("common.view_state", level="ERROR"):
            state.fetch(backend)
        self.assertFalse(state.loading)
        self.assertEqual(state.counts["total"], 3)


class TestTableFetch(unittest.TestCase):
    def test_success_stores_full_and_displayed(self):
        state = TableViewState("resources")
        self.assertEqual(state.status, IDLE)
        state.fetch(FakeBackend({"resources": RESOURCES}))
        self.assertEqual(state.status, LOADED)
        self.assertEqual(state.rows, RESOURCES)
        self.assertEqual(state.displayed, RESOURCES)

    def test_backend_error_sets_message_and_clears_rows(self):
        backend = FakeBackend({"resources": RESOURCES})
        state = TableViewState("resources")
        state.fetch(backend)
        backend.read_error = BackendError("denied")
        state.fetch(backend)
        self.assertEqual(state.status, ERROR)
        self.assertEqual(state.error, FETCH_ERROR_MESSAGE)
        self.assertEqual(state.rows, [])
        self.assertEqual(state.displayed, [])

    def test_unexpected_error_message(self):
        backend = FakeBackend()
        backend.read_error = BackendError("socket closed", unexpected=True)
        state = TableViewState("resources")
        state.fetch(backend)
        self.assertEqual(state.error, UNEXPECTED_ERROR_MESSAGE)

    def test_stale_fetch_result_is_dropped(self):
        state = TableViewState("resources")
        first = state.begin_fetch()
        second = state.begin_fetch()
        self.assertFalse(state.finish_fetch(first, [{"id": "old"}]))
        self.assertEqual(state.status, LOADING)
        self.assertTrue(state.finish_fetch(second, [{"id": "new"}]))
        self.assertFalse(state.fail_fetch(first, "late failure"))
        self.assertEqual(state.rows, [{"id": "new"}])
        self.assertEqual(state.status, LOADED)

    def test_empty_data_is_not_an_error(self):
        state = TableViewState("feedback")
        state.fetch(FakeBackend({"feedback": []}))
        self.assertEqual(state.status, LOADED)
        self.assertEqual(state.displayed, [])
        self.assertEqual(state.error, "")


class TestBrowseState(unittest.TestCase):
    def setUp(self):
        self.backend = FakeBackend({
            "resources": RESOURCES,
            "feedback": [{"id": 1, "message": "Great app"}],
        })
        self.state = BrowseState()
        self.state.load_if_needed(self.backend)

    def test_category_scenario(self):
        rows = [resource("a", "A", "CT Paper"), resource("b", "B", "Sem Paper"), resource("c", "C", "CT Paper")]
        state = BrowseState()
        state.fetch(FakeBackend({"resources": rows}))
        state.set_filter("resource_type", "CT Paper")
        state.apply_filters()
        self.assertEqual([r["id"] for r in state.displayed], ["a", "c"])
        self.assertTrue(state.filters_applied)

    def test_apply_filters_conjunction(self):
        self.state.set_filter("resource_type", "CT Paper")
        self.state.set_filter("title", "CALC")
        self.state.set_filter("year", "2nd Year")
        self.state.apply_filters()
        self.assertEqual([r["id"] for r in self.state.displayed], [3])
        for row in self.state.displayed:
            self.assertIn(row, self.state.rows)

    def test_reset_restores_full_set(self):
        self.state.set_filter("title", "physics")
        self.state.apply_filters()
        self.state.reset_filters()
        self.assertEqual(self.state.displayed, self.state.rows)
        self.assertEqual(self.state.filters, {"resource_type": "", "year": "", "title": ""})
        self.assertFalse(self.state.filters_applied)

    def test_select_table_fetches_once_and_clears_filters(self):
        self.state.set_filter("title", "calc")
        self.state.apply_filters()
        before = len(self.backend.calls_named("select_all"))

        self.state.select_table("feedback")
        self.assertEqual(self.state.filters, {"resource_type": "", "year": "", "title": ""})
        self.assertFalse(self.state.filters_applied)
        self.assertTrue(self.state.load_if_needed(self.backend))
        self.assertFalse(self.state.load_if_needed(self.backend))

        fetches = self.backend.calls_named("select_all")[before:]
        self.assertEqual(fetches, [("select_all", "feedback")])
        self.assertEqual(self.state.displayed, [{"id": 1, "message": "Great app"}])

    def test_unknown_table_rejected(self):
        with self.assertRaises(ValueError):
            self.state.select_table("users")

    def test_refetch_clears_applied_flag(self):
        self.state.set_filter("resource_type", "Sem Paper")
        self.state.apply_filters()
        self.state.request_fetch()
        self.state.load_if_needed(self.backend)
        self.assertFalse(self.state.filters_applied)
        self.assertEqual(self.state.displayed, self.state.rows)

    def test_projection_only_for_resources(self):
        self.assertEqual(self.state.columns(), ["title", "resource_type", "year"])
        self.assertNotIn("description", self.state.projected_rows()[0])

        self.state.select_table("feedback")
        self.state.load_if_needed(self.backend)
        self.assertEqual(self.state.columns(), ["id", "message"])
        self.assertEqual(self.state.projected_rows(), [{"id": 1, "message": "Great app"}])

    def test_narrow_filter_gives_empty_display_without_error(self):
        self.state.set_filter("title", "no such title")
        self.state.apply_filters()
        self.assertEqual(self.state.displayed, [])
        self.assertEqual(self.state.status, LOADED)


class TestEditState(unittest.TestCase):
    def setUp(self):
        self.backend = FakeBackend({"resources": RESOURCES})
        self.state = EditState()
        self.state.load_if_needed(self.backend)

    def test_enable_editing_copies_row(self):
        self.assertTrue(self.state.enable_editing(2))
        self.assertTrue(self.state.is_editing(2))
        self.assertEqual(self.state.edit_buffers[2], RESOURCES[1])
        self.assertIsNot(self.state.edit_buffers[2], self.state.rows[1])

    def test_unknown_row_not_editable(self):
        self.assertFalse(self.state.enable_editing(99))
        self.assertFalse(self.state.is_editing(99))

    def test_update_field_only_touches_buffer(self):
        self.state.enable_editing(1)
        self.state.update_field(1, "title", "Changed")
        self.assertEqual(self.state.edit_buffers[1]["title"], "Changed")
        self.assertEqual(self.state.rows[0]["title"], "Calculus I")

    def test_update_field_requires_edit_mode(self):
        with self.assertRaises(ValueError):
            self.state.update_field(1, "title", "x")

    def test_multiple_rows_edit_independently(self):
        self.state.enable_editing(1)
        self.state.enable_editing(3)
        self.state.update_field(3, "title", "Three")
        self.assertEqual(self.state.edit_buffers[1]["title"], "Calculus I")
        self.assertEqual(self.state.edit_buffers[3]["title"], "Three")

    def test_cancel_discards_buffer(self):
        self.state.enable_editing(1)
        self.state.update_field(1, "title", "Changed")
        self.state.cancel_editing(1)
        self.assertFalse(self.state.is_editing(1))
        self.assertNotIn(1, self.state.edit_buffers)

    def test_save_scenario(self):
        backend = FakeBackend({"resources": [resource(5, "Old Title")]})
        state = EditState()
        state.fetch(backend)
        state.enable_editing(5)
        state.update_field(5, "title", "New Title")

        self.assertTrue(state.save_changes(5, backend))

        self.assertFalse(state.is_editing(5))
        self.assertEqual(state.displayed[0]["id"], 5)
        self.assertEqual(state.displayed[0]["title"], "New Title")
        self.assertEqual(state.pop_flash(), ("success", "Changes saved successfully!"))
        update = backend.calls_named("update_row")[0]
        self.assertEqual(update[1:3], ("resources", 5))
        self.assertEqual(update[3], {**resource(5, "Old Title"), "title": "New Title"})
        # full reload after the update
        self.assertEqual(backend.calls[-1], ("select_all", "resources"))

    def test_save_failure_keeps_edit_state(self):
        self.state.enable_editing(1)
        self.state.update_field(1, "title", "Changed")
        self.backend.write_error = "row-level security"
        fetches_before = len(self.backend.calls_named("select_all"))

        self.assertFalse(self.state.save_changes(1, self.backend))

        self.assertTrue(self.state.is_editing(1))
        self.assertEqual(self.state.edit_buffers[1]["title"], "Changed")
        self.assertEqual(self.state.rows[0]["title"], "Calculus I")
        self.assertEqual(len(self.backend.calls_named("select_all")), fetches_before)
        level, message = self.state.pop_flash()
        self.assertEqual(level, "error")
        self.assertTrue(message.startswith("Error saving changes:"))
        self.assertIsNone(self.state.pop_flash())

    def test_delete_is_two_phase(self):
        self.state.request_delete(2)
        self.assertEqual(self.backend.calls_named("delete_row"), [])
        self.assertTrue(self.state.confirm_delete(self.backend))
        self.assertNotIn(2, [row["id"] for row in self.state.rows])
        self.assertIsNone(self.state.pending_delete)
        self.assertEqual(self.state.pop_flash(), ("success", "Record deleted successfully!"))

    def test_cancel_delete_issues_no_request(self):
        rows_before = list(self.state.rows)
        calls_before = list(self.backend.calls)
        self.state.request_delete(2)
        self.state.cancel_delete()
        self.assertIsNone(self.state.pending_delete)
        self.assertFalse(self.state.confirm_delete(self.backend))
        self.assertEqual(self.backend.calls, calls_before)
        self.assertEqual(self.state.rows, rows_before)

    def test_delete_failure_closes_prompt_and_keeps_rows(self):
        self.backend.write_error = "foreign key"
        self.state.request_delete(1)
        self.assertFalse(self.state.confirm_delete(self.backend))
        self.assertIsNone(self.state.pending_delete)
        self.assertIn(1, [row["id"] for row in self.state.rows])
        self.assertEqual(self.state.pop_flash()[0], "error")

    def test_search_recomputed_from_full_set(self):
        self.state.search("calc")
        self.assertEqual([r["id"] for r in self.state.displayed], [1, 3])
        self.state.search("calculus ii")
        self.assertEqual([r["id"] for r in self.state.displayed], [3])
        self.state.search("")
        self.assertEqual(self.state.displayed, self.state.rows)

    def test_search_survives_reload(self):
        self.state.search("physics")
        self.state.request_fetch()
        self.state.load_if_needed(self.backend)
        self.assertEqual([r["id"] for r in self.state.displayed], [2])

    def test_reload_drops_buffers_of_rows_gone_from_table(self):
        self.state.enable_editing(1)
        self.state.enable_editing(2)
        self.state.update_field(1, "title", "Kept")
        # Row 2 is deleted by someone else before the next reload
        self.backend.tables["resources"] = [r for r in self.backend.tables["resources"] if r["id"] != 2]
        self.state.request_fetch()
        self.state.load_if_needed(self.backend)
        self.assertFalse(self.state.is_editing(2))
        self.assertTrue(self.state.is_editing(1))
        self.assertEqual(self.state.edit_buffers[1]["title"], "Kept")

    def test_excluded_columns(self):
        self.assertEqual(self.state.columns(), ["title", "resource_type", "year"])

    def test_only_resources_editable(self):
        with self.assertRaises(ValueError):
            EditState("feedback")


if __name__ == "__main__":
    unittest.main()
