"""Tests for core.logging.context module."""

from core.logging.context import clear_log_context, get_log_context, set_log_context


class TestLogContext:
    def setup_method(self):
        clear_log_context()

    def teardown_method(self):
        clear_log_context()

    def test_defaults_are_empty(self):
        assert get_log_context() == {"session": "", "operation": "", "trace_id": ""}

    def test_set_all_fields(self):
        set_log_context(session="prod", operation="folder-location", trace_id="t1")
        assert get_log_context() == {
            "session": "prod",
            "operation": "folder-location",
            "trace_id": "t1",
        }

    def test_partial_set_preserves_others(self):
        set_log_context(session="prod", operation="folder-location")
        set_log_context(operation="other")
        ctx = get_log_context()
        assert ctx["session"] == "prod"
        assert ctx["operation"] == "other"

    def test_clear_resets_all(self):
        set_log_context(session="prod", trace_id="t1")
        clear_log_context()
        assert all(v == "" for v in get_log_context().values())
