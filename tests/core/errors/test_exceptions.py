"""
Tests for the exception hierarchy.
"""

from core.errors import (
    AuthError,
    ErrorCategory,
    InvalidInputError,
    IshRemoteError,
    PermanentError,
    RemoteLookupError,
    SessionNotFoundError,
    TransientError,
    UnmappedCategoryError,
    error_logical_id,
)


class TestErrorCategory:
    def test_all_categories_exist(self):
        assert ErrorCategory.TRANSIENT.value == "transient"
        assert ErrorCategory.AUTH.value == "auth"
        assert ErrorCategory.PERMANENT.value == "permanent"
        assert ErrorCategory.UNKNOWN.value == "unknown"


class TestIshRemoteError:
    def test_basic_error(self):
        err = IshRemoteError("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.cause is None
        assert err.context == {}
        assert err.category == ErrorCategory.UNKNOWN

    def test_error_with_cause(self):
        cause = ValueError("Invalid value")
        err = IshRemoteError("Wrapper message", cause=cause)
        assert err.cause == cause
        assert str(err) == "Wrapper message | Caused by: Invalid value"

    def test_retryable_by_category(self):
        assert IshRemoteError("x").is_retryable is True
        assert TransientError("x").is_retryable is True
        assert PermanentError("x").is_retryable is False
        assert AuthError("x").is_retryable is False


class TestFolderLocationErrors:
    def test_invalid_input_is_permanent(self):
        err = InvalidInputError("LogicalId must not be empty", value="")
        assert isinstance(err, PermanentError)
        assert err.value == ""
        assert error_logical_id(err) is None

    def test_remote_lookup_error_carries_details(self):
        cause = OSError("reset")
        err = RemoteLookupError(
            "Connection error", logical_id="GUID-1", status_code=None,
            category=ErrorCategory.TRANSIENT, cause=cause,
        )
        assert err.logical_id == "GUID-1"
        assert err.category == ErrorCategory.TRANSIENT
        assert err.is_retryable is True
        assert "Caused by: reset" in str(err)
        assert error_logical_id(err) == "GUID-1"

    def test_remote_lookup_category_is_per_instance(self):
        permanent = RemoteLookupError("Not found", category=ErrorCategory.PERMANENT)
        transient = RemoteLookupError("Server error")
        assert permanent.category == ErrorCategory.PERMANENT
        assert transient.category == ErrorCategory.TRANSIENT

    def test_unmapped_category(self):
        err = UnmappedCategoryError("Archive", logical_id="GUID-7")
        assert isinstance(err, PermanentError)
        assert err.base_folder == "Archive"
        assert "'Archive'" in str(err)
        assert error_logical_id(err) == "GUID-7"

    def test_session_not_found(self):
        err = SessionNotFoundError()
        assert "set_current_session" in str(err)

    def test_error_logical_id_ignores_foreign_exceptions(self):
        assert error_logical_id(ValueError("x")) is None
