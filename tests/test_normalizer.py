"""Unit tests for the lifecycle normalizer."""

from unittest.mock import patch

import pytest

from auth_starter.hooks.models import EngineError, LifecycleEvent
from auth_starter.hooks.normalizer import (
    ERROR_STATUS_CODES,
    GENERIC_ERROR_MESSAGE,
    LifecycleNormalizer,
    extract_error,
    status_for_code,
    success_route,
)
from auth_starter.hooks.models import MalformedLifecycleResult
from auth_starter.responses import Envelope


@pytest.fixture
def normalizer():
    return LifecycleNormalizer()


class TestStatusTable:
    """Tests for the error code -> status table."""

    @pytest.mark.parametrize(
        "code,status",
        [
            ("INVALID_EMAIL_OR_PASSWORD", 401),
            ("INVALID_CREDENTIALS", 401),
            ("INVALID_PASSWORD", 401),
            ("UNAUTHORIZED", 401),
            ("USER_NOT_FOUND", 404),
            ("EMAIL_ALREADY_EXISTS", 409),
            ("CONFLICT", 409),
            ("EMAIL_NOT_VERIFIED", 403),
            ("USER_SUSPENDED", 403),
            ("FORBIDDEN", 403),
            ("BAD_REQUEST", 400),
            ("INVALID_EMAIL", 400),
            ("PASSWORD_TOO_WEAK", 400),
            ("INVALID_INPUT", 400),
            ("VALIDATION_FAILED", 400),
            ("RATE_LIMIT_EXCEEDED", 429),
            ("TOO_MANY_REQUESTS", 429),
            ("INTERNAL_SERVER_ERROR", 500),
        ],
    )
    def test_known_codes(self, code, status):
        """Test every table code resolves to its status."""
        assert status_for_code(code) == status

    def test_table_is_complete(self):
        """Test the table holds exactly the documented codes."""
        assert len(ERROR_STATUS_CODES) == 18

    def test_table_is_read_only(self):
        """Test the table cannot be mutated at runtime."""
        with pytest.raises(TypeError):
            ERROR_STATUS_CODES["NEW_CODE"] = 418

    @pytest.mark.parametrize("code", ["SOMETHING_ELSE", "", None, 42])
    def test_unknown_codes_default_to_400(self, code):
        """Test unknown or missing codes map to 400."""
        assert status_for_code(code) == 400


class TestSuccessRoutes:
    """Tests for path -> success message resolution."""

    @pytest.mark.parametrize(
        "path,message,status",
        [
            ("/sign-up/email", "User registered successfully", 201),
            ("/sign-in/email", "User signed in successfully", 200),
            ("/change-password", "Password changed successfully", 200),
            ("/verify-email", "Email verified successfully", 200),
            ("/forget-password", "Password reset email sent successfully", 200),
            ("/reset-password", "Password reset successfully", 200),
            ("/sign-out", "User signed out successfully", 200),
            ("/update-user", "Success", 200),
        ],
    )
    def test_routes(self, path, message, status):
        """Test each path fragment selects its message and status."""
        assert success_route(path) == (message, status)

    def test_first_match_wins(self):
        """Test fragments are checked in order."""
        assert success_route("/sign-up/sign-in")[0] == "User registered successfully"


class TestExtractError:
    """Tests for reading (code, message) from engine results."""

    def test_from_engine_error(self):
        """Test EngineError instances."""
        assert extract_error(EngineError("USER_NOT_FOUND", "User not found")) == (
            "USER_NOT_FOUND",
            "User not found",
        )

    def test_from_nested_mapping(self):
        """Test a mapping with a nested error object."""
        raw = {"error": {"code": "CONFLICT", "message": "Already exists"}}
        assert extract_error(raw) == ("CONFLICT", "Already exists")

    def test_top_level_fields_win(self):
        """Test top-level code/message override nested ones."""
        raw = {"error": {"code": "A", "message": "nested"}, "code": "B", "message": "top"}
        assert extract_error(raw) == ("B", "top")

    def test_string_error_marker(self):
        """Test a plain string error marker becomes the message."""
        assert extract_error({"error": "Nope"}) == (None, "Nope")

    def test_missing_message_uses_generic_text(self):
        """Test an empty message falls back to the generic one."""
        assert extract_error({"error": True, "message": "  "}) == (None, GENERIC_ERROR_MESSAGE)

    def test_unclassifiable_result(self):
        """Test non-mapping, non-exception results are rejected."""
        with pytest.raises(MalformedLifecycleResult):
            extract_error(["not", "an", "error"])


class TestNormalize:
    """Tests for LifecycleNormalizer.normalize()."""

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
    def test_non_post_passes_through(self, normalizer, method):
        """Test non-mutating requests are returned untouched."""
        raw = {"session": {"id": "s1"}}
        event = LifecycleEvent(method, "/get-session", raw)
        assert normalizer.normalize(event) is raw

    def test_non_post_error_passes_through(self, normalizer):
        """Test errors on non-mutating requests are not normalized either."""
        raw = EngineError("UNAUTHORIZED", "No session")
        assert normalizer.normalize(LifecycleEvent("GET", "/get-session", raw)) is raw

    def test_before_hook_is_pass_through(self, normalizer):
        """Test the before hook has nothing to normalize."""
        assert normalizer.before(LifecycleEvent("POST", "/sign-in/email")) is None

    def test_before_hook_never_builds_an_envelope(self, normalizer):
        """Test the before hook skips normalization even for a mapped POST."""
        with patch.object(normalizer, "normalize") as normalize:
            assert normalizer.before(LifecycleEvent("POST", "/sign-up/email")) is None

        normalize.assert_not_called()

    def test_lowercase_method(self, normalizer):
        """Test method matching ignores case."""
        result = normalizer.after(LifecycleEvent("post", "/sign-out", {"success": True}))
        assert isinstance(result, Envelope)

    def test_user_not_found_on_sign_in(self, normalizer):
        """Test an engine error on sign-in becomes a 404 envelope."""
        raw = {"error": {"code": "USER_NOT_FOUND", "message": "User not found"}}
        envelope = normalizer.after(LifecycleEvent("POST", "/sign-in/email", raw))

        assert envelope.status_code == 404
        assert envelope.message == "User not found"
        assert len(envelope.errors) == 1
        assert envelope.errors[0].code == "USER_NOT_FOUND"
        assert envelope.errors[0].message == "User not found"
        assert envelope.path == "/sign-in/email"
        assert not envelope.has_data

    def test_sign_up_success(self, normalizer):
        """Test a successful sign-up becomes a 201 envelope with the payload."""
        envelope = normalizer.after(LifecycleEvent("POST", "/sign-up/email", {"id": "u1"}))

        assert envelope.status_code == 201
        assert envelope.message == "User registered successfully"
        assert envelope.data == {"id": "u1"}
        assert envelope.errors is None

    def test_unknown_code_is_400(self, normalizer):
        """Test an unknown engine code yields a 400 envelope."""
        raw = EngineError("WEIRD_CODE", "Something odd")
        envelope = normalizer.after(LifecycleEvent("POST", "/sign-in/email", raw))

        assert envelope.status_code == 400
        assert envelope.errors[0].code == "WEIRD_CODE"

    def test_engine_status_is_ignored_for_post(self, normalizer):
        """Test POST error statuses always come from the table."""
        raw = EngineError("USER_NOT_FOUND", "User not found", status=418)
        assert normalizer.after(LifecycleEvent("POST", "/sign-in", raw)).status_code == 404

    def test_malformed_result_is_downgraded(self, normalizer):
        """Test a result that breaks classification becomes a generic 400."""

        class Exploding(dict):
            def get(self, key, default=None):
                raise RuntimeError("boom")

        envelope = normalizer.after(LifecycleEvent("POST", "/sign-in", Exploding()))

        assert envelope.status_code == 400
        assert envelope.message == GENERIC_ERROR_MESSAGE
        assert envelope.errors == []

    def test_none_result_on_post(self, normalizer):
        """Test a POST event without a result is left alone."""
        assert normalizer.after(LifecycleEvent("POST", "/sign-out", None)) is None
