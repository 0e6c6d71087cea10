"""Unit tests for the lifecycle interceptor."""

from unittest.mock import MagicMock

import pytest

from auth_starter.hooks.interceptor import LifecycleInterceptor
from auth_starter.hooks.models import EngineError, EngineRequest
from auth_starter.logging.context import get_log_context
from auth_starter.notifications.models import NotificationDeliveryError, NotificationKind


def _engine(result=None, side_effect=None):
    engine = MagicMock()
    engine.handle.return_value = result
    engine.handle.side_effect = side_effect
    return engine


class TestDispatch:
    """Tests for LifecycleInterceptor.dispatch()."""

    def test_post_success_is_normalized(self):
        """Test a POST result is wrapped in a success envelope."""
        interceptor = LifecycleInterceptor(_engine({"id": "u1"}))
        response = interceptor.dispatch(EngineRequest("POST", "/sign-up/email", {"email": "a@b.c"}))

        assert response.normalized is True
        assert response.status_code == 201
        assert response.body["data"] == {"id": "u1"}
        assert response.body["message"] == "User registered successfully"

    def test_raised_engine_error_is_normalized(self):
        """Test a raised EngineError on POST becomes an error envelope."""
        engine = _engine(side_effect=EngineError("INVALID_EMAIL_OR_PASSWORD", "Invalid email or password"))
        response = LifecycleInterceptor(engine).dispatch(EngineRequest("POST", "/sign-in/email"))

        assert response.status_code == 401
        assert response.body["errors"] == [
            {"message": "Invalid email or password", "code": "INVALID_EMAIL_OR_PASSWORD"}
        ]

    def test_get_result_passes_through(self):
        """Test a GET result is emitted verbatim with 200."""
        raw = {"session": None}
        response = LifecycleInterceptor(_engine(raw)).dispatch(EngineRequest("GET", "/get-session"))

        assert response.normalized is False
        assert response.status_code == 200
        assert response.body is raw

    def test_get_engine_error_keeps_engine_status(self):
        """Test an EngineError on GET keeps the engine's own shape and status."""
        engine = _engine(EngineError("UNAUTHORIZED", "No session", status=401))
        response = LifecycleInterceptor(engine).dispatch(EngineRequest("GET", "/get-session"))

        assert response.normalized is False
        assert response.status_code == 401
        assert response.body == {"code": "UNAUTHORIZED", "message": "No session"}

    def test_get_engine_error_without_status_uses_table(self):
        """Test the table supplies the status when the engine set none."""
        engine = _engine(side_effect=EngineError("USER_NOT_FOUND", "Missing"))
        response = LifecycleInterceptor(engine).dispatch(EngineRequest("GET", "/user"))

        assert response.status_code == 404

    def test_notification_failure_fails_the_operation(self):
        """Test a delivery failure inside the engine becomes a 500 envelope."""
        engine = _engine(side_effect=NotificationDeliveryError(NotificationKind.PASSWORD_RESET))
        response = LifecycleInterceptor(engine).dispatch(EngineRequest("POST", "/forget-password"))

        assert response.status_code == 500
        assert response.body["message"] == "Failed to send password reset email"
        assert response.body["errors"][0]["code"] == "INTERNAL_SERVER_ERROR"
        assert "data" not in response.body

    def test_unexpected_exception_propagates(self):
        """Test engine bugs are left to the HTTP layer."""
        engine = _engine(side_effect=RuntimeError("bug"))
        with pytest.raises(RuntimeError):
            LifecycleInterceptor(engine).dispatch(EngineRequest("POST", "/sign-in"))

    def test_engine_receives_request(self):
        """Test the request object is handed to the engine unchanged."""
        engine = _engine({})
        request = EngineRequest("POST", "/sign-out", request_id="req-1")
        LifecycleInterceptor(engine).dispatch(request)

        engine.handle.assert_called_once_with(request)

    def test_hooks_wrap_the_engine_call(self):
        """Test the before hook runs ahead of the engine and the after hook follows it."""
        parent = MagicMock()
        request = EngineRequest("POST", "/sign-out")
        LifecycleInterceptor(parent.engine, parent.normalizer).dispatch(request)

        assert [name for name, _, _ in parent.mock_calls] == [
            "normalizer.before",
            "engine.handle",
            "normalizer.after",
        ]
        before_event = parent.normalizer.before.call_args[0][0]
        assert before_event.raw_result is None
        assert before_event.path == "/sign-out"

    def test_log_context_is_scoped_to_dispatch(self):
        """Test request fields are visible to the engine and cleared afterwards."""
        seen = {}

        def handle(request):
            seen.update(get_log_context())
            return {}

        engine = MagicMock()
        engine.handle.side_effect = handle
        LifecycleInterceptor(engine).dispatch(EngineRequest("POST", "/sign-out", request_id="req-9"))

        assert seen == {"request_id": "req-9", "auth_path": "/sign-out"}
        assert get_log_context() == {}
