from src.error_handler import (
    ErrorHandler,
    MethodNotAllowedError,
    MissingFieldError,
    RouteNotFoundError,
    UpstreamFailureError,
)


def test_handle_exception_returns_envelope():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert out == {"error": "boom", "success": False}


def test_handle_exception_without_message_uses_generic_text():
    out = ErrorHandler().handle_exception(RuntimeError())
    assert out["error"] == "Internal server error"


def test_relay_errors_carry_their_status_codes():
    assert MissingFieldError("Missing userId").status_code == 400
    assert MethodNotAllowedError().status_code == 405
    assert RouteNotFoundError().status_code == 404
    assert UpstreamFailureError("boom").status_code == 500


def test_route_not_found_names_method_and_path():
    exc = RouteNotFoundError.for_request("DELETE", "/foo")
    assert exc.message == "Route not found: DELETE /foo"


def test_handle_relay_error_uses_default_message():
    out = ErrorHandler().handle_relay_error(UpstreamFailureError())
    assert out == {"error": "Payment processor request failed", "success": False}
