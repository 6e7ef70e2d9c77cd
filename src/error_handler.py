"""Error taxonomy and envelope helpers for the checkout relay."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when the service cannot start with the configuration it was given."""


class RelayError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class MissingFieldError(RelayError):
    status_code = 400
    default_message = "Missing required field"


class MethodNotAllowedError(RelayError):
    status_code = 405
    default_message = "Method not allowed"


class RouteNotFoundError(RelayError):
    status_code = 404
    default_message = "Route not found"

    @classmethod
    def for_request(cls, method: str, path: str) -> "RouteNotFoundError":
        return cls(f"Route not found: {method} {path}")


class UpstreamFailureError(RelayError):
    """Any failure raised by or during a call to the payment processor."""

    status_code = 500
    default_message = "Payment processor request failed"


class ErrorHandler:
    def error_envelope(self, message: str) -> Dict[str, Any]:
        return {"error": message, "success": False}

    def handle_relay_error(self, exc: RelayError, context: Dict[str, Any] = None) -> Dict[str, Any]:
        if exc.status_code >= 500:
            logger.error("Request failed (%s): %s context=%s", exc.status_code, exc.message, context or {}, exc_info=exc)
        else:
            logger.warning("Request rejected (%s): %s context=%s", exc.status_code, exc.message, context or {})
        return self.error_envelope(exc.message)

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in checkout relay: %s context=%s", exc, context or {}, exc_info=exc)
        return self.error_envelope(str(exc) or "Internal server error")
