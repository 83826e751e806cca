"""Custom exceptions for Push Relay."""
from typing import Any, Dict, Optional


class RelayException(Exception):
    """Base exception for Push Relay."""

    def __init__(
        self,
        message: str,
        error_code: str = "RELAY_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Render the exception as a JSON response body."""
        content: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.error_code,
        }
        if self.details:
            content["details"] = self.details
        return content


class DatabaseError(RelayException):
    """Database-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="DATABASE_ERROR",
            status_code=500,
            details=details,
        )


class ConfigurationError(RelayException):
    """Configuration-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            status_code=500,
            details=details,
        )


class WebhookSignatureError(RelayException):
    """Inbound webhook failed signature verification."""

    def __init__(
        self,
        message: str = "Invalid signature",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="INVALID_SIGNATURE",
            status_code=401,
            details=details,
        )


class ValidationError(RelayException):
    """Input validation errors."""

    def __init__(
        self, message: str, field: str = None, details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details=error_details,
        )


class MessagingProviderError(RelayException):
    """The messaging provider rejected or failed a send."""

    def __init__(
        self,
        message: str,
        provider_code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code=provider_code,
            status_code=500,
            details=details,
        )
