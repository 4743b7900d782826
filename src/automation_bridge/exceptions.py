"""Custom exception classes for the automation bridge."""

from typing import Any, Dict, Optional


class APIException(Exception):
    """Base exception for all service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {"error": self.message}


class ClientInputError(APIException):
    """Exception raised for malformed or missing request input."""

    def __init__(
        self,
        message: str = "Invalid request",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=400,
            code="CLIENT_INPUT_ERROR",
            details=details,
        )


class SignatureError(APIException):
    """Exception raised when a webhook signature does not verify."""

    def __init__(
        self,
        message: str = "Invalid signature",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=401,
            code="SIGNATURE_ERROR",
            details=details,
        )


class ConfigurationError(APIException):
    """Exception raised when required configuration is missing."""

    def __init__(
        self,
        message: str = "Service is not configured",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=500,
            code="CONFIGURATION_ERROR",
            details=details,
        )


class UpstreamError(APIException):
    """Exception raised when a call to the platform fails."""

    def __init__(
        self,
        service: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_message = message or f"External service '{service}' failed"
        error_details = details or {}
        error_details["service"] = service
        super().__init__(
            message=error_message,
            status_code=500,
            code="UPSTREAM_ERROR",
            details=error_details,
        )


class PersistenceError(APIException):
    """Exception raised for database-related errors."""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=500,
            code="PERSISTENCE_ERROR",
            details=details,
        )
