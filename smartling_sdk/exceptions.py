"""
Custom exceptions for Smartling SDK.

This module defines all the exception classes used throughout the SDK
for proper error handling and user feedback.
"""

from typing import Any, List, Optional


class SmartlingError(Exception):
    """Base exception for all Smartling SDK errors."""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self):
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(SmartlingError):
    """Raised when SDK configuration is invalid."""

    def __init__(self, message: str = "Invalid configuration", config_key: str = None, **kwargs):
        super().__init__(message, error_code="CONFIG_ERROR", **kwargs)
        self.config_key = config_key


class FileAccessError(SmartlingError):
    """Raised when a local file cannot be read before an upload."""

    def __init__(
        self,
        message: str = "Local file is not accessible",
        file_path: str = None,
        original: Optional[OSError] = None,
        **kwargs
    ):
        super().__init__(message, error_code="FILE_ACCESS_ERROR", **kwargs)
        self.file_path = file_path
        self.original = original


class TransportError(SmartlingError):
    """
    Raised when the HTTP exchange itself failed.

    ``original`` holds the exception raised by the HTTP client for network
    level failures. For a completed exchange with a non-200 status it is
    ``None`` and ``status_code`` carries the only signal there is.
    """

    def __init__(
        self,
        message: str = "Network operation failed",
        status_code: Optional[int] = None,
        original: Optional[BaseException] = None,
        body: Any = None,
        **kwargs
    ):
        super().__init__(message, error_code="TRANSPORT_ERROR", **kwargs)
        self.status_code = status_code
        self.original = original
        self.body = body


class ApiLogicError(SmartlingError):
    """Raised when the response envelope code is not SUCCESS."""

    def __init__(self, body: Any, message: str = None, **kwargs):
        response = body.get("response") if isinstance(body, dict) else None
        response = response if isinstance(response, dict) else {}

        self.body = body
        self.code: Optional[str] = response.get("code")
        self.messages: List[Any] = list(response.get("messages") or [])

        if message is None:
            message = "; ".join(str(m) for m in self.messages) or "Smartling API reported a failure"
        super().__init__(message, error_code=self.code or "API_ERROR", **kwargs)
