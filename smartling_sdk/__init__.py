"""
Smartling SDK - Python client for the Smartling Files API.

This package provides:
- Synchronous and async/await clients for upload, get, list, status,
  rename and delete
- Request URL building with API key and project authentication
- Envelope-aware response normalization and a small error taxonomy
- A CLI tool for working with project files from the shell
"""

__version__ = "1.0.0"

from .client import SmartlingClient
from .async_client import AsyncSmartlingClient
from .models import (
    API_VERSION,
    ApiBaseUrl,
    ClientConfig,
    FileCondition,
    Operation,
    ResponseEnvelope,
    RetrievalType,
)
from .exceptions import (
    SmartlingError,
    ConfigurationError,
    FileAccessError,
    TransportError,
    ApiLogicError,
)
from .utils import build_request_url

__all__ = [
    # Main clients
    "SmartlingClient",
    "AsyncSmartlingClient",

    # Configuration and constants
    "API_VERSION",
    "ApiBaseUrl",
    "ClientConfig",
    "FileCondition",
    "Operation",
    "ResponseEnvelope",
    "RetrievalType",
    "build_request_url",

    # Exceptions
    "SmartlingError",
    "ConfigurationError",
    "FileAccessError",
    "TransportError",
    "ApiLogicError",
]
