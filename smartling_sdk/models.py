"""
Data models for Smartling SDK.

This module defines the constants and data structures used throughout
the SDK: API environments, the operation path table, client configuration
and the response envelope returned by most endpoints.
"""

import os
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ConfigurationError


API_VERSION = "/v1"

SUCCESS_CODE = "SUCCESS"


class ApiBaseUrl(Enum):
    """Known Smartling API environments."""
    LIVE = "https://api.smartling.com"
    SANDBOX = "https://sandbox-api.smartling.com"


class Operation(Enum):
    """Smartling Files API operations and their versioned paths."""
    UPLOAD = API_VERSION + "/file/upload"
    GET = API_VERSION + "/file/get"
    LIST = API_VERSION + "/file/list"
    STATUS = API_VERSION + "/file/status"
    RENAME = API_VERSION + "/file/rename"
    DELETE = API_VERSION + "/file/delete"

    @property
    def path(self) -> str:
        return self.value


class RetrievalType(Enum):
    """Translation stage returned by ``get``. The API assumes PUBLISHED."""
    PENDING = "pending"
    PUBLISHED = "published"
    PSEUDO = "pseudo"


class FileCondition(Enum):
    """Named filters accepted by ``list``; combined with a logical OR."""
    HAVE_AT_LEAST_ONE_UNAPPROVED = "haveAtLeastOneUnapproved"
    HAVE_AT_LEAST_ONE_APPROVED = "haveAtLeastOneApproved"
    HAVE_AT_LEAST_ONE_TRANSLATED = "haveAtLeastOneTranslated"
    HAVE_ALL_TRANSLATED = "haveAllTranslated"
    HAVE_ALL_APPROVED = "haveAllApproved"
    HAVE_ALL_UNAPPROVED = "haveAllUnapproved"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings shared by every request a client makes."""

    base_url: str
    api_key: str = field(repr=False)
    project_id: str

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("API key is required.", config_key="api_key")
        if not self.project_id:
            raise ConfigurationError("Project ID is required.", config_key="project_id")
        if not self.base_url:
            raise ConfigurationError("API base URL is required.", config_key="base_url")
        if isinstance(self.base_url, ApiBaseUrl):
            object.__setattr__(self, "base_url", self.base_url.value)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ClientConfig":
        """
        Create ClientConfig from SMARTLING_* environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ClientConfig pointing at the live API unless
            SMARTLING_API_BASE_URL says otherwise
        """
        environ = os.environ if environ is None else environ
        return cls(
            base_url=environ.get("SMARTLING_API_BASE_URL") or ApiBaseUrl.LIVE.value,
            api_key=environ.get("SMARTLING_API_KEY", ""),
            project_id=environ.get("SMARTLING_PROJECT_ID", ""),
        )


@dataclass
class ResponseEnvelope:
    """The ``{"response": {"code": ..., "data": ..., "messages": [...]}}`` wrapper."""

    code: Optional[str]
    data: Any = None
    messages: List[Any] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Any) -> "ResponseEnvelope":
        """Create ResponseEnvelope from a decoded response body."""
        response = body.get("response") if isinstance(body, dict) else None
        if not isinstance(response, dict):
            return cls(code=None)

        return cls(
            code=response.get("code"),
            data=response.get("data"),
            messages=list(response.get("messages") or []),
            raw=response,
        )

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE
