"""
Synchronous Smartling client implementation.

This module provides the main synchronous client for the Smartling Files API.
Every operation issues exactly one HTTP request and either returns the
normalized result or raises a ``SmartlingError`` subclass.
"""

import logging
from typing import Optional, Dict, Any, Union
from pathlib import Path
import requests

from .models import ApiBaseUrl, ClientConfig, Operation
from .exceptions import TransportError
from .utils import (
    build_request_url, decode_body, extract_upload_data, guess_mime_type,
    mask_api_key, merge_dicts, stat_local_file, unwrap_envelope,
)

logger = logging.getLogger(__name__)


class SmartlingClient:
    """
    Synchronous client for the Smartling Files API.

    Note the two success rules the API has always had: ``upload`` and ``get``
    succeed on any HTTP 200 reply, whatever the envelope says, while ``list``,
    ``status``, ``rename`` and ``delete`` also require the envelope code to be
    ``SUCCESS`` and raise ``ApiLogicError`` otherwise.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        project_id: Optional[str] = None,
        base_url: Union[str, ApiBaseUrl] = ApiBaseUrl.LIVE,
        timeout: Optional[float] = 30,
        session: Optional[requests.Session] = None,
        config: Optional[ClientConfig] = None,
    ):
        """
        Initialize the Smartling client.

        Args:
            api_key: Smartling API key
            project_id: Smartling project identifier
            base_url: An ``ApiBaseUrl`` preset or a custom API URL
            timeout: Request timeout in seconds, handed to requests
            session: HTTP session to use instead of a private one
            config: Ready-made configuration, replaces the three fields above
        """
        if config is None:
            base_url = base_url.value if isinstance(base_url, ApiBaseUrl) else base_url
            config = ClientConfig(base_url=base_url, api_key=api_key, project_id=project_id)

        self.config = config
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

        if self._owns_session:
            self.session.headers.update({
                "User-Agent": "Smartling-Python-SDK/1.0.0",
            })

    @classmethod
    def from_env(cls, **kwargs) -> "SmartlingClient":
        """Create a client from SMARTLING_* environment variables."""
        return cls(config=ClientConfig.from_env(), **kwargs)

    def build_request_url(self, operation: Operation, extra_params: Optional[Dict[str, Any]] = None) -> str:
        """Return the URL for ``operation`` with credentials and params encoded."""
        return build_request_url(self.config, operation, extra_params)

    def _request(self, method: str, url: str, **kwargs) -> Any:
        """Perform one request and return the decoded body of a 200 reply."""
        logger.debug("%s %s", method, mask_api_key(url, self.config.api_key))

        try:
            response = self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}", original=e) from e

        body = decode_body(response.content)
        if response.status_code != 200:
            raise TransportError(
                f"Smartling API responded with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        return body

    def upload(
        self,
        file_path: Union[str, Path],
        file_uri: str,
        file_type: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Upload original source content to Smartling.

        Args:
            file_path: Local file to upload
            file_uri: Value that uniquely identifies the uploaded file,
                e.g. /myproject/i18n/ui.properties
            file_type: Smartling file type identifier (android, ios, gettext,
                javaProperties, yaml, xliff, xml, json, docx, ...)
            options: Extra parameters such as ``approved``, ``callbackUrl``
                or ``{"smartling": {...}}`` parser directives

        Returns:
            The ``response.data`` payload. The envelope code is not checked.

        Raises:
            FileAccessError: If the local file cannot be read; nothing is sent
            TransportError: If the request fails or the status is not 200
        """
        params = merge_dicts(
            {"fileUri": file_uri, "fileType": file_type, "approved": False},
            options,
        )

        file_stat = stat_local_file(file_path)
        url = self.build_request_url(Operation.UPLOAD, params)
        filename = Path(file_path).name

        logger.info("Uploading %s (%d bytes) as %s", file_path, file_stat.st_size, file_uri)
        with open(file_path, "rb") as f:
            files = {"file": (filename, f, guess_mime_type(filename))}
            body = self._request("POST", url, files=files)

        return extract_upload_data(body)

    def get(self, file_uri: str, options: Optional[Dict[str, Any]] = None) -> Any:
        """
        Download a file from Smartling.

        Args:
            file_uri: Value that uniquely identifies the file
            options: ``locale``, ``retrievalType`` (pending, published or
                pseudo) and ``includeOriginalStrings``

        Returns:
            Parsed JSON, UTF-8 text as ``str``, or the raw ``bytes`` of a
            binary file (docx, pptx, xlsx, idml)
        """
        params = merge_dicts({"fileUri": file_uri}, options)
        return self._request("GET", self.build_request_url(Operation.GET, params))

    def list(self, options: Optional[Dict[str, Any]] = None) -> Any:
        """
        List recently uploaded files.

        Args:
            options: Filters and paging: ``locale``, ``uriMask``,
                ``fileTypes``, ``lastUploadedAfter``, ``lastUploadedBefore``,
                ``offset``, ``limit``, ``conditions``, ``orderBy``

        Returns:
            The ``response.data`` payload
        """
        body = self._request("GET", self.build_request_url(Operation.LIST, options))
        return unwrap_envelope(body)

    def status(self, file_uri: str, locale: str) -> Dict[str, Any]:
        """Get translation status of ``file_uri`` in ``locale``."""
        params = {"fileUri": file_uri, "locale": locale}
        body = self._request("GET", self.build_request_url(Operation.STATUS, params))
        return unwrap_envelope(body, full_response=True)

    def rename(self, file_uri: str, new_file_uri: str) -> Dict[str, Any]:
        """
        Rename an uploaded file.

        ``new_file_uri`` must not exist in the project yet; the API rejects it
        otherwise.
        """
        params = {"fileUri": file_uri, "newFileUri": new_file_uri}
        body = self._request("POST", self.build_request_url(Operation.RENAME, params))
        return unwrap_envelope(body, full_response=True)

    def delete(self, file_uri: str) -> Dict[str, Any]:
        """
        Remove a file from Smartling.

        Deletion completes asynchronously on the server; until it does, the
        same ``file_uri`` cannot be uploaded again.
        """
        params = {"fileUri": file_uri}
        body = self._request("DELETE", self.build_request_url(Operation.DELETE, params))
        return unwrap_envelope(body, full_response=True)

    def close(self):
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
