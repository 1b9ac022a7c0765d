"""
Asynchronous Smartling client implementation.

This module provides an async/await compatible client with the same
operations and the same success rules as ``SmartlingClient``.
"""

import asyncio
import aiohttp
import logging
from typing import Optional, Dict, Any, Union
from pathlib import Path

from .models import ApiBaseUrl, ClientConfig, Operation
from .exceptions import TransportError
from .utils import (
    build_request_url, decode_body, extract_upload_data, guess_mime_type,
    mask_api_key, merge_dicts, stat_local_file, unwrap_envelope,
)

logger = logging.getLogger(__name__)


class AsyncSmartlingClient:
    """
    Asynchronous client for the Smartling Files API.

    Concurrent calls are safe: the configuration is immutable and every call
    builds its own parameters.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        project_id: Optional[str] = None,
        base_url: Union[str, ApiBaseUrl] = ApiBaseUrl.LIVE,
        timeout: Optional[float] = 30,
        session: Optional[aiohttp.ClientSession] = None,
        config: Optional[ClientConfig] = None,
    ):
        """
        Initialize the async Smartling client.

        Args:
            api_key: Smartling API key
            project_id: Smartling project identifier
            base_url: An ``ApiBaseUrl`` preset or a custom API URL
            timeout: Total request timeout in seconds
            session: aiohttp session to use instead of a private one
            config: Ready-made configuration, replaces the three fields above
        """
        if config is None:
            base_url = base_url.value if isinstance(base_url, ApiBaseUrl) else base_url
            config = ClientConfig(base_url=base_url, api_key=api_key, project_id=project_id)

        self.config = config
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._owns_session = session is None

        # Session will be created when needed
        self._session: Optional[aiohttp.ClientSession] = session

    @classmethod
    def from_env(cls, **kwargs) -> "AsyncSmartlingClient":
        """Create a client from SMARTLING_* environment variables."""
        return cls(config=ClientConfig.from_env(), **kwargs)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": "Smartling-Python-SDK/1.0.0"},
                timeout=self.timeout,
            )

        return self._session

    def build_request_url(self, operation: Operation, extra_params: Optional[Dict[str, Any]] = None) -> str:
        """Return the URL for ``operation`` with credentials and params encoded."""
        return build_request_url(self.config, operation, extra_params)

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        """Perform one request and return the decoded body of a 200 reply."""
        session = await self._get_session()
        logger.debug("%s %s", method, mask_api_key(url, self.config.api_key))

        try:
            async with session.request(method, url, **kwargs) as response:
                status = response.status
                body = decode_body(await response.read())
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {e}", original=e) from e
        except asyncio.TimeoutError as e:
            raise TransportError("Request timed out", original=e) from e

        if status != 200:
            raise TransportError(
                f"Smartling API responded with HTTP {status}",
                status_code=status,
                body=body,
            )

        return body

    async def upload(
        self,
        file_path: Union[str, Path],
        file_uri: str,
        file_type: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Upload original source content to Smartling.

        Returns ``response.data`` without checking the envelope code. Raises
        ``FileAccessError`` before any request if the file cannot be read.

        The stat runs in the default executor. The open file handle is
        streamed by ``FormData``, which reads it off the event loop.
        """
        params = merge_dicts(
            {"fileUri": file_uri, "fileType": file_type, "approved": False},
            options,
        )

        loop = asyncio.get_running_loop()
        file_stat = await loop.run_in_executor(None, stat_local_file, file_path)
        url = self.build_request_url(Operation.UPLOAD, params)
        filename = Path(file_path).name

        logger.info("Uploading %s (%d bytes) as %s", file_path, file_stat.st_size, file_uri)
        with open(file_path, "rb") as f:
            form_data = aiohttp.FormData()
            form_data.add_field("file", f, filename=filename, content_type=guess_mime_type(filename))
            body = await self._request("POST", url, data=form_data)

        return extract_upload_data(body)

    async def get(self, file_uri: str, options: Optional[Dict[str, Any]] = None) -> Any:
        """Download a file: parsed JSON, UTF-8 text, or raw bytes on HTTP 200."""
        params = merge_dicts({"fileUri": file_uri}, options)
        return await self._request("GET", self.build_request_url(Operation.GET, params))

    async def list(self, options: Optional[Dict[str, Any]] = None) -> Any:
        """List recently uploaded files and return ``response.data``."""
        body = await self._request("GET", self.build_request_url(Operation.LIST, options))
        return unwrap_envelope(body)

    async def status(self, file_uri: str, locale: str) -> Dict[str, Any]:
        """Get translation status of ``file_uri`` in ``locale``."""
        params = {"fileUri": file_uri, "locale": locale}
        body = await self._request("GET", self.build_request_url(Operation.STATUS, params))
        return unwrap_envelope(body, full_response=True)

    async def rename(self, file_uri: str, new_file_uri: str) -> Dict[str, Any]:
        params = {"fileUri": file_uri, "newFileUri": new_file_uri}
        body = await self._request("POST", self.build_request_url(Operation.RENAME, params))
        return unwrap_envelope(body, full_response=True)

    async def delete(self, file_uri: str) -> Dict[str, Any]:
        """Request deletion of ``file_uri``; the server completes it later."""
        params = {"fileUri": file_uri}
        body = await self._request("DELETE", self.build_request_url(Operation.DELETE, params))
        return unwrap_envelope(body, full_response=True)

    async def close(self):
        """Close the client session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
