from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest

from smartling_sdk.models import ClientConfig


def _encode(body: Any, text: Optional[str]) -> bytes:
    return (text if text is not None else json.dumps(body)).encode("utf-8")


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        text: Optional[str] = None,
        content: Optional[bytes] = None,
    ):
        self.status_code = status_code
        self.content = content if content is not None else _encode(body, text)


class FakeSession:
    """Stands in for requests.Session; records every call."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[BaseException] = None):
        self.response = response or FakeResponse(body={"response": {"code": "SUCCESS", "data": None}})
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.headers: Dict[str, str] = {}
        self.closed = False

    def request(self, method, url, **kwargs):
        call = {"method": method, "url": url, "kwargs": kwargs}
        files = kwargs.get("files")
        if files:
            name, handle, content_type = files["file"]
            call["upload"] = (name, handle.read(), content_type)
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class FakeAsyncResponse:
    def __init__(
        self,
        status: int = 200,
        body: Any = None,
        text: Optional[str] = None,
        content: Optional[bytes] = None,
    ):
        self.status = status
        self._content = content if content is not None else _encode(body, text)

    async def read(self):
        return self._content


class _RequestContext:
    def __init__(self, session: "FakeAsyncSession"):
        self.session = session

    async def __aenter__(self):
        if self.session.error is not None:
            raise self.session.error
        return self.session.response

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeAsyncSession:
    """Stands in for aiohttp.ClientSession; records every call."""

    def __init__(self, response: Optional[FakeAsyncResponse] = None, error: Optional[BaseException] = None):
        self.response = response or FakeAsyncResponse(body={"response": {"code": "SUCCESS", "data": None}})
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, "kwargs": kwargs})
        return _RequestContext(self)

    async def close(self):
        self.closed = True


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url="https://api.example.test", api_key="key-123", project_id="proj-9")


def envelope(code: str = "SUCCESS", data: Any = None, messages: Optional[list] = None) -> Dict[str, Any]:
    response: Dict[str, Any] = {"code": code}
    if data is not None:
        response["data"] = data
    if messages is not None:
        response["messages"] = messages
    return {"response": response}
