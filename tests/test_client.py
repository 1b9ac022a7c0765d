from __future__ import annotations

import pytest
import requests

from smartling_sdk import SmartlingClient
from smartling_sdk.exceptions import ApiLogicError, FileAccessError, TransportError
from smartling_sdk.models import ApiBaseUrl, Operation
from smartling_sdk.utils import parse_request_url

from conftest import FakeResponse, FakeSession, envelope


def make_client(config, **session_kwargs) -> tuple[SmartlingClient, FakeSession]:
    session = FakeSession(**session_kwargs)
    return SmartlingClient(config=config, session=session), session


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "ui.properties"
    path.write_text("greeting=Hello\n", encoding="utf-8")
    return path


def test_client_builds_config_from_arguments() -> None:
    client = SmartlingClient(api_key="k", project_id="p", base_url=ApiBaseUrl.SANDBOX, session=FakeSession())

    assert client.config.base_url == "https://sandbox-api.smartling.com"
    assert client.build_request_url(Operation.LIST).startswith(
        "https://sandbox-api.smartling.com/v1/file/list?apiKey=k&projectId=p"
    )


def test_upload_posts_multipart_file(config, source_file) -> None:
    client, session = make_client(
        config, response=FakeResponse(body=envelope(data={"overWritten": False, "stringCount": 1}))
    )

    data = client.upload(source_file, "/files/ui.properties", "javaProperties")

    assert data == {"overWritten": False, "stringCount": 1}
    (call,) = session.calls
    assert call["method"] == "POST"
    assert call["url"].startswith("https://api.example.test/v1/file/upload?")
    assert parse_request_url(call["url"]) == {
        "apiKey": "key-123",
        "projectId": "proj-9",
        "fileUri": "/files/ui.properties",
        "fileType": "javaProperties",
        "approved": "false",
    }
    assert call["upload"][0] == "ui.properties"
    assert call["upload"][1] == b"greeting=Hello\n"
    assert list(call["kwargs"]["files"]) == ["file"]


def test_upload_options_override_defaults(config, source_file) -> None:
    client, session = make_client(config)

    client.upload(
        str(source_file),
        "/x",
        "android",
        {"approved": True, "callbackUrl": "https://cb.test/done", "smartling": {"namespace": "ui"}},
    )

    query = parse_request_url(session.calls[0]["url"])
    assert query["approved"] == "true"
    assert query["callbackUrl"] == "https://cb.test/done"
    assert query["smartling.namespace"] == "ui"


def test_upload_missing_file_makes_no_request(config, tmp_path) -> None:
    client, session = make_client(config)

    with pytest.raises(FileAccessError) as exc_info:
        client.upload(tmp_path / "missing.txt", "/x", "android")

    assert isinstance(exc_info.value.original, FileNotFoundError)
    assert session.calls == []


def test_upload_resolves_even_when_envelope_reports_error(config, source_file) -> None:
    # upload has never looked at the envelope code
    body = envelope(code="VALIDATION_ERROR", data={"stringCount": 0}, messages=["unknown fileType"])
    client, _ = make_client(config, response=FakeResponse(body=body))

    assert client.upload(source_file, "/x", "nope") == {"stringCount": 0}


def test_upload_transport_failure(config, source_file) -> None:
    error = requests.exceptions.ConnectionError("refused")
    client, _ = make_client(config, error=error)

    with pytest.raises(TransportError) as exc_info:
        client.upload(source_file, "/x", "android")

    assert exc_info.value.original is error


def test_upload_non_200_is_transport_error(config, source_file) -> None:
    client, _ = make_client(config, response=FakeResponse(status_code=500, text="oops"))

    with pytest.raises(TransportError) as exc_info:
        client.upload(source_file, "/x", "android")

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "oops"


def test_get_returns_body_as_is(config) -> None:
    client, session = make_client(config, response=FakeResponse(text="greeting=Bonjour\n"))

    body = client.get("/files/ui.properties", {"locale": "fr-FR", "retrievalType": "pseudo"})

    assert body == "greeting=Bonjour\n"
    (call,) = session.calls
    assert call["method"] == "GET"
    query = parse_request_url(call["url"])
    assert query["fileUri"] == "/files/ui.properties"
    assert query["locale"] == "fr-FR"
    assert query["retrievalType"] == "pseudo"


def test_get_returns_binary_file_unchanged(config) -> None:
    docx = b"PK\x03\x04\x14\x00\x06\x00\x08\x00\xff\xfe\x80\x81binary"
    client, _ = make_client(config, response=FakeResponse(content=docx))

    body = client.get("/doc.docx", {"locale": "de-DE"})

    assert body == docx
    assert isinstance(body, bytes)


def test_get_returns_json_without_checking_code(config) -> None:
    body = envelope(code="VALIDATION_ERROR", messages=["no such file"])
    client, _ = make_client(config, response=FakeResponse(body=body))

    assert client.get("/missing.json") == body


def test_get_non_200_has_status_but_no_underlying_error(config) -> None:
    # A bare non-200 reply carries no client exception; only the status code
    # tells the caller what went wrong.
    client, _ = make_client(config, response=FakeResponse(status_code=404, text="Not Found"))

    with pytest.raises(TransportError) as exc_info:
        client.get("/missing.json")

    assert exc_info.value.status_code == 404
    assert exc_info.value.original is None


def test_get_transport_error(config) -> None:
    error = requests.exceptions.Timeout("slow")
    client, _ = make_client(config, error=error)

    with pytest.raises(TransportError) as exc_info:
        client.get("/a")

    assert exc_info.value.original is error
    assert exc_info.value.status_code is None


def test_list_resolves_with_data(config) -> None:
    body = envelope(data=[{"fileUri": "/a.properties"}])
    client, session = make_client(config, response=FakeResponse(body=body))

    assert client.list({"uriMask": "%.properties"}) == [{"fileUri": "/a.properties"}]
    query = parse_request_url(session.calls[0]["url"])
    assert query["uriMask"] == "%.properties"


def test_list_passes_filters_through(config) -> None:
    client, session = make_client(config, response=FakeResponse(body=envelope(data={"fileCount": 0})))

    client.list({
        "fileTypes": ["android", "ios"],
        "conditions": ["haveAllTranslated"],
        "offset": 10,
        "limit": 5,
        "orderBy": "fileUri_desc",
    })

    query = parse_request_url(session.calls[0]["url"])
    assert query["fileTypes"] == ["android", "ios"]
    assert query["conditions"] == "haveAllTranslated"
    assert query["offset"] == "10"
    assert query["limit"] == "5"
    assert query["orderBy"] == "fileUri_desc"


def test_list_without_options(config) -> None:
    client, session = make_client(config, response=FakeResponse(body=envelope(data={"fileCount": 0})))

    client.list()

    assert parse_request_url(session.calls[0]["url"]) == {"apiKey": "key-123", "projectId": "proj-9"}


def test_list_rejects_with_full_body(config) -> None:
    body = envelope(code="AUTHENTICATION_ERROR", messages=["Invalid API key"])
    client, _ = make_client(config, response=FakeResponse(body=body))

    with pytest.raises(ApiLogicError) as exc_info:
        client.list()

    assert exc_info.value.body == body
    assert exc_info.value.messages == ["Invalid API key"]


def test_status_resolves_with_full_response(config) -> None:
    body = envelope(data={"fileUri": "/a.properties", "completedStringCount": 3})
    client, session = make_client(config, response=FakeResponse(body=body))

    response = client.status("/a.properties", "fr-FR")

    assert response == body["response"]
    assert response["code"] == "SUCCESS"
    query = parse_request_url(session.calls[0]["url"])
    assert session.calls[0]["method"] == "GET"
    assert query["fileUri"] == "/a.properties"
    assert query["locale"] == "fr-FR"


def test_status_rejects_with_full_body(config) -> None:
    body = {"response": {"code": "VALIDATION_ERROR", "messages": ["bad locale"]}}
    client, _ = make_client(config, response=FakeResponse(body=body))

    with pytest.raises(ApiLogicError) as exc_info:
        client.status("/a.properties", "fr-FR")

    assert exc_info.value.body == body


def test_rename_posts(config) -> None:
    body = envelope()
    client, session = make_client(config, response=FakeResponse(body=body))

    assert client.rename("/old.json", "/new.json") == {"code": "SUCCESS"}
    (call,) = session.calls
    assert call["method"] == "POST"
    assert call["url"].startswith("https://api.example.test/v1/file/rename?")
    query = parse_request_url(call["url"])
    assert query["fileUri"] == "/old.json"
    assert query["newFileUri"] == "/new.json"


def test_rename_rejects_existing_target(config) -> None:
    body = envelope(code="VALIDATION_ERROR", messages=["File with fileUri /new.json already exists"])
    client, _ = make_client(config, response=FakeResponse(body=body))

    with pytest.raises(ApiLogicError):
        client.rename("/old.json", "/new.json")


def test_delete_sends_delete(config) -> None:
    client, session = make_client(config, response=FakeResponse(body=envelope()))

    assert client.delete("/a.json") == {"code": "SUCCESS"}
    (call,) = session.calls
    assert call["method"] == "DELETE"
    assert call["url"].startswith("https://api.example.test/v1/file/delete?")


@pytest.mark.parametrize("method_name, args", [
    ("list", ()),
    ("status", ("/a", "fr-FR")),
    ("rename", ("/a", "/b")),
    ("delete", ("/a",)),
])
def test_envelope_operations_fail_on_non_200(config, method_name, args) -> None:
    client, _ = make_client(config, response=FakeResponse(status_code=503, text="unavailable"))

    with pytest.raises(TransportError) as exc_info:
        getattr(client, method_name)(*args)

    assert exc_info.value.status_code == 503


def test_requests_use_configured_timeout(config) -> None:
    session = FakeSession(response=FakeResponse(body=envelope()))
    client = SmartlingClient(config=config, session=session, timeout=5)

    client.delete("/a")

    assert session.calls[0]["kwargs"]["timeout"] == 5


def test_injected_session_is_not_closed(config) -> None:
    session = FakeSession()

    with SmartlingClient(config=config, session=session):
        pass

    assert session.closed is False


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("SMARTLING_API_KEY", "env-key")
    monkeypatch.setenv("SMARTLING_PROJECT_ID", "env-proj")
    monkeypatch.delenv("SMARTLING_API_BASE_URL", raising=False)

    client = SmartlingClient.from_env(session=FakeSession())

    assert client.config.api_key == "env-key"
    assert client.config.base_url == ApiBaseUrl.LIVE.value
