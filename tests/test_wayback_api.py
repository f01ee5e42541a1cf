import asyncio
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import aiohttp  # noqa: E402
import pytest  # noqa: E402

from api import wayback  # noqa: E402
from exceptions import (  # noqa: E402
    ArchiveResponseError,
    ArchiveStatusError,
    ArchiveTransportError,
    ArchiveUnavailableError,
)


def available_body(url="http://web.archive.org/web/20240101000000/https://example.com/"):
    return json.dumps(
        {
            "url": "example.com",
            "archived_snapshots": {
                "closest": {
                    "status": "200",
                    "available": True,
                    "url": url,
                    "timestamp": "20240101000000",
                }
            },
        }
    )


class FakeResponse:
    def __init__(self, status=200, body="", reason="OK"):
        self.status = status
        self.reason = reason
        self._body = body

    async def read(self):
        if isinstance(self._body, bytes):
            return self._body
        return self._body.encode("utf-8")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.mark.asyncio
async def test_fetch_returns_closest_snapshot():
    session = FakeSession(FakeResponse(body=available_body()))
    result = await wayback.fetch_archive_url(session, "https://example.com/", timeout=5)
    assert result == "http://web.archive.org/web/20240101000000/https://example.com/"
    url, kwargs = session.calls[0]
    assert url == wayback.AVAILABILITY_URL
    assert kwargs["params"] == {"url": "https://example.com/"}
    assert kwargs["timeout"].total == 5


@pytest.mark.asyncio
async def test_custom_endpoint_without_timeout():
    session = FakeSession(FakeResponse(body=available_body()))
    await wayback.fetch_archive_url(session, "example.com", endpoint="http://local/available")
    url, kwargs = session.calls[0]
    assert url == "http://local/available"
    assert "timeout" not in kwargs


@pytest.mark.asyncio
async def test_status_error_carries_code_and_reason():
    session = FakeSession(FakeResponse(status=503, reason="Service Unavailable"))
    with pytest.raises(ArchiveStatusError) as info:
        await wayback.fetch_archive_url(session, "example.com")
    assert info.value.status == 503
    assert str(info.value) == "archive.org replied with status 503 Service Unavailable"


@pytest.mark.asyncio
async def test_redirect_status_is_an_error():
    session = FakeSession(FakeResponse(status=301, reason="Moved Permanently"))
    with pytest.raises(ArchiveStatusError):
        await wayback.fetch_archive_url(session, "example.com")


@pytest.mark.asyncio
async def test_transport_error():
    session = FakeSession(error=aiohttp.ClientConnectionError("connection refused"))
    with pytest.raises(ArchiveTransportError) as info:
        await wayback.fetch_archive_url(session, "example.com")
    assert "connection refused" in str(info.value)


@pytest.mark.asyncio
async def test_timeout_is_a_transport_error():
    session = FakeSession(error=asyncio.TimeoutError())
    with pytest.raises(ArchiveTransportError) as info:
        await wayback.fetch_archive_url(session, "example.com")
    assert str(info.value) == "TimeoutError"


@pytest.mark.asyncio
async def test_non_utf8_body_is_malformed():
    session = FakeSession(FakeResponse(body=b'{"archived_snapshots": "\xff\xfe"}'))
    with pytest.raises(ArchiveResponseError) as info:
        await wayback.fetch_archive_url(session, "example.com")
    assert info.value.body == '{"archived_snapshots": "\ufffd\ufffd"}'
    assert str(info.value).startswith("Error occurred processing archive.org response:\n")


@pytest.mark.asyncio
async def test_non_utf8_garbage_is_malformed():
    session = FakeSession(FakeResponse(body=b"\x89PNG\r\n\x1a\n"))
    with pytest.raises(ArchiveResponseError):
        await wayback.fetch_archive_url(session, "example.com")


def test_missing_closest_is_unavailable():
    body = json.dumps({"url": "example.com", "archived_snapshots": {}})
    with pytest.raises(ArchiveUnavailableError) as info:
        wayback.parse_availability(body)
    assert str(info.value) == "That URL is not available via the internet archive API."


def test_unavailable_flag():
    body = json.dumps({"archived_snapshots": {"closest": {"available": False, "url": "x"}}})
    with pytest.raises(ArchiveUnavailableError):
        wayback.parse_availability(body)


def test_snapshot_without_url_is_unavailable():
    body = json.dumps({"archived_snapshots": {"closest": {"available": True}}})
    with pytest.raises(ArchiveUnavailableError):
        wayback.parse_availability(body)


@pytest.mark.parametrize(
    "body",
    ["<html>oops</html>", "[]", "{}", '{"archived_snapshots": null}', ""],
)
def test_malformed_body_includes_raw_body(body):
    with pytest.raises(ArchiveResponseError) as info:
        wayback.parse_availability(body)
    assert info.value.body == body
    assert str(info.value) == f"Error occurred processing archive.org response:\n{body}"
