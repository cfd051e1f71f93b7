import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import aiohttp
import pytest

from handlers.async_comm import AsyncCommError, AsyncCommInvalidContentTypeError, AsyncHttp


def _response(content_type: str, body: bytes) -> SimpleNamespace:
    async def read() -> bytes:
        return body

    return SimpleNamespace(headers={"Content-Type": content_type}, read=read)


def test_init_does_not_create_session() -> None:
    # Construction must work outside a running event loop
    http = AsyncHttp()

    assert http.is_closed


@pytest.mark.asyncio
async def test_first_use_logs_session_initialized(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)

    http = AsyncHttp()
    caplog.clear()
    _ = http.session

    assert any("AsyncHttp session initialized" in rec.message for rec in caplog.records)
    assert not http.is_closed
    await http.close()


@pytest.mark.asyncio
async def test_context_enter_does_not_log_already_initialized(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)

    http = AsyncHttp()
    _ = http.session

    # clear prior logs from the first use
    caplog.clear()

    async with http:
        # nothing to do
        pass

    # Ensure no "session already initialized" message was logged during __aenter__
    assert not any("session already initialized" in rec.message for rec in caplog.records)


@pytest.mark.asyncio
async def test_reenter_after_close_logs_session_initialized(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)

    http = AsyncHttp()

    # first context closes the session
    async with http:
        pass

    assert http.is_closed

    # After __aexit__, session should be closed. Re-enter should reinitialize and log.
    caplog.clear()

    async with http:
        pass

    assert any("AsyncHttp session initialized" in rec.message for rec in caplog.records)


@pytest.mark.asyncio
async def test_decode_response_parses_json_with_charset() -> None:
    http = AsyncHttp()

    data = await http.decode_response(_response("application/json; charset=utf-8", b'{"translatedText": "Hola"}'))

    assert data == {"translatedText": "Hola"}


@pytest.mark.asyncio
async def test_decode_response_returns_none_for_empty_body() -> None:
    http = AsyncHttp()

    assert await http.decode_response(_response("application/json", b"")) is None


@pytest.mark.asyncio
async def test_decode_response_rejects_unknown_content_type() -> None:
    http = AsyncHttp()

    with pytest.raises(AsyncCommInvalidContentTypeError, match="Unknown Content-Type"):
        await http.decode_response(_response("application/octet-stream", b"\x00\x01"))


@pytest.mark.asyncio
async def test_decode_response_wraps_invalid_json() -> None:
    http = AsyncHttp()

    with pytest.raises(AsyncCommInvalidContentTypeError, match="Undecodable"):
        await http.decode_response(_response("application/json", b"{not json"))


def test_comm_error_carries_response_status() -> None:
    response_error = aiohttp.ClientResponseError(MagicMock(), (), status=503, message="Service Unavailable")

    err = AsyncCommError("Error response from the server.", response=response_error)

    assert err.status == 503
    assert str(err) == "Error response from the server.: status='503'"


def test_comm_error_without_response_has_no_status() -> None:
    err = AsyncCommError("HTTP client error.")

    assert err.status is None
    assert str(err) == "HTTP client error."
