"""Tests for the token verification probe."""

from __future__ import annotations

import aiohttp
import pytest

from oed_client.api import OEDClient, is_token_check_status
from oed_client.const import TOKEN_HEADER
from oed_client.models import VerificationResponse
from oed_client.token import TokenStore

from .fakes import FakeResponse, FakeSession


@pytest.mark.asyncio
async def test_valid_token(client, session, respond) -> None:
    respond(body=VerificationResponse(success=True))

    assert await client.check_token_valid() is True

    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "http://oed.test/api/verification/"
    assert kwargs["json"] == {"token": "secret-token"}
    assert TOKEN_HEADER not in kwargs["headers"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "body"),
    [
        (200, {"success": False}),
        (200, {"success": "true"}),
        (200, {}),
        (200, None),
        (200, "success"),
        (401, {"success": True}),
        (401, None),
        (403, {"success": False}),
        (403, "Forbidden"),
    ],
)
async def test_invalid_token_verdicts(client, respond, status, body) -> None:
    respond(status=status, body=body)
    assert await client.check_token_valid() is False


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404, 500, 503])
async def test_other_statuses_raise(client, respond, status) -> None:
    respond(status=status, body={"success": True})

    with pytest.raises(aiohttp.ClientResponseError) as err:
        await client.check_token_valid()

    assert err.value.status == status


@pytest.mark.asyncio
async def test_probe_without_token_sends_null() -> None:
    session = FakeSession([FakeResponse(status=401)])
    client = OEDClient(session, TokenStore(), "http://oed.test/")

    assert await client.check_token_valid() is False
    assert session.calls[0][2]["json"] == {"token": None}


@pytest.mark.parametrize(
    ("status", "expected"),
    [(200, True), (204, True), (299, True), (401, True), (403, True),
     (300, False), (400, False), (404, False), (500, False)],
)
def test_is_token_check_status(status, expected) -> None:
    assert is_token_check_status(status) is expected
