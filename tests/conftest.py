"""Shared pytest fixtures for the OED client tests."""

from __future__ import annotations

from collections.abc import Callable

import aiohttp
import pytest

from oed_client.api import OEDClient

from .fakes import FakeResponse, FakeSession, RecordingFormData, StaticTokens

BASE_URL = "http://oed.test/"


@pytest.fixture
def tokens() -> StaticTokens:
    return StaticTokens("secret-token")


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession, tokens: StaticTokens) -> OEDClient:
    return OEDClient(session, tokens, BASE_URL)


@pytest.fixture
def respond(session: FakeSession) -> Callable[..., FakeResponse]:
    """Return helper queueing one response on the fake session."""

    def _respond(status: int = 200, body: object = None, **kwargs) -> FakeResponse:
        resp = FakeResponse(status=status, body=body, **kwargs)
        session.queue(resp)
        return resp

    return _respond


@pytest.fixture
def recording_form(monkeypatch) -> None:
    """Build upload forms as RecordingFormData so their fields can be checked."""

    monkeypatch.setattr(aiohttp, "FormData", RecordingFormData)
