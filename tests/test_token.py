"""Tests for the in-memory token store."""

from __future__ import annotations

from oed_client.token import TokenProvider, TokenStore

from .fakes import StaticTokens


def test_token_store_lifecycle() -> None:
    store = TokenStore()
    assert store.get_token() is None
    assert not store.has_token()

    store.set_token("abc123")
    assert store.get_token() == "abc123"
    assert store.has_token()

    store.clear_token()
    assert store.get_token() is None
    assert not store.has_token()


def test_empty_token_is_treated_as_missing() -> None:
    store = TokenStore("")
    assert store.get_token() is None
    store.set_token("")
    assert not store.has_token()


def test_providers_satisfy_protocol() -> None:
    assert isinstance(TokenStore("x"), TokenProvider)
    assert isinstance(StaticTokens(), TokenProvider)
    assert not isinstance(object(), TokenProvider)
