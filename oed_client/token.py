from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenProvider(Protocol):
    """Read-only view of the credential the client sends to the backend."""

    def get_token(self) -> str | None:
        ...

    def has_token(self) -> bool:
        ...


class TokenStore:
    """In-memory credential holder shared between login flow and client."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    def get_token(self) -> str | None:
        return self._token

    def has_token(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str | None) -> None:
        self._token = token or None

    def clear_token(self) -> None:
        self._token = None
