from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import IO, Any, Callable, Iterable

import aiohttp
import async_timeout
from yarl import URL

from .const import (
    BAR_READINGS_GROUPS_URL,
    BAR_READINGS_METERS_URL,
    CSV_CONTENT_TYPE,
    CSV_FILE_FIELD,
    DEFAULT_API_TIMEOUT,
    DEFAULT_BASE_URL,
    FILE_PROCESSING_URL,
    GROUP_CHILDREN_URL,
    GROUP_CREATE_URL,
    GROUP_DELETE_URL,
    GROUP_EDIT_URL,
    GROUPS_URL,
    LINE_READINGS_GROUPS_URL,
    LINE_READINGS_METERS_URL,
    LOGIN_URL,
    METERS_URL,
    PREFERENCES_URL,
    REDACTED_HEADERS,
    TOKEN_CHECK_AUTH_STATUSES,
    TOKEN_HEADER,
    VERIFICATION_URL,
)
from .models import (
    BarReadings,
    GroupChildren,
    GroupData,
    GroupEditData,
    LineReadings,
    LoginResponse,
    NamedIDItem,
    PreferenceRequestItem,
    VerificationResponse,
)
from .time_interval import TimeInterval, serialize_duration
from .token import TokenProvider

_LOGGER = logging.getLogger(__name__)

DEFAULT_UPLOAD_NAME = "readings.csv"
_MAX_ERROR_MESSAGE = 512

StatusValidator = Callable[[int], bool]


@dataclass(slots=True)
class ApiResponse:
    """Status and decoded body of a completed request."""

    status: int
    data: Any


def join_ids(ids: Iterable[int]) -> str:
    """Return ids as the comma separated path segment used by reading routes."""

    return ",".join(str(item) for item in ids)


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


def is_token_check_status(status: int) -> bool:
    """Return True for statuses where the verification probe got an answer."""

    return is_success_status(status) or status in TOKEN_CHECK_AUTH_STATUSES


def _upload_name(readings_file: bytes | IO[bytes]) -> str:
    name = getattr(readings_file, "name", None)
    if isinstance(name, str) and name:
        return os.path.basename(name)
    return DEFAULT_UPLOAD_NAME


async def _read_body(resp: aiohttp.ClientResponse) -> Any:
    """Decode a response body as JSON, falling back to raw text."""

    text = await resp.text()
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


class OEDClient:
    """Provides access to the OED backend."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token_provider: TokenProvider,
        base_url: str | URL = DEFAULT_BASE_URL,
        *,
        timeout: float | None = DEFAULT_API_TIMEOUT,
    ) -> None:
        self._s = session
        self._tokens = token_provider
        self._base = base_url if isinstance(base_url, URL) else URL(str(base_url))
        self._timeout = timeout

    @staticmethod
    def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
        """Return a copy of headers with sensitive values masked."""

        redacted: dict[str, str] = {}
        for key, value in headers.items():
            if key.lower() in REDACTED_HEADERS:
                redacted[key] = "[redacted]"
            else:
                redacted[key] = value
        return redacted

    def _url(self, path: str) -> URL:
        return self._base.join(URL(path))

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Any | None = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        validate_status: StatusValidator | None = None,
    ) -> ApiResponse:
        """Perform one HTTP round trip and return its status and decoded body.

        ``aiohttp.FormData`` bodies are sent as multipart, anything else as
        JSON. A status rejected by ``validate_status`` (2xx only by default)
        raises ``aiohttp.ClientResponseError``.
        """
        url = self._url(path)
        check = validate_status or is_success_status
        req_kwargs: dict[str, Any] = {
            "params": dict(params or {}),
            "headers": dict(headers or {}),
        }
        if isinstance(body, aiohttp.FormData):
            req_kwargs["data"] = body
        elif body is not None:
            req_kwargs["json"] = body

        _LOGGER.debug(
            "%s %s params=%s headers=%s",
            method,
            url,
            req_kwargs["params"],
            self._redact_headers(req_kwargs["headers"]),
        )
        async with async_timeout.timeout(self._timeout):
            async with self._s.request(method, url, **req_kwargs) as r:
                _LOGGER.debug("%s %s returned status %s", method, url, r.status)
                if not check(r.status):
                    try:
                        body_text = await r.text()
                    except Exception:  # noqa: BLE001 - fall back to generic message
                        body_text = ""
                    message = (body_text or r.reason or "").strip()
                    if len(message) > _MAX_ERROR_MESSAGE:
                        message = f"{message[:_MAX_ERROR_MESSAGE]}…"
                    raise aiohttp.ClientResponseError(
                        r.request_info,
                        r.history,
                        status=r.status,
                        message=message or r.reason,
                        headers=r.headers,
                    )
                return ApiResponse(status=r.status, data=await _read_body(r))

    async def _get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._request("GET", url, params=params, headers=headers)
        return response.data

    async def _post(
        self,
        url: str,
        body: Any,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._request(
            "POST", url, body=body, params=params, headers=headers
        )
        return response.data

    async def _put(
        self,
        url: str,
        body: Any,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._request(
            "PUT", url, body=body, params=params, headers=headers
        )
        return response.data

    def _auth_headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        """Return headers carrying the current token.

        The token is the base mapping and caller headers are applied over it,
        so a caller-supplied ``token`` key wins.
        """
        if not self._tokens.has_token():
            _LOGGER.debug(
                "No token available; sending empty %s header", TOKEN_HEADER
            )
        return {TOKEN_HEADER: self._tokens.get_token() or "", **(headers or {})}

    async def _auth_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._get(url, params, self._auth_headers(headers))

    async def _auth_post(
        self,
        url: str,
        body: Any,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._post(url, body, params, self._auth_headers(headers))

    async def _auth_put(
        self,
        url: str,
        body: Any,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._put(url, body, params, self._auth_headers(headers))

    async def meters_details(self) -> list[NamedIDItem]:
        return await self._get(METERS_URL)

    async def groups_details(self) -> list[NamedIDItem]:
        return await self._get(GROUPS_URL)

    async def group_children(self, group_id: int) -> GroupChildren:
        return await self._get(GROUP_CHILDREN_URL.format(group_id=group_id))

    async def meter_line_readings(
        self, meter_ids: Iterable[int], time_interval: TimeInterval
    ) -> LineReadings:
        return await self._get(
            LINE_READINGS_METERS_URL.format(ids=join_ids(meter_ids)),
            {"timeInterval": str(time_interval)},
        )

    async def group_line_readings(
        self, group_ids: Iterable[int], time_interval: TimeInterval
    ) -> LineReadings:
        return await self._get(
            LINE_READINGS_GROUPS_URL.format(ids=join_ids(group_ids)),
            {"timeInterval": str(time_interval)},
        )

    async def meter_bar_readings(
        self,
        meter_ids: Iterable[int],
        time_interval: TimeInterval,
        bar_duration: Any,
    ) -> BarReadings:
        """Fetch bar readings; ``bar_duration`` is a timedelta or ISO-8601 string."""

        return await self._get(
            BAR_READINGS_METERS_URL.format(ids=join_ids(meter_ids)),
            {
                "timeInterval": str(time_interval),
                "barDuration": serialize_duration(bar_duration),
            },
        )

    async def group_bar_readings(
        self,
        group_ids: Iterable[int],
        time_interval: TimeInterval,
        bar_duration: Any,
    ) -> BarReadings:
        return await self._get(
            BAR_READINGS_GROUPS_URL.format(ids=join_ids(group_ids)),
            {
                "timeInterval": str(time_interval),
                "barDuration": serialize_duration(bar_duration),
            },
        )

    async def create_group(self, group_data: GroupData) -> None:
        await self._auth_post(GROUP_CREATE_URL, group_data)

    async def edit_group(self, group: GroupEditData) -> None:
        await self._auth_put(GROUP_EDIT_URL, group)

    async def delete_group(self, group_id: int) -> None:
        # The backend exposes deletion as a POST route, not the DELETE verb
        await self._auth_post(GROUP_DELETE_URL, {"id": group_id})

    async def get_preferences(self) -> PreferenceRequestItem:
        return await self._get(PREFERENCES_URL)

    async def submit_preferences(self, preferences: PreferenceRequestItem) -> None:
        await self._auth_post(PREFERENCES_URL, {"preferences": preferences})

    async def check_token_valid(self) -> bool:
        """Ask the backend whether the held token is still valid.

        The token travels in the body rather than the header. The backend
        answers an unknown or expired token with 401/403, so those statuses
        are an expected verdict here rather than a failure; any other non-2xx
        status still raises. Only a 2xx carrying ``{"success": true}`` means
        valid.
        """
        response = await self._request(
            "POST",
            VERIFICATION_URL,
            body={"token": self._tokens.get_token()},
            validate_status=is_token_check_status,
        )
        if not is_success_status(response.status):
            _LOGGER.debug("Token rejected by backend (status=%s)", response.status)
            return False
        payload: VerificationResponse | Any = response.data
        valid = isinstance(payload, dict) and payload.get("success") is True
        _LOGGER.debug("Token verification verdict: %s", valid)
        return valid

    async def login(self, email: str, password: str) -> str:
        response: LoginResponse = await self._post(
            LOGIN_URL, {"email": email, "password": password}
        )
        return response["token"]

    async def submit_new_meter_readings(
        self,
        meter_id: int,
        readings_file: bytes | IO[bytes],
        *,
        filename: str | None = None,
    ) -> None:
        """Upload a CSV of readings for a meter as a single-field multipart form."""

        form = aiohttp.FormData()
        form.add_field(
            CSV_FILE_FIELD,
            readings_file,
            filename=filename or _upload_name(readings_file),
            content_type=CSV_CONTENT_TYPE,
        )
        await self._auth_post(FILE_PROCESSING_URL.format(meter_id=meter_id), form)
