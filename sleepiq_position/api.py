"""SleepIQ cloud API client.

Only the four calls the tool needs are implemented: login, list beds, set a
foundation preset and read the foundation status. All network I/O and the
mapping of HTTP failures onto exceptions lives here.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from .const import (
    API_BASE_URL,
    API_BEDS_PATH,
    API_FOUNDATION_STATUS_PATH,
    API_LOGIN_PATH,
    API_PRESET_PATH,
    API_SESSION_KEY_PARAM,
    FOUNDATION_IS_MOVING,
    PRESET_SPEED,
    REQUEST_TIMEOUT,
)
from .models import BedDescriptor, BedPreset, BedStatus, Side, SleepIQSession
from .redaction import redact_data

_LOGGER = logging.getLogger(__name__)


# ----- Exceptions -----
class SleepIQError(Exception):
    pass


class SleepIQAuthError(SleepIQError):
    pass


class SleepIQRateLimitError(SleepIQError):
    pass  # 429


class SleepIQServerError(SleepIQError):
    pass  # 5xx


class SleepIQCommError(SleepIQError):
    pass  # timeouts, connection issues, malformed responses


class SleepIQClient:
    """Client for the SleepIQ REST API.

    The aiohttp session is owned by the caller; cookies set at login are kept
    in its cookie jar, and the session key is sent as a query parameter.
    """

    def __init__(
        self,
        session: ClientSession,
        base_url: str = API_BASE_URL,
        request_timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = ClientTimeout(total=request_timeout)
        self._sleepiq_session: SleepIQSession | None = None

    @property
    def sleepiq_session(self) -> SleepIQSession | None:
        """Return the current login session, if any."""
        return self._sleepiq_session

    async def async_login(self, username: str, password: str) -> SleepIQSession:
        """Log into the SleepIQ account."""
        data = await self._async_request(
            "PUT",
            API_LOGIN_PATH,
            operation="login",
            payload={"login": username, "password": password},
            authenticated=False,
        )
        key = data.get("key") if isinstance(data, dict) else None
        if not key:
            raise SleepIQAuthError("Login response did not contain a session key")

        user_id = data.get("userId")
        self._sleepiq_session = SleepIQSession(
            key=str(key), user_id=str(user_id) if user_id is not None else None
        )
        _LOGGER.debug("Logged into SleepIQ account")
        return self._sleepiq_session

    async def async_get_beds(self) -> list[BedDescriptor]:
        """Return the beds registered to the account, in service order."""
        data = await self._async_request("GET", API_BEDS_PATH, operation="bed list")
        beds = data.get("beds") if isinstance(data, dict) else None
        if not isinstance(beds, list):
            raise SleepIQCommError("Bed list response did not contain a beds array")

        result: list[BedDescriptor] = []
        for bed in beds:
            if not isinstance(bed, dict) or bed.get("bedId") is None:
                _LOGGER.debug("Skipping malformed bed entry: %s", redact_data(bed))
                continue
            result.append(BedDescriptor(bed_id=str(bed["bedId"]), name=str(bed.get("name") or "")))
        _LOGGER.debug("Account has %d bed(s)", len(result))
        return result

    async def async_set_position(self, bed_id: str, side: Side, preset: BedPreset) -> BedStatus:
        """Move one side of the foundation to a preset and return the status right after."""
        await self._async_request(
            "PUT",
            API_PRESET_PATH.format(bed_id=bed_id),
            operation="set preset",
            payload={"speed": PRESET_SPEED, "side": side.code, "preset": int(preset)},
        )
        return await self.async_get_foundation_status(bed_id)

    async def async_get_foundation_status(self, bed_id: str) -> BedStatus:
        """Fetch the current foundation status of a bed."""
        data = await self._async_request(
            "GET",
            API_FOUNDATION_STATUS_PATH.format(bed_id=bed_id),
            operation="foundation status",
        )
        return parse_foundation_status(data)

    async def _async_request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        payload: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> Any:
        params = None
        if authenticated:
            if self._sleepiq_session is None:
                raise SleepIQAuthError(f"Not logged in (during {operation})")
            params = {API_SESSION_KEY_PARAM: self._sleepiq_session.key}

        url = f"{self._base_url}{path}"
        _LOGGER.debug("SleepIQ API call: %s %s payload=%s", method, url, redact_data(payload))

        try:
            async with self._session.request(
                method, url, json=payload, params=params, timeout=self._timeout
            ) as resp:
                body = await resp.read()
                charset = resp.charset or "utf-8"
                _LOGGER.debug("SleepIQ API response: %s %s -> %s", method, path, resp.status)

                if resp.status in (401, 403):
                    raise SleepIQAuthError(f"{operation} rejected with status {resp.status}")
                if resp.status == 429:
                    raise SleepIQRateLimitError(f"Rate limited during {operation}")
                if 500 <= resp.status < 600:
                    raise SleepIQServerError(f"Server error during {operation}: {resp.status}")
                if not 200 <= resp.status < 300:
                    raise SleepIQCommError(f"Unexpected {operation} status {resp.status}: {body[:200]!r}")
        except asyncio.TimeoutError as err:
            raise SleepIQCommError(f"{operation} timeout") from err
        except ClientError as err:
            raise SleepIQCommError(f"{operation} connection error: {err}") from err

        try:
            text = body.decode(charset)
        except (UnicodeDecodeError, LookupError) as err:
            raise SleepIQCommError(f"Invalid {operation} response encoding") from err

        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError as err:
            raise SleepIQCommError(f"Invalid JSON in {operation} response") from err
        _LOGGER.debug("SleepIQ API %s body: %s", operation, redact_data(data))
        return data


def parse_foundation_status(data: Any) -> BedStatus:
    """Build a BedStatus from a foundation status payload."""
    if not isinstance(data, dict):
        raise SleepIQCommError("Foundation status response is not an object")
    return BedStatus(is_moving=_as_bool(data.get(FOUNDATION_IS_MOVING, False)), raw=data)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)

