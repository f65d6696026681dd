"""Main library functions for python-easee-http."""

from __future__ import annotations

import datetime
import json
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp  # type: ignore
from aiohttp.client_exceptions import ServerTimeoutError

from .config import EaseeConfig
from .const import (
    CIRCUIT_LIMIT_FIELDS,
    CONTENT_TYPE,
    MAX_AMPS,
    MIN_AMPS,
    PATH_CHARGER_SESSIONS,
    PATH_CHARGER_STATE,
    PATH_CHARGERS,
    PATH_CIRCUIT_SETTINGS,
    USER_AGENT,
)
from .credential import CredentialManager, CredentialStore
from .exceptions import AuthenticationError, MissingMethod

_LOGGER = logging.getLogger(__name__)

ERROR_TIMEOUT = "Timeout while updating"


@dataclass(frozen=True)
class ApiResult:
    """Outcome of a single API call.

    Truthiness follows ``ok`` so callers can keep treating a falsy value
    as failure while still reading ``status`` and ``data``.
    """

    status: int
    data: Any = None

    @property
    def ok(self) -> bool:
        """Return True if the call answered 200."""
        return self.status == 200

    def __bool__(self) -> bool:
        """Return ok."""
        return self.ok


def _iso_utc(value: datetime.datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds and a Z suffix."""
    value = value.astimezone(datetime.timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def day_window(now: datetime.datetime | None = None) -> tuple[str, str]:
    """Return the first and last millisecond of the current local day.

    Naive datetimes are taken as local time.
    """
    if now is None:
        now = datetime.datetime.now()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = now.replace(hour=23, minute=59, second=59, microsecond=999000)
    return _iso_utc(start), _iso_utc(end)


class EaseeCloud:
    """Represent an Easee cloud account."""

    def __init__(
        self,
        api_host: str,
        user_name: str,
        password: str,
        store: CredentialStore | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Connect to the Easee cloud API at ``api_host``."""
        self.url = api_host.rstrip("/")
        self._session = session
        self.auth = CredentialManager(
            self.url, user_name, password, store=store, session=session
        )

    @classmethod
    def from_config(
        cls, config: EaseeConfig, session: aiohttp.ClientSession | None = None
    ) -> EaseeCloud:
        """Create a client from a loaded config."""
        return cls(
            config.api_host,
            config.user_name,
            config.password,
            store=CredentialStore(config.auth_file),
            session=session,
        )

    async def process_request(
        self,
        url: str,
        method: str = "",
        data: Any = None,
    ) -> ApiResult:
        """Return result of processed HTTP request."""
        if not method:
            raise MissingMethod

        await self.auth.ensure_valid()

        if self._session is not None:
            return await self._send(self._session, url, method, data)
        async with aiohttp.ClientSession() as session:
            return await self._send(session, url, method, data)

    async def _send(
        self,
        session: aiohttp.ClientSession,
        url: str,
        method: str,
        data: Any,
    ) -> ApiResult:
        """Issue the request on ``session``."""
        http_method = getattr(session, method)
        headers = {"Content-Type": CONTENT_TYPE, "User-Agent": USER_AGENT}
        headers.update(self.auth.authorization_header())
        _LOGGER.debug(
            "Connecting to %s with data: %s using method %s",
            url,
            data,
            method,
        )
        try:
            async with http_method(url, json=data, headers=headers) as resp:
                try:
                    message = await resp.text()
                except UnicodeDecodeError:
                    _LOGGER.debug("Decoding error")
                    message = await resp.read()
                    message = message.decode(errors="replace")

                try:
                    message = json.loads(message)
                except ValueError:
                    if message:
                        _LOGGER.warning("Non JSON response: %s", message)

                if resp.status == 401:
                    _LOGGER.error("Authentication error: %s", message)
                elif resp.status in [404, 405, 500]:
                    _LOGGER.warning("%s", message)
                elif resp.status != 200:
                    _LOGGER.debug("Status %s from %s: %s", resp.status, url, message)

                return ApiResult(resp.status, message)

        except (TimeoutError, ServerTimeoutError) as err:
            _LOGGER.error("%s: %s", ERROR_TIMEOUT, url)
            raise err

    async def request(self, method: str, path: str, data: Any = None) -> ApiResult:
        """Call an API path relative to the host and return the full result."""
        return await self.process_request(f"{self.url}{path}", method=method, data=data)

    async def _fetch(self, method: str, path: str, data: Any = None) -> Any:
        """Return the body on success, False otherwise."""
        response = await self.request(method, path, data)
        if response:
            return response.data
        return False

    async def test_and_get(self) -> Any:
        """Test the account credentials.

        Return the list of chargers.
        """
        token = await self.auth.ensure_valid()
        if not token:
            raise AuthenticationError
        return await self.get_chargers()

    async def get_chargers(self) -> Any:
        """Return the chargers on the account."""
        _LOGGER.debug("Getting chargers")
        return await self._fetch("get", PATH_CHARGERS)

    async def get_charger_state(self, charger_id: str) -> Any:
        """Return the state of a charger."""
        path = PATH_CHARGER_STATE.format(charger_id=charger_id)
        _LOGGER.debug("Getting charger state from %s", path)
        return await self._fetch("get", path)

    async def get_charger_daily_usage(self, charger_id: str) -> Any:
        """Return the charging sessions of the current local day."""
        date_from, date_to = day_window()
        path = PATH_CHARGER_SESSIONS.format(
            charger_id=charger_id, date_from=date_from, date_to=date_to
        )
        _LOGGER.debug("Getting daily sessions from %s", path)
        return await self._fetch("get", path)

    async def get_site_current_limits(self, site_id: Any, circuit_id: Any) -> Any:
        """Return the configured limits of a site circuit."""
        path = PATH_CIRCUIT_SETTINGS.format(site_id=site_id, circuit_id=circuit_id)
        _LOGGER.debug("Getting circuit limits from %s", path)
        return await self._fetch("get", path)

    async def set_site_current_limits(
        self, site_id: Any, circuit_id: Any, amps: int
    ) -> Any:
        """Set the circuit current limit on all phases, online and offline.

        Only whole amperes are accepted.
        """
        if isinstance(amps, bool):
            _LOGGER.error("Invalid value for current limit: %s", amps)
            raise ValueError
        value = float(amps)
        if not value.is_integer() or value < MIN_AMPS or value > MAX_AMPS:
            _LOGGER.error("Invalid value for current limit: %s", amps)
            raise ValueError
        amps = int(value)

        path = PATH_CIRCUIT_SETTINGS.format(site_id=site_id, circuit_id=circuit_id)
        data = {field: amps for field in CIRCUIT_LIMIT_FIELDS}

        _LOGGER.debug("Setting circuit limit to %s on %s", amps, path)
        response = await self._fetch("post", path, data)
        _LOGGER.debug("Set circuit limit response: %s", response)
        return response
