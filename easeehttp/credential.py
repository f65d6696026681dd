"""Credential lifecycle for the Easee cloud API."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import aiohttp  # type: ignore

from .const import (
    ACCESS_TOKEN,
    CONTENT_TYPE,
    DEFAULT_AUTH_FILE,
    EXPIRES,
    EXPIRES_IN,
    PATH_REFRESH_TOKEN,
    PATH_TOKEN,
    REFRESH_TOKEN,
    TOKEN_TYPE,
    USER_AGENT,
)
from .exceptions import CredentialStoreError

_LOGGER = logging.getLogger(__name__)

ERROR_LOGIN_FAILED = "Login failed"
ERROR_REFRESH_FAILED = "Unable to refresh access token"


def _now() -> int:
    """Return the current epoch time in whole seconds."""
    return int(time.time())


@dataclass(frozen=True)
class Credential:
    """Represent a bearer credential issued by the Easee cloud."""

    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int
    expires: int

    @classmethod
    def from_response(
        cls, payload: dict[str, Any], now: int | None = None
    ) -> Credential:
        """Build a credential from a login or refresh response.

        ``expires`` is fixed here as issue time plus the declared lifetime.
        """
        if now is None:
            now = _now()
        expires_in = int(payload[EXPIRES_IN])
        return cls(
            access_token=payload[ACCESS_TOKEN],
            refresh_token=payload[REFRESH_TOKEN],
            token_type=payload.get(TOKEN_TYPE, "Bearer"),
            expires_in=expires_in,
            expires=now + expires_in,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credential:
        """Build a credential from the persisted record."""
        return cls(
            access_token=data[ACCESS_TOKEN],
            refresh_token=data[REFRESH_TOKEN],
            token_type=data.get(TOKEN_TYPE, "Bearer"),
            expires_in=int(data.get(EXPIRES_IN, 0)),
            expires=int(data[EXPIRES]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted record."""
        return {
            ACCESS_TOKEN: self.access_token,
            EXPIRES_IN: self.expires_in,
            EXPIRES: self.expires,
            TOKEN_TYPE: self.token_type,
            REFRESH_TOKEN: self.refresh_token,
        }

    def is_valid(self, now: int | None = None) -> bool:
        """Return True while the access token has not expired."""
        if now is None:
            now = _now()
        return self.expires > now


class CredentialStore:
    """Read and write the persisted credential record."""

    def __init__(self, path: str | Path = DEFAULT_AUTH_FILE) -> None:
        """Initialize a store backed by a single JSON file."""
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Return the credential file path."""
        return self._path

    def exists(self) -> bool:
        """Return True if a credential file is present."""
        return self._path.is_file()

    def load(self) -> Credential | None:
        """Return the stored credential, or None when nothing is stored."""
        if not self.exists():
            _LOGGER.debug("No stored credential at %s", self._path)
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return Credential.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as err:
            raise CredentialStoreError(
                f"Unable to read credential file {self._path}: {err}"
            ) from err

    def save(self, credential: Credential) -> None:
        """Overwrite the stored record with ``credential``.

        The record is written to a temporary file in the same directory
        and moved into place.
        """
        text = json.dumps(credential.to_dict(), indent=4)
        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            ) as handle:
                tmp_path = handle.name
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except OSError as err:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise CredentialStoreError(
                f"Unable to write credential file {self._path}: {err}"
            ) from err
        _LOGGER.debug("Credential saved to %s", self._path)

    def clear(self) -> None:
        """Delete the stored record if present."""
        if self.exists():
            self._path.unlink()


class CredentialManager:
    """Own the active credential and keep it usable."""

    def __init__(
        self,
        api_host: str,
        user_name: str,
        password: str,
        store: CredentialStore | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the manager for one account."""
        self._api_host = api_host.rstrip("/")
        self._user_name = user_name
        self._password = password
        self._store = store if store is not None else CredentialStore()
        self._session = session
        self._credential: Credential | None = None
        self._access_token: str | None = None
        self._loaded = False
        self._lock: asyncio.Lock | None = None

    @property
    def access_token(self) -> str | None:
        """Return the active bearer value."""
        return self._access_token

    @property
    def credential(self) -> Credential | None:
        """Return the held credential."""
        return self._credential

    @property
    def store(self) -> CredentialStore:
        """Return the credential store."""
        return self._store

    def authorization_header(self) -> dict[str, str]:
        """Return the Authorization header for the active token."""
        if not self._access_token:
            return {}
        return {"Authorization": f"Bearer {self._access_token}"}

    async def ensure_valid(self) -> str | None:
        """Make sure a usable access token is held.

        Concurrent callers wait for one login or refresh in flight.
        Returns the active token, which is None when no login ever
        succeeded.
        """
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if not self._loaded:
                self._credential = self._store.load()
                self._loaded = True

            if self._credential is None:
                await self._login()
            elif self._credential.is_valid():
                self._access_token = self._credential.access_token
            else:
                await self._refresh()

        return self._access_token

    async def _login(self) -> None:
        """Exchange username and password for a new credential."""
        _LOGGER.debug("No stored credential, logging in as %s", self._user_name)
        payload = {"userName": self._user_name, "password": self._password}
        credential = await self._exchange(PATH_TOKEN, payload)
        if credential is None:
            _LOGGER.error("%s for %s", ERROR_LOGIN_FAILED, self._user_name)
            return
        self._adopt(credential)

    async def _refresh(self) -> None:
        """Exchange the refresh token for a new credential."""
        assert self._credential
        _LOGGER.info("Need to refresh access token using refresh token")
        payload = {
            "accessToken": self._credential.access_token,
            "refreshToken": self._credential.refresh_token,
        }
        credential = await self._exchange(PATH_REFRESH_TOKEN, payload)
        if credential is None:
            _LOGGER.warning(ERROR_REFRESH_FAILED)
            return
        self._adopt(credential)

    def _adopt(self, credential: Credential) -> None:
        """Activate and persist a freshly issued credential.

        The credential stays in memory when the write fails.
        """
        self._credential = credential
        self._access_token = credential.access_token
        self._store.save(credential)

    async def _exchange(
        self, path: str, payload: dict[str, str]
    ) -> Credential | None:
        """Post to a token endpoint and return the issued credential."""
        url = f"{self._api_host}{path}"
        if self._session is not None:
            return await self._post_token(self._session, url, payload)
        async with aiohttp.ClientSession() as session:
            return await self._post_token(session, url, payload)

    async def _post_token(
        self, session: aiohttp.ClientSession, url: str, payload: dict[str, str]
    ) -> Credential | None:
        """Return a credential on status 200, None otherwise."""
        _LOGGER.debug("Requesting token from %s", url)
        headers = {"Content-Type": CONTENT_TYPE, "User-Agent": USER_AGENT}
        async with session.post(url, json=payload, headers=headers) as resp:
            if resp.status != 200:
                message = await resp.text()
                _LOGGER.debug("Token request returned %s: %s", resp.status, message)
                return None
            result = await resp.json(content_type=None)
        return Credential.from_response(result)
