"""Configuration loading for python-easee-http."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .const import DEFAULT_AUTH_FILE, DEFAULT_CONFIG_FILE
from .exceptions import ConfigError

_LOGGER = logging.getLogger(__name__)


class EaseeConfig(BaseModel):
    """Account settings for the Easee cloud API.

    Field aliases match the keys of the JSON config file.
    """

    api_host: str = Field(alias="apiHost", min_length=1)
    user_name: str = Field(alias="userName", min_length=1)
    password: str = Field(alias="password", min_length=1, repr=False)
    auth_file: str = Field(default=DEFAULT_AUTH_FILE, alias="authFile")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("api_host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        return value.rstrip("/")


def load_config(path: str | Path = DEFAULT_CONFIG_FILE) -> EaseeConfig:
    """Read the JSON config file.

    The file holds ``apiHost``, ``userName`` and ``password`` and may
    hold ``authFile`` to relocate the persisted credential.

    Raises:
        ConfigError: If the file does not exist, contains invalid JSON, or
            fails validation.
    """
    path = Path(path)
    _LOGGER.debug("Loading config from %s", path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return EaseeConfig.model_validate(data)
    except (OSError, ValueError) as err:
        raise ConfigError(f"Invalid config file {path}: {err}") from err
