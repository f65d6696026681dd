"""Provide a package for python-easee-http."""

from __future__ import annotations

from .__main__ import ApiResult, EaseeCloud, day_window
from .config import EaseeConfig, load_config
from .credential import Credential, CredentialManager, CredentialStore
from .exceptions import (
    AuthenticationError,
    ConfigError,
    CredentialStoreError,
    MissingMethod,
)

__all__ = [
    "ApiResult",
    "AuthenticationError",
    "ConfigError",
    "Credential",
    "CredentialManager",
    "CredentialStore",
    "CredentialStoreError",
    "EaseeCloud",
    "EaseeConfig",
    "MissingMethod",
    "day_window",
    "load_config",
]
