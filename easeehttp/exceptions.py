"""Exceptions."""


class AuthenticationError(Exception):
    """Exception for authentication errors."""


class MissingMethod(Exception):
    """Exception for missing method variable."""


class ConfigError(Exception):
    """Exception for missing or malformed configuration."""


class CredentialStoreError(Exception):
    """Exception for credential file read/write failures."""
