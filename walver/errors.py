from __future__ import annotations

from typing import Any


class WalverError(Exception):
    """Top-level SDK error with optional HTTP metadata."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ConfigurationError(WalverError):
    """No usable client configuration (usually a missing API key)."""


class ValidationError(WalverError, ValueError):
    """A verification payload broke one of the creation rules. Raised before any request."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, 400, details)


class DuplicateIdError(WalverError):
    """The verification id is already taken on the server."""

    def __init__(self, message: str = "ID for the verification already exists. Choose another ID.", details: Any = None):
        super().__init__(message, 409, details)
