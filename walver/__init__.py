"""Walver Python SDK."""

import logging

from .client import AsyncWalver, Walver, create_client
from .config import API_KEY_ENV, WalverConfig, resolve_api_key
from .errors import ConfigurationError, DuplicateIdError, ValidationError, WalverError
from .types import (
    CHANNELS,
    ApiKey,
    CustomField,
    Folder,
    Verification,
    VerificationOptions,
)
from .validation import build_verification_payload, format_expiration, validate_verification

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Walver",
    "AsyncWalver",
    "create_client",
    "WalverConfig",
    "API_KEY_ENV",
    "resolve_api_key",
    "WalverError",
    "ConfigurationError",
    "ValidationError",
    "DuplicateIdError",
    "CHANNELS",
    "CustomField",
    "VerificationOptions",
    "Verification",
    "Folder",
    "ApiKey",
    "build_verification_payload",
    "format_expiration",
    "validate_verification",
]

__version__ = "1.0.0"
