"""Client configuration resolution.

The API key is looked up once, when a client is built: an explicit argument wins,
then the process environment, then a dotenv file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values

from .errors import ConfigurationError

API_KEY_ENV = "WALVER_API_KEY"
BASE_URL_ENV = "WALVER_BASE_URL"
TIMEOUT_ENV = "WALVER_TIMEOUT_MS"

DEFAULT_BASE_URL = "https://walver.io/"
DEFAULT_TIMEOUT_MS = 10_000

MISSING_API_KEY = (
    "API key is required. Either pass it as an argument or set the "
    f"{API_KEY_ENV} environment variable in .env file"
)


def _read_env(env_file: str | Path | None, environ: Mapping[str, str] | None) -> dict[str, str]:
    values: dict[str, str] = {}
    if env_file is not None and Path(env_file).is_file():
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update(os.environ if environ is None else environ)
    return values


@dataclass(frozen=True)
class WalverConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_env(
        cls,
        env_file: str | Path | None = ".env",
        environ: Mapping[str, str] | None = None,
    ) -> "WalverConfig":
        """Build a config from ``WALVER_*`` variables.

        Process variables override the dotenv file. ``os.environ`` is never modified.
        """
        values = _read_env(env_file, environ)

        api_key = (values.get(API_KEY_ENV) or "").strip()
        if not api_key:
            raise ConfigurationError(MISSING_API_KEY)

        raw_timeout = values.get(TIMEOUT_ENV)
        try:
            timeout_ms = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_MS
        except ValueError as err:
            raise ConfigurationError(f"{TIMEOUT_ENV} must be an integer (got {raw_timeout!r})") from err

        return cls(
            api_key=api_key,
            base_url=values.get(BASE_URL_ENV) or DEFAULT_BASE_URL,
            timeout_ms=timeout_ms,
        )


def resolve_api_key(
    api_key: str | None = None,
    env_file: str | Path | None = ".env",
    environ: Mapping[str, str] | None = None,
) -> str:
    if api_key:
        return api_key
    values = _read_env(env_file, environ)
    resolved = (values.get(API_KEY_ENV) or "").strip()
    if not resolved:
        raise ConfigurationError(MISSING_API_KEY)
    return resolved
