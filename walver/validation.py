from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Mapping

from .errors import ValidationError
from .types import (
    CHANNELS,
    Expiration,
    VerificationOptions,
    custom_field_type,
    serialize_custom_fields,
)

logger = logging.getLogger(__name__)


def format_expiration(value: Expiration | None) -> str | None:
    """ISO-8601 in UTC with millisecond precision, e.g. ``2025-01-31T12:00:00.000Z``.

    Naive datetimes are taken as UTC, plain dates as midnight UTC. Strings are sent untouched.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        value = value.astimezone(dt.timezone.utc)
    elif isinstance(value, dt.date):
        value = dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc)
    else:
        raise ValidationError(f"expiration must be a string, date or datetime (got {type(value).__name__})")
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def coerce_options(options: VerificationOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> VerificationOptions:
    if isinstance(options, VerificationOptions):
        if kwargs:
            raise TypeError("pass either a VerificationOptions instance or keyword arguments, not both")
        return options

    merged: dict[str, Any] = dict(options or {})
    merged.update(kwargs)

    unknown = sorted(set(merged) - set(VerificationOptions.field_names()))
    if unknown:
        raise TypeError(f"Unknown verification option(s): {', '.join(unknown)}")

    if merged.get("custom_fields", ()) is None:
        del merged["custom_fields"]

    return VerificationOptions(**merged)


def validate_verification(options: VerificationOptions) -> None:
    """Raise :class:`ValidationError` for the first broken rule, in a fixed order."""
    if not options.folder_id and not options.webhook:
        raise ValidationError("If no folder_id is provided, webhook is required")

    if options.webhook and not options.webhook.startswith("https://"):
        raise ValidationError("webhook must start with https://")

    if options.webhook and not options.secret:
        logger.warning("secret is highly recommended when using webhooks")

    if options.token_gate:
        if not options.token_address:
            raise ValidationError("token_address is required when using token gate")
        if not options.token_amount:
            raise ValidationError("token_amount is required when using token gate")

    for channel in CHANNELS:
        if not getattr(options, f"force_{channel}_verification"):
            continue
        fields = options.custom_fields or []
        if not any(custom_field_type(f) == channel for f in fields):
            raise ValidationError(f"custom_fields[{channel}] is required when using force_{channel}_verification")


def build_verification_payload(options: VerificationOptions) -> dict[str, Any]:
    """Validate ``options`` and return the JSON body for ``POST /new`` without unset keys."""
    validate_verification(options)

    payload = options.to_dict()
    payload["expiration"] = format_expiration(options.expiration)
    payload["custom_fields"] = serialize_custom_fields(options.custom_fields)

    return {k: v for k, v in payload.items() if v is not None}
