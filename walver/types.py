from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, fields
from typing import Any, Literal, Mapping, Sequence, TypedDict, Union

Channel = Literal["email", "telegram", "twitter", "telephone", "discord"]

CHANNELS: tuple[Channel, ...] = ("email", "telegram", "twitter", "telephone", "discord")

Expiration = Union[str, dt.datetime, dt.date]


@dataclass(frozen=True)
class CustomField:
    """A data-collection field shown on the verification page.

    ``type`` is the only fixed key; everything else (label, required, ...) rides in
    ``attributes`` and is sent as-is, so fields the SDK doesn't know about still work.
    """

    type: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "CustomField":
        extra = {k: v for k, v in value.items() if k != "type"}
        return cls(type=value.get("type"), attributes=extra)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        return {**self.attributes, "type": self.type}


CustomFieldLike = Union[CustomField, Mapping[str, Any]]


def custom_field_type(value: CustomFieldLike) -> Any:
    if isinstance(value, CustomField):
        return value.type
    return value.get("type")


def serialize_custom_fields(values: Sequence[CustomFieldLike] | None) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for value in values or []:
        out.append(value.to_dict() if isinstance(value, CustomField) else dict(value))
    return out


@dataclass
class VerificationOptions:
    """Options for a new verification link.

    ``None`` means "not provided": such keys never reach the wire. Booleans and
    ``custom_fields`` always carry a value.
    """

    id: str
    service_name: str
    chain: str
    internal_id: str | None = None
    webhook: str | None = None
    expiration: Expiration | None = None
    secret: str | None = None
    redirect_url: str | None = None
    one_time: bool = False
    folder_id: str | None = None
    custom_fields: list[CustomFieldLike] = field(default_factory=list)
    token_gate: bool = False
    token_address: str | None = None
    token_amount: float | None = None
    is_nft: bool = False
    force_email_verification: bool = False
    force_telegram_verification: bool = False
    force_twitter_verification: bool = False
    force_telephone_verification: bool = False
    force_discord_verification: bool = False

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.field_names()}


class Verification(TypedDict, total=False):
    """Response of ``POST /new``. Unknown keys are kept."""

    id: str
    verification_url: str
    url: str
    service_name: str
    chain: str
    folder_id: str | None
    expiration: str | None


class Folder(TypedDict, total=False):
    id: str
    name: str
    description: str | None
    custom_fields: list[dict[str, Any]]
    created_at: str


class ApiKey(TypedDict, total=False):
    id: str
    name: str
    description: str | None
    key: str
    created_at: str
