from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from walver.client import AsyncWalver
from walver.errors import DuplicateIdError, ValidationError


def make_client(handler) -> AsyncWalver:
    return AsyncWalver(api_key="test-key", http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_async_create_verification_posts_payload() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "v1", "verification_url": "https://walver.io/verify/v1"})

    async def run() -> dict:
        async with make_client(handler) as client:
            return await client.create_verification(id="v1", service_name="Acme", chain="ETH", folder_id="f1")

    out = asyncio.run(run())

    assert out["id"] == "v1"
    assert str(captured[0].url) == "https://walver.io/new"
    assert captured[0].headers["X-API-Key"] == "test-key"
    sent = json.loads(captured[0].content.decode("utf-8"))
    assert sent["folder_id"] == "f1"
    assert "webhook" not in sent


def test_async_folder_and_api_key_endpoints() -> None:
    captured: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append((request.method, request.url.path))
        return httpx.Response(200, json={})

    async def run() -> None:
        client = make_client(handler)
        await client.create_folder("Drops")
        await client.get_folders()
        await client.get_folder("f1")
        await client.get_folder_verifications("f1")
        await client.create_api_key("ci", description="pipeline")
        await client.get_api_keys()
        await client.delete_api_key("k1")
        await client.aclose()

    asyncio.run(run())

    assert captured == [
        ("POST", "/creator/folders"),
        ("GET", "/creator/folders"),
        ("GET", "/creator/folders/f1"),
        ("GET", "/creator/folders/f1/verifications"),
        ("POST", "/creator/api-keys"),
        ("GET", "/creator/api-keys"),
        ("DELETE", "/creator/api-keys/k1"),
    ]


def test_async_validation_happens_before_request() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async def run() -> None:
        await make_client(handler).create_verification(
            id="v1", service_name="Acme", chain="ETH", folder_id="f1", force_email_verification=True
        )

    with pytest.raises(ValidationError, match=r"custom_fields\[email\]"):
        asyncio.run(run())


def test_async_conflict_and_passthrough() -> None:
    statuses = iter([409, 503])

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), json={})

    async def create() -> None:
        await make_client(handler).create_verification(id="v1", service_name="Acme", chain="ETH", folder_id="f1")

    with pytest.raises(DuplicateIdError, match="already exists"):
        asyncio.run(create())

    with pytest.raises(httpx.HTTPStatusError) as exc:
        asyncio.run(create())
    assert exc.value.response.status_code == 503


def test_async_empty_success_body_returns_none() -> None:
    async def run() -> object:
        return await make_client(lambda _: httpx.Response(204)).delete_api_key("k1")

    assert asyncio.run(run()) is None


def test_async_timeout_reaches_http_client() -> None:
    default = AsyncWalver(api_key="k")
    custom = AsyncWalver(api_key="k", timeout_ms=2500)

    assert default._http.timeout == httpx.Timeout(10.0)
    assert custom._http.timeout == httpx.Timeout(2.5)

    async def close() -> None:
        await default.aclose()
        await custom.aclose()

    asyncio.run(close())
