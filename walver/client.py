from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS, WalverConfig, resolve_api_key
from .errors import DuplicateIdError
from .types import ApiKey, CustomFieldLike, Folder, Verification, VerificationOptions, serialize_custom_fields
from .validation import build_verification_payload, coerce_options

logger = logging.getLogger(__name__)

USER_AGENT = "walver-py/1.0.0"


def _normalize_base(url: str) -> str:
    url = str(url or "")
    return url[:-1] if url.endswith("/") else url


def _folder_body(name: str, description: str | None, custom_fields: Sequence[CustomFieldLike] | None) -> dict[str, Any]:
    body: dict[str, Any] = {"name": name, "custom_fields": serialize_custom_fields(custom_fields)}
    if description is not None:
        body["description"] = description
    return body


def _api_key_body(name: str, description: str | None) -> dict[str, Any]:
    body: dict[str, Any] = {"name": name}
    if description is not None:
        body["description"] = description
    return body


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    return resp.json()


def _duplicate_id_error(err: httpx.HTTPStatusError) -> DuplicateIdError:
    try:
        details = err.response.json()
    except ValueError:
        details = None
    return DuplicateIdError(details=details)


class _BaseClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        config: WalverConfig | None = None,
    ):
        if config is not None:
            api_key = api_key or config.api_key
            base_url = config.base_url if base_url is None else base_url
            timeout_ms = config.timeout_ms if timeout_ms is None else timeout_ms

        self.api_key = resolve_api_key(api_key)
        self.base_url = _normalize_base(DEFAULT_BASE_URL if base_url is None else base_url)
        self.timeout_ms = DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms

    @property
    def headers(self) -> dict[str, str]:
        return {"X-API-Key": self.api_key, "User-Agent": USER_AGENT}

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"


class Walver(_BaseClient):
    """Blocking client for the Walver API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        config: WalverConfig | None = None,
        http_client: httpx.Client | None = None,
    ):
        super().__init__(api_key, base_url, timeout_ms, config)
        self._http = http_client or httpx.Client(timeout=self.timeout_ms / 1000)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._url(path)
        logger.debug("%s %s", method, url)
        resp = self._http.request(method, url, headers=self.headers, **kwargs)
        resp.raise_for_status()
        return _decode(resp)

    def _get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._request("GET", path, params=params)

    def _post(self, path: str, data: Mapping[str, Any] | None = None) -> Any:
        return self._request("POST", path, json=data)

    def _delete(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._request("DELETE", path, params=params)

    def create_folder(
        self,
        name: str,
        description: str | None = None,
        custom_fields: Sequence[CustomFieldLike] | None = None,
    ) -> Folder:
        return self._post("/creator/folders", _folder_body(name, description, custom_fields))

    def get_folders(self) -> list[Folder]:
        return self._get("/creator/folders")

    def get_folder(self, folder_id: str) -> Folder:
        return self._get(f"/creator/folders/{folder_id}")

    def get_folder_verifications(self, folder_id: str) -> list[Verification]:
        return self._get(f"/creator/folders/{folder_id}/verifications")

    def create_api_key(self, name: str, description: str | None = None) -> ApiKey:
        return self._post("/creator/api-keys", _api_key_body(name, description))

    def get_api_keys(self) -> list[ApiKey]:
        return self._get("/creator/api-keys")

    def delete_api_key(self, api_key_id: str) -> Any:
        return self._delete(f"/creator/api-keys/{api_key_id}")

    def create_verification(
        self,
        options: VerificationOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Verification:
        """Create a verification link.

        Takes a :class:`VerificationOptions`, a plain mapping, or the same fields as
        keyword arguments. The payload is checked locally first and a
        :class:`ValidationError` is raised before anything is sent. A 409 from the
        server becomes :class:`DuplicateIdError`; other HTTP errors propagate as-is.
        """
        payload = build_verification_payload(coerce_options(options, **kwargs))
        try:
            return self._post("/new", payload)
        except httpx.HTTPStatusError as err:
            if err.response.status_code == 409:
                raise _duplicate_id_error(err) from err
            raise

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "Walver":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncWalver(_BaseClient):
    """Same surface as :class:`Walver`, with awaitable methods."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        config: WalverConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, timeout_ms, config)
        self._http = http_client or httpx.AsyncClient(timeout=self.timeout_ms / 1000)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._url(path)
        logger.debug("%s %s", method, url)
        resp = await self._http.request(method, url, headers=self.headers, **kwargs)
        resp.raise_for_status()
        return _decode(resp)

    async def _get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def _post(self, path: str, data: Mapping[str, Any] | None = None) -> Any:
        return await self._request("POST", path, json=data)

    async def _delete(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self._request("DELETE", path, params=params)

    async def create_folder(
        self,
        name: str,
        description: str | None = None,
        custom_fields: Sequence[CustomFieldLike] | None = None,
    ) -> Folder:
        return await self._post("/creator/folders", _folder_body(name, description, custom_fields))

    async def get_folders(self) -> list[Folder]:
        return await self._get("/creator/folders")

    async def get_folder(self, folder_id: str) -> Folder:
        return await self._get(f"/creator/folders/{folder_id}")

    async def get_folder_verifications(self, folder_id: str) -> list[Verification]:
        return await self._get(f"/creator/folders/{folder_id}/verifications")

    async def create_api_key(self, name: str, description: str | None = None) -> ApiKey:
        return await self._post("/creator/api-keys", _api_key_body(name, description))

    async def get_api_keys(self) -> list[ApiKey]:
        return await self._get("/creator/api-keys")

    async def delete_api_key(self, api_key_id: str) -> Any:
        return await self._delete(f"/creator/api-keys/{api_key_id}")

    async def create_verification(
        self,
        options: VerificationOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Verification:
        """Awaitable :meth:`Walver.create_verification`; same validation and errors."""
        payload = build_verification_payload(coerce_options(options, **kwargs))
        try:
            return await self._post("/new", payload)
        except httpx.HTTPStatusError as err:
            if err.response.status_code == 409:
                raise _duplicate_id_error(err) from err
            raise

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncWalver":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def create_client(**kwargs) -> Walver:
    return Walver(**kwargs)
