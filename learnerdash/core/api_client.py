"""
LMS API Client

Thin async HTTP client over one API host. Attaches the bearer token, parses
the platform's response envelope and turns every failure into a classified
ApiFailure. It never clears credentials or navigates; that belongs to the
SessionGuard, so the same client serves anonymous catalog reads and
authenticated profile calls.

Usage:
    async with ApiClient(settings.profile_base_url, credentials) as client:
        result = await client.request("GET", "/courses/bookmarked")
        courses = expect_success(result, "Failed to fetch bookmarks").data
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from learnerdash.core.credentials import CredentialStore
from learnerdash.core.errors import (
    LOGIN_REQUIRED_MESSAGE,
    LocalPreconditionFailure,
    TransportFailure,
    ValidationOrBusinessFailure,
    classify_status,
)


@dataclass
class Pagination:
    """Server-side list position. `total` is the authoritative item count."""

    total: int = 0
    page: int = 1
    limit: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pagination:
        return cls(
            total=int(data.get("total", 0) or 0),
            page=int(data.get("page", 1) or 1),
            limit=int(data.get("limit", 0) or 0),
        )


@dataclass
class ApiResult:
    """Uniform result of a 2xx response: `{success, data, message}`."""

    success: bool
    data: Any = None
    message: str = ""
    pagination: Pagination | None = None
    status: int = 200


def expect_success(result: ApiResult, fallback_message: str) -> ApiResult:
    """Raise a business failure when the envelope reports success=false."""
    if not result.success:
        raise ValidationOrBusinessFailure(result.message or fallback_message, result.status)
    return result


def _server_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("detail")
        if isinstance(message, str) and message:
            return message
    return None


class ApiClient:
    """HTTP client bound to a single API base URL."""

    def __init__(
        self,
        base_url: str,
        credentials: CredentialStore,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ApiClient:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self, token: str | None, has_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
        fallback_message: str = "Request failed",
    ) -> ApiResult:
        """
        Issue one request and parse the envelope.

        Args:
            method: HTTP verb
            path: Path relative to the base URL
            body: JSON body, if any
            params: Query parameters
            authenticated: Require a credential before sending. Anonymous calls
                still carry the token when one exists.
            fallback_message: Message used when the server gives none

        Raises:
            ApiFailure: Classified by status; see learnerdash.core.errors
        """
        token = self.credentials.get()
        if authenticated and not token:
            raise LocalPreconditionFailure(LOGIN_REQUIRED_MESSAGE)

        client = self._ensure_client()
        try:
            response = await client.request(
                method,
                path,
                json=body,
                params=params,
                headers=self._headers(token, body is not None),
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out after {self.timeout}s: {e}")
            raise TransportFailure(f"{fallback_message}: request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Connection error on {method} {path}: {e}")
            raise TransportFailure(f"{fallback_message}: could not reach server") from e

        if not response.is_success:
            message = _server_message(response) or fallback_message
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise classify_status(response.status_code, message)

        return self._parse(response)

    def _parse(self, response: httpx.Response) -> ApiResult:
        if not response.content:
            return ApiResult(success=True, status=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ValidationOrBusinessFailure(
                "Malformed response from server", response.status_code
            ) from e

        if not isinstance(payload, dict) or "success" not in payload:
            return ApiResult(success=True, data=payload, status=response.status_code)

        pagination = payload.get("pagination")
        return ApiResult(
            success=bool(payload.get("success")),
            data=payload.get("data"),
            message=payload.get("message") or "",
            pagination=Pagination.from_dict(pagination) if isinstance(pagination, dict) else None,
            status=response.status_code,
        )
