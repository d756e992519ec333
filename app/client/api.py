"""Async HTTP client for the notification API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import httpx

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationImportance,
    NotificationType,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class NotificationApiError(RuntimeError):
    """Raised when the API cannot be reached or rejects a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def notification_from_payload(payload: dict[str, Any]) -> Notification:
    """Build a :class:`Notification` from its JSON representation."""

    return Notification(
        id=payload["id"],
        message=payload["message"],
        type=NotificationType(payload["type"]),
        category=NotificationCategory(payload["category"]),
        importance=NotificationImportance(payload.get("importance", "low")),
        link=payload.get("link"),
        metadata=dict(payload.get("metadata") or {}),
        read=bool(payload.get("read", False)),
        created_at=_parse_datetime(payload.get("created_at")),
        expires_at=_parse_datetime(payload.get("expires_at")),
    )


class NotificationApiClient:
    """Typed wrappers over the administrator notification endpoints."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.token = token
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            raise NotificationApiError(f"{method} {url} failed: {exc}") from exc
        if response.is_error:
            raise NotificationApiError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def login(self, email: str, password: str) -> str:
        response = await self._request(
            "POST", "/auth/token", data={"username": email, "password": password}
        )
        self.token = response.json()["access_token"]
        return self.token

    async def list_notifications(self, *, limit: int = 50) -> list[Notification]:
        response = await self._request("GET", "/notifications/", params={"limit": limit})
        return [notification_from_payload(item) for item in response.json()]

    async def mark_as_read(self, notification_id: str) -> Notification:
        response = await self._request("PATCH", f"/notifications/{notification_id}/read")
        return notification_from_payload(response.json())

    async def mark_all_as_read(self) -> int:
        response = await self._request("PUT", "/notifications/read-all")
        return int(response.json()["modified"])

    async def delete(self, notification_id: str) -> None:
        await self._request("DELETE", f"/notifications/{notification_id}")

    async def clear_all(self) -> int:
        response = await self._request("DELETE", "/notifications/")
        return int(response.json()["deleted"])

    @asynccontextmanager
    async def open_stream(self) -> AsyncIterator[AsyncIterator[str]]:
        """Open the event stream and yield its lines."""

        async with self._client.stream(
            "GET",
            "/notifications/stream",
            params={"token": self.token or ""},
            headers={"Accept": "text/event-stream"},
            timeout=httpx.Timeout(DEFAULT_TIMEOUT_SECONDS, read=None),
        ) as response:
            if response.is_error:
                raise NotificationApiError(
                    f"Stream request returned {response.status_code}",
                    status_code=response.status_code,
                )
            yield response.aiter_lines()

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = [
    "NotificationApiClient",
    "NotificationApiError",
    "notification_from_payload",
]
