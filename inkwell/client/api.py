"""
Async HTTP client for the Inkwell API.

Every failure (transport error or 4xx/5xx) surfaces as ``InkwellAPIError``
carrying the status code and the server's message.
"""
from __future__ import annotations

from typing import Any
from uuid import UUID

import httpx

_API_PREFIX = "/api/v1"


class InkwellAPIError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _extract_error_detail(response: httpx.Response) -> str:
    detail = f"Inkwell API returned HTTP {response.status_code}."
    try:
        payload = response.json()
    except ValueError:
        return detail

    if isinstance(payload, dict):
        body_detail = payload.get("detail")
        if isinstance(body_detail, str):
            return body_detail
        if isinstance(body_detail, list) and body_detail:
            return ". ".join(
                str(item.get("msg", "Validation error"))
                for item in body_detail
                if isinstance(item, dict)
            ) or detail
        body_error = payload.get("error")
        if isinstance(body_error, dict) and isinstance(body_error.get("message"), str):
            return body_error["message"]
    return detail


class InkwellClient:
    """Thin wrapper over ``httpx.AsyncClient``; use as an async context manager."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout: httpx.Timeout | float = httpx.Timeout(10.0, connect=3.0),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + _API_PREFIX,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> InkwellClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.RequestError as exc:
            raise InkwellAPIError(503, f"Inkwell API is unreachable: {exc}") from exc

        if response.status_code >= 400:
            raise InkwellAPIError(response.status_code, _extract_error_detail(response))
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ── Social graph ─────────────────────────────────────────────────────────

    async def follow(self, user_id: UUID) -> dict:
        return await self._request("POST", f"/users/{user_id}/follow")

    async def unfollow(self, user_id: UUID) -> dict:
        return await self._request("POST", f"/users/{user_id}/unfollow")

    async def is_following(self, user_id: UUID) -> bool:
        body = await self._request("GET", f"/users/{user_id}/isFollowing")
        return body["is_following"]

    async def get_profile(self, user_id: UUID) -> dict:
        return await self._request("GET", f"/users/{user_id}")

    # ── Engagement ───────────────────────────────────────────────────────────

    async def get_post(self, post_id: UUID) -> dict:
        return await self._request("GET", f"/posts/{post_id}")

    async def toggle_post_like(self, post_id: UUID) -> dict:
        return await self._request("PUT", f"/posts/{post_id}/like")

    async def toggle_comment_like(self, comment_id: UUID) -> dict:
        return await self._request("POST", f"/comments/{comment_id}/like")

    async def toggle_reply_like(self, comment_id: UUID, reply_id: UUID) -> dict:
        return await self._request("POST", f"/comments/{comment_id}/replies/{reply_id}/like")

    async def add_comment(self, post_id: UUID, body: str) -> dict:
        return await self._request("POST", f"/posts/{post_id}/comments", json={"body": body})
