"""
Optimistic toggles for follow and like buttons.

A toggle flips its local value as soon as it is sent and then settles on
what the server says:

    IDLE ──toggle()──▶ PENDING ──server agrees──▶ CONFIRMED
                          │
                          └──error / server disagrees──▶ ROLLED_BACK

On ROLLED_BACK the value is re-read from the server. If that read fails too,
the value from before the flip is restored.
"""
from __future__ import annotations

import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from inkwell.client.api import InkwellAPIError, InkwellClient

logger = logging.getLogger(__name__)


class ToggleState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class ToggleSnapshot:
    active: bool
    count: int


Fetch = Callable[[], Awaitable[ToggleSnapshot]]
Send = Callable[[bool], Awaitable[ToggleSnapshot]]


class OptimisticToggle:
    """Local view of one boolean + counter pair (e.g. liked / likes_count).

    ``send(desired)`` performs the write and returns the server's state;
    ``fetch()`` reads the server's state without changing it.
    """

    def __init__(self, initial: ToggleSnapshot, send: Send, fetch: Fetch) -> None:
        self._send = send
        self._fetch = fetch
        self.snapshot = initial
        self.state = ToggleState.IDLE
        self.error: InkwellAPIError | None = None

    @property
    def active(self) -> bool:
        return self.snapshot.active

    @property
    def count(self) -> int:
        return self.snapshot.count

    async def toggle(self) -> ToggleSnapshot:
        if self.state is ToggleState.PENDING:
            raise RuntimeError("A toggle is already in flight.")

        previous = self.snapshot
        desired = not previous.active
        self.snapshot = ToggleSnapshot(
            active=desired,
            count=max(previous.count + (1 if desired else -1), 0),
        )
        self.state = ToggleState.PENDING
        self.error = None

        try:
            server = await self._send(desired)
        except InkwellAPIError as exc:
            logger.warning("Optimistic toggle failed: %s", exc)
            self.error = exc
            return await self._roll_back(previous)

        if server.active != desired:
            return await self._roll_back(previous)

        self.snapshot = server
        self.state = ToggleState.CONFIRMED
        return self.snapshot

    async def _roll_back(self, previous: ToggleSnapshot) -> ToggleSnapshot:
        try:
            self.snapshot = await self._fetch()
        except InkwellAPIError as exc:
            logger.warning("Could not re-read state after a failed toggle: %s", exc)
            self.snapshot = previous
        self.state = ToggleState.ROLLED_BACK
        return self.snapshot


def post_like_toggle(
    client: InkwellClient, post_id: UUID, liked: bool, likes_count: int
) -> OptimisticToggle:
    async def send(desired: bool) -> ToggleSnapshot:
        body = await client.toggle_post_like(post_id)
        return ToggleSnapshot(active=body["liked"], count=body["likes_count"])

    async def fetch() -> ToggleSnapshot:
        body = await client.get_post(post_id)
        return ToggleSnapshot(active=body["is_liked"], count=body["like_count"])

    return OptimisticToggle(ToggleSnapshot(liked, likes_count), send, fetch)


def follow_toggle(
    client: InkwellClient, user_id: UUID, following: bool, followers_count: int
) -> OptimisticToggle:
    async def send(desired: bool) -> ToggleSnapshot:
        if desired:
            body = await client.follow(user_id)
        else:
            body = await client.unfollow(user_id)
        return ToggleSnapshot(active=body["is_following"], count=body["followers_count"])

    async def fetch() -> ToggleSnapshot:
        following_now = await client.is_following(user_id)
        profile = await client.get_profile(user_id)
        return ToggleSnapshot(active=following_now, count=profile["followers_count"])

    return OptimisticToggle(ToggleSnapshot(following, followers_count), send, fetch)
