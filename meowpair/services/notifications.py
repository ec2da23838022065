"""
Notification details store: where to push mini-app notifications for a fid.

Keyed by fid (`meowpair:user:<fid>`). Two backends share the
NotificationStore protocol:

  InMemoryNotificationStore — per-process dict, for development and tests
  RedisNotificationStore    — JSON values in Redis

Routers receive the store through the `get_notification_store` dependency;
nothing reaches for a module global directly.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Optional, Protocol

import redis

from meowpair.core.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "meowpair"


@dataclass(frozen=True)
class NotificationDetails:
    url: str
    token: str


def notification_key(fid: int) -> str:
    return f"{KEY_PREFIX}:user:{fid}"


class NotificationStore(Protocol):
    def get(self, fid: int) -> Optional[NotificationDetails]: ...

    def set(self, fid: int, details: NotificationDetails) -> None: ...

    def delete(self, fid: int) -> None: ...


class InMemoryNotificationStore:
    def __init__(self) -> None:
        self._data: dict[str, NotificationDetails] = {}

    def get(self, fid: int) -> Optional[NotificationDetails]:
        return self._data.get(notification_key(fid))

    def set(self, fid: int, details: NotificationDetails) -> None:
        self._data[notification_key(fid)] = details

    def delete(self, fid: int) -> None:
        self._data.pop(notification_key(fid), None)


class RedisNotificationStore:
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisNotificationStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, fid: int) -> Optional[NotificationDetails]:
        raw = self._client.get(notification_key(fid))
        if not raw:
            return None
        try:
            return NotificationDetails(**json.loads(raw))
        except (ValueError, TypeError):
            logger.warning("Discarding malformed notification details for fid %s", fid)
            return None

    def set(self, fid: int, details: NotificationDetails) -> None:
        self._client.set(notification_key(fid), json.dumps(asdict(details)))

    def delete(self, fid: int) -> None:
        self._client.delete(notification_key(fid))


@lru_cache
def get_notification_store() -> NotificationStore:
    """FastAPI dependency. Backend chosen by NOTIFICATION_STORE_URL."""
    if settings.NOTIFICATION_STORE_URL:
        return RedisNotificationStore.from_url(settings.NOTIFICATION_STORE_URL)
    return InMemoryNotificationStore()
