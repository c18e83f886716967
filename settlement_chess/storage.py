from __future__ import annotations

import asyncio
from typing import Protocol

import redis.asyncio as redis

from .config import LOG_LIMIT, REDIS_URL
from .models.session import GameSession


class SessionStore(Protocol):
    async def get(self, sid: str) -> GameSession | None: ...
    async def set(self, s: GameSession) -> None: ...
    async def delete(self, sid: str) -> None: ...
    async def all(self) -> dict[str, GameSession]: ...
    async def append_log(self, sid: str, entry_json: str) -> None: ...
    async def list_log(self, sid: str, limit: int) -> list[str]: ...


class MemorySessionStore:
    """In-process store with an asyncio.Lock for safety within a single worker."""

    def __init__(self, log_limit: int = LOG_LIMIT) -> None:
        # sessions are kept as JSON so callers never share live objects
        self._data: dict[str, str] = {}
        self._logs: dict[str, list[str]] = {}
        self._log_limit = log_limit
        self._lock = asyncio.Lock()

    async def get(self, sid: str) -> GameSession | None:
        async with self._lock:
            raw = self._data.get(sid)
        return GameSession.model_validate_json(raw) if raw else None

    async def set(self, s: GameSession) -> None:
        raw = s.model_dump_json()
        async with self._lock:
            self._data[s.id] = raw

    async def delete(self, sid: str) -> None:
        async with self._lock:
            self._data.pop(sid, None)
            self._logs.pop(sid, None)

    async def all(self) -> dict[str, GameSession]:
        async with self._lock:
            raw = dict(self._data)
        return {sid: GameSession.model_validate_json(v) for sid, v in raw.items()}

    async def append_log(self, sid: str, entry_json: str) -> None:
        async with self._lock:
            lst = self._logs.setdefault(sid, [])
            lst.append(entry_json)
            del lst[: max(0, len(lst) - self._log_limit)]

    async def list_log(self, sid: str, limit: int) -> list[str]:
        async with self._lock:
            return list(self._logs.get(sid, [])[-limit:])


class RedisSessionStore:
    """Cross-worker store using Redis. Set REDIS_URL to enable."""

    def __init__(self, url: str, log_limit: int = LOG_LIMIT) -> None:
        self._r = redis.from_url(url, encoding="utf-8", decode_responses=True)
        self._prefix = "settlement:sessions:"
        self._log_limit = log_limit

    def _key(self, sid: str) -> str:
        return f"{self._prefix}{sid}"

    def _log_key(self, sid: str) -> str:
        return f"{self._prefix}{sid}:log"

    async def get(self, sid: str) -> GameSession | None:
        data = await self._r.get(self._key(sid))
        return GameSession.model_validate_json(data) if data else None

    async def set(self, s: GameSession) -> None:
        await self._r.set(self._key(s.id), s.model_dump_json())

    async def delete(self, sid: str) -> None:
        await self._r.delete(self._key(sid), self._log_key(sid))

    async def all(self) -> dict[str, GameSession]:
        keys = await self._r.keys(f"{self._prefix}*")
        out: dict[str, GameSession] = {}
        for k in keys:
            if k.endswith(":log"):
                continue
            data = await self._r.get(k)
            if data:
                s = GameSession.model_validate_json(data)
                out[s.id] = s
        return out

    async def append_log(self, sid: str, entry_json: str) -> None:
        pipe = self._r.pipeline()
        pipe.rpush(self._log_key(sid), entry_json)
        pipe.ltrim(self._log_key(sid), -self._log_limit, -1)
        await pipe.execute()

    async def list_log(self, sid: str, limit: int) -> list[str]:
        return await self._r.lrange(self._log_key(sid), -limit, -1)


def make_store() -> SessionStore:
    return RedisSessionStore(REDIS_URL) if REDIS_URL else MemorySessionStore()


store: SessionStore = make_store()
