"""WebSocket connection admission control."""

from __future__ import annotations

import asyncio
from typing import Any


class ConnectionManager:
    """Counts admitted sockets against a global cap.

    This is not a session registry: sessions stay owned by their handler and
    are never looked up from here.
    """

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: dict[int, str] = {}

    async def connect(self, ws: Any, owner_id: str) -> bool:
        """Attempt to admit a websocket connection (without accepting it)."""
        key = id(ws)
        async with self._lock:
            if len(self._active) >= self._max:
                return False
            self._active[key] = owner_id
            return True

    async def disconnect(self, ws: Any) -> None:
        async with self._lock:
            self._active.pop(id(ws), None)

    def get_connection_count(self) -> int:
        return len(self._active)

    def count_for_owner(self, owner_id: str) -> int:
        return sum(1 for owner in self._active.values() if owner == owner_id)


__all__ = ["ConnectionManager"]
