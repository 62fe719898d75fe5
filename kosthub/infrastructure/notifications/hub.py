"""Live connection registry that fans notification events out to clients."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Protocol

from kosthub.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

HEARTBEAT_EVENT = "heartbeat"


class NotificationConnection(Protocol):
    """Transport able to deliver one JSON frame; Starlette websockets qualify."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...


@dataclass(frozen=True)
class ConnectionHandle:
    """Opaque token returned by :meth:`NotificationHub.register`."""

    user_id: int
    connection_id: str


class NotificationHub:
    """Own every live connection, grouped by user.

    A user may hold any number of connections (tabs, devices). Mutations of
    the registry happen under a lock; pushes iterate a snapshot taken under
    that lock and write outside of it, so a slow client never blocks
    registration and a disconnect racing with a push is harmless.
    """

    def __init__(self) -> None:
        self._connections: dict[int, dict[str, NotificationConnection]] = {}
        self._lock = threading.Lock()

    async def connect(self, user_id: int, websocket) -> ConnectionHandle:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        return self.register(user_id, websocket)

    def register(self, user_id: int, connection: NotificationConnection) -> ConnectionHandle:
        """Add ``connection`` to the pool for ``user_id``."""

        handle = ConnectionHandle(user_id=user_id, connection_id=uuid.uuid4().hex)
        with self._lock:
            self._connections.setdefault(user_id, {})[handle.connection_id] = connection
            total = len(self._connections[user_id])
        logger.info("Connection registered for user %s (%s active)", user_id, total)
        return handle

    def unregister(self, handle: ConnectionHandle) -> bool:
        """Remove the connection behind ``handle``; safe to call repeatedly.

        Returns ``True`` only for the call that actually removed it.
        """

        with self._lock:
            connections = self._connections.get(handle.user_id)
            if connections is None or handle.connection_id not in connections:
                return False
            del connections[handle.connection_id]
            if not connections:
                del self._connections[handle.user_id]
        logger.info("Connection removed for user %s", handle.user_id)
        return True

    async def push(self, user_id: int, event: str, payload: Any) -> int:
        """Send ``payload`` tagged ``event`` to every live connection of ``user_id``.

        Users without connections are skipped silently. Connections whose
        write fails are unregistered without affecting the others. Returns
        the number of connections that received the frame.
        """

        targets = self._snapshot(user_id)
        if not targets:
            logger.debug("No live connections for user %s; %s not pushed", user_id, event)
            return 0

        message = {"type": event, "data": payload}
        delivered = 0
        for handle, connection in targets:
            if await self._send(handle, connection, message):
                delivered += 1
        return delivered

    async def broadcast_heartbeat(self) -> int:
        """Write a keepalive frame to every connection, pruning dead ones."""

        targets = self._snapshot()
        if not targets:
            return 0

        message = {
            "type": HEARTBEAT_EVENT,
            "data": {"timestamp": now_in_app_timezone().isoformat()},
        }
        alive = 0
        for handle, connection in targets:
            if await self._send(handle, connection, message):
                alive += 1
        logger.debug(
            "Heartbeat sent to %s of %s connections (%s users still connected)",
            alive,
            len(targets),
            len(self.connected_users()),
        )
        return alive

    def live_count(self, user_id: int | None = None) -> int:
        """Return the number of live connections, overall or for ``user_id``."""

        with self._lock:
            if user_id is not None:
                return len(self._connections.get(user_id, {}))
            return sum(len(connections) for connections in self._connections.values())

    def connected_users(self) -> set[int]:
        """Return the ids of users holding at least one live connection."""

        with self._lock:
            return set(self._connections)

    def _snapshot(
        self, user_id: int | None = None
    ) -> list[tuple[ConnectionHandle, NotificationConnection]]:
        with self._lock:
            if user_id is not None:
                groups = {user_id: self._connections.get(user_id, {})}
            else:
                groups = self._connections
            return [
                (ConnectionHandle(owner, connection_id), connection)
                for owner, connections in groups.items()
                for connection_id, connection in connections.items()
            ]

    async def _send(
        self,
        handle: ConnectionHandle,
        connection: NotificationConnection,
        message: dict[str, Any],
    ) -> bool:
        try:
            await connection.send_json(message)
        except Exception as exc:  # any transport failure means the client is gone
            logger.warning(
                "Dropping connection for user %s after failed %s write: %s",
                handle.user_id,
                message.get("type"),
                exc,
            )
            self.unregister(handle)
            return False
        return True


__all__ = [
    "ConnectionHandle",
    "HEARTBEAT_EVENT",
    "NotificationConnection",
    "NotificationHub",
]
