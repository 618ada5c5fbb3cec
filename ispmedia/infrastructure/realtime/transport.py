"""Transport capability used to push events to realtime connections."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Coroutine
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when an event cannot even be handed to the connection."""


@runtime_checkable
class Transport(Protocol):
    """Capability to send a named event to one connection."""

    def send(self, connection: Any, event: str, payload: Any) -> None: ...


@dataclass(frozen=True)
class Connection:
    """Handle for one live websocket session.

    Equality and hashing only consider ``id`` so the handle can be used as a
    registry key while the websocket itself stays owned by the route.
    """

    websocket: WebSocket = field(compare=False, repr=False)
    loop: asyncio.AbstractEventLoop = field(compare=False, repr=False)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    @classmethod
    def open(cls, websocket: WebSocket) -> "Connection":
        """Create a handle bound to the event loop currently serving ``websocket``."""

        return cls(websocket=websocket, loop=asyncio.get_running_loop())

    def __str__(self) -> str:
        return self.id


class WebSocketTransport:
    """Send events over FastAPI websockets without waiting for completion.

    Events are framed as ``{"type": event, "data": payload}``. Sends are
    scheduled on the loop that owns the websocket, so producers may call
    :meth:`send` from request worker threads as well as from the loop itself.
    """

    def __init__(
        self, *, on_send_failure: Callable[[Connection], object] | None = None
    ) -> None:
        self._on_send_failure = on_send_failure
        self._pending: set[asyncio.Future | Future] = set()

    def send(self, connection: Connection, event: str, payload: Any) -> None:
        message = {"type": event, "data": payload}
        self._schedule(connection, connection.websocket.send_json(message), report=True)

    def close(self, connection: Connection, *, code: int = 1000) -> None:
        self._schedule(connection, connection.websocket.close(code=code), report=False)

    def _schedule(
        self, connection: Connection, coro: Coroutine[Any, Any, Any], *, report: bool
    ) -> None:
        loop = connection.loop
        if loop.is_closed():
            coro.close()
            raise TransportError(f"Event loop for connection {connection.id} is closed")

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            future: asyncio.Future | Future = loop.create_task(coro)
        else:
            future = asyncio.run_coroutine_threadsafe(coro, loop)

        self._pending.add(future)
        future.add_done_callback(
            lambda done: self._finish(connection, done, report=report)
        )

    def _finish(
        self, connection: Connection, future: asyncio.Future | Future, *, report: bool
    ) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        if not report:
            logger.debug("Closing connection %s failed: %s", connection.id, exc)
            return
        logger.warning("Realtime send to connection %s failed: %s", connection.id, exc)
        if self._on_send_failure is not None:
            self._on_send_failure(connection)


__all__ = ["Connection", "Transport", "TransportError", "WebSocketTransport"]
