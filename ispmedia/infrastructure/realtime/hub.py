"""Lifecycle glue between the websocket route, the registry and producers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Mapping

from ispmedia.domain.entities import Notification

from .dispatcher import NotificationDispatcher, serialize_notification
from .registry import ConnectionRegistry
from .transport import Transport

logger = logging.getLogger(__name__)

SUPERSEDED_CLOSE_CODE = 4000


class RealtimeHub:
    """Own the connection registry and dispatcher for one application instance."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        transport: Transport,
        *,
        close_superseded: bool = False,
    ) -> None:
        self.registry = registry
        self.dispatcher = NotificationDispatcher(registry, transport)
        self._transport = transport
        self._close_superseded = close_superseded

    def on_connection_open(self, connection: Any) -> None:
        logger.info("Realtime connection %s opened", connection)

    def on_user_register(self, user_id: int, connection: Any) -> None:
        """Bind ``user_id`` to ``connection``, replacing any older binding."""

        previous = self.registry.register(user_id, connection)
        logger.info("User %s registered on connection %s", user_id, connection)
        if previous is None:
            return

        logger.info(
            "Connection %s superseded by %s for user %s", previous, connection, user_id
        )
        close = getattr(self._transport, "close", None)
        if self._close_superseded and close is not None:
            close(previous, code=SUPERSEDED_CLOSE_CODE)

    def on_connection_close(self, connection: Any) -> None:
        user_id = self.registry.unregister(connection)
        if user_id is None:
            logger.info("Realtime connection %s closed", connection)
        else:
            logger.info("User %s disconnected from connection %s", user_id, connection)

    def notify_user(
        self, user_id: int, notification: Notification | Mapping[str, Any]
    ) -> bool:
        """Push ``notification`` to ``user_id`` if they are currently connected."""

        return self.dispatcher.deliver(user_id, _to_payload(notification))

    def notify_users(
        self, user_ids: Iterable[int], notification: Notification | Mapping[str, Any]
    ) -> int:
        return self.dispatcher.deliver_to_many(user_ids, _to_payload(notification))

    def shutdown(self) -> None:
        logger.info("Dropping %s realtime registrations", len(self.registry))
        self.registry.clear()


def _to_payload(notification: Notification | Mapping[str, Any]) -> Any:
    if isinstance(notification, Notification):
        return serialize_notification(notification)
    return notification


__all__ = ["RealtimeHub", "SUPERSEDED_CLOSE_CODE"]
