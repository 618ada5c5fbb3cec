"""Best-effort delivery of notifications to connected users."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ispmedia.domain.entities import (
    Notification,
    NotificationType,
    notification_data_to_dict,
)

from .registry import ConnectionRegistry
from .transport import Transport

logger = logging.getLogger(__name__)

NOTIFICATION_EVENT = "notification"


class NotificationDispatcher:
    """Forward notification payloads to the user's live connection, if any.

    Delivery is a single attempt: offline users are skipped, nothing is
    queued or retried, and failures never reach the caller. Persisting the
    notification beforehand is the producer's job.
    """

    def __init__(self, registry: ConnectionRegistry, transport: Transport) -> None:
        self._registry = registry
        self._transport = transport

    def deliver(self, user_id: int, payload: Any) -> bool:
        """Send ``payload`` to ``user_id`` and report whether a send happened."""

        connection = self._registry.lookup(user_id)
        if connection is None:
            logger.debug("User %s is offline; realtime notification dropped", user_id)
            return False

        try:
            self._transport.send(connection, NOTIFICATION_EVENT, payload)
        except Exception as exc:
            logger.warning(
                "Realtime notification to user %s on connection %s failed: %s",
                user_id,
                connection,
                exc,
            )
            self._registry.unregister(connection)
            return False

        logger.info("Notification sent to user %s", user_id)
        return True

    def deliver_to_many(self, user_ids: Iterable[int], payload: Any) -> int:
        """Deliver ``payload`` to each distinct user and return the number of sends.

        Every id gets its own independent :meth:`deliver` call. Repeated ids
        are collapsed to their first occurrence, so a user never receives the
        same payload twice from one fan-out, and empty ids (``0``, ``None``)
        are skipped.
        """

        seen: set[int] = set()
        delivered = 0
        for user_id in user_ids:
            if not user_id or user_id in seen:
                continue
            seen.add(user_id)
            if self.deliver(user_id, payload):
                delivered += 1
        return delivered


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the realtime payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": NotificationType(notification.type).value,
        "title": notification.title,
        "message": notification.message,
        "data": notification_data_to_dict(notification.data),
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


__all__ = ["NOTIFICATION_EVENT", "NotificationDispatcher", "serialize_notification"]
