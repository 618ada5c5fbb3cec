"""Realtime notification delivery for the infrastructure layer."""

from .dispatcher import NOTIFICATION_EVENT, NotificationDispatcher, serialize_notification
from .hub import RealtimeHub, SUPERSEDED_CLOSE_CODE
from .registry import ConnectionRegistry
from .transport import Connection, Transport, TransportError, WebSocketTransport

__all__ = [
    "NOTIFICATION_EVENT",
    "NotificationDispatcher",
    "serialize_notification",
    "RealtimeHub",
    "SUPERSEDED_CLOSE_CODE",
    "ConnectionRegistry",
    "Connection",
    "Transport",
    "TransportError",
    "WebSocketTransport",
]
