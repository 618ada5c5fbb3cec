"""In-memory registry binding users to their live realtime connection."""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

ConnectionT = TypeVar("ConnectionT", bound=Hashable)


class ConnectionRegistry(Generic[ConnectionT]):
    """Track which connection, if any, currently represents each user.

    A user has at most one connection (the most recent registration wins) and
    a connection serves at most one user. All operations are guarded by a
    single lock because registration, lookup and disconnection can arrive
    from different threads.
    """

    def __init__(self) -> None:
        self._by_user: dict[int, ConnectionT] = {}
        self._by_connection: dict[ConnectionT, int] = {}
        self._lock = threading.Lock()

    def register(self, user_id: int, connection: ConnectionT) -> ConnectionT | None:
        """Bind ``user_id`` to ``connection`` and return the superseded connection.

        Any earlier binding for ``user_id`` is discarded, and so is any earlier
        binding held by ``connection`` for a different user.
        """

        with self._lock:
            previous_user = self._by_connection.pop(connection, None)
            if previous_user is not None and previous_user != user_id:
                self._by_user.pop(previous_user, None)

            previous = self._by_user.get(user_id)
            if previous is not None and previous != connection:
                self._by_connection.pop(previous, None)
            else:
                previous = None

            self._by_user[user_id] = connection
            self._by_connection[connection] = user_id

        logger.debug("User %s bound to connection %s", user_id, connection)
        return previous

    def unregister(self, connection: ConnectionT) -> int | None:
        """Remove the binding held by ``connection``.

        Returns the user that was bound, or ``None`` when the connection was
        never registered or has already been superseded.
        """

        with self._lock:
            user_id = self._by_connection.pop(connection, None)
            if user_id is None:
                return None
            if self._by_user.get(user_id) == connection:
                del self._by_user[user_id]

        logger.debug("User %s unbound from connection %s", user_id, connection)
        return user_id

    def lookup(self, user_id: int) -> ConnectionT | None:
        """Return the connection currently bound to ``user_id``."""

        with self._lock:
            return self._by_user.get(user_id)

    def connected_user_ids(self) -> list[int]:
        with self._lock:
            return list(self._by_user)

    def clear(self) -> None:
        with self._lock:
            self._by_user.clear()
            self._by_connection.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_user)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._by_user


__all__ = ["ConnectionRegistry"]
