"""Room membership and broadcasting to connections."""

from __future__ import annotations

import threading
from typing import Any, Callable, Protocol


class Connection(Protocol):
    """What the broadcaster needs from a connection."""

    @property
    def id(self) -> str: ...

    def emit(self, event: str, *args: Any) -> None: ...


class Broadcast:
    """Keeps rooms of connections and sends events to them.

    A room exists while it has at least one member.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, dict[str, Connection]] = {}
        self._lock = threading.RLock()

    def join(self, room: str, connection: Connection) -> None:
        """Add the connection to the room."""
        with self._lock:
            self._rooms.setdefault(room, {})[connection.id] = connection

    def leave(self, room: str, connection: Connection) -> None:
        """Remove the connection from the room, if it is there."""
        with self._lock:
            members = self._rooms.get(room)
            if members is None:
                return
            members.pop(connection.id, None)
            if not members:
                del self._rooms[room]

    def leave_all(self, connection: Connection) -> None:
        """Remove the connection from every room."""
        with self._lock:
            for room in list(self._rooms):
                members = self._rooms[room]
                members.pop(connection.id, None)
                if not members:
                    del self._rooms[room]

    def clear(self, room: str) -> None:
        """Remove the room and all its members."""
        with self._lock:
            self._rooms.pop(room, None)

    def send(self, room: str, event: str, *args: Any) -> None:
        """Emit the event with args to every member of the room."""
        for connection in self._members(room):
            connection.emit(event, *args)

    def send_all(self, event: str, *args: Any) -> None:
        """Emit the event with args to every member of every room."""
        with self._lock:
            targets = [c for members in self._rooms.values() for c in members.values()]
        for connection in targets:
            connection.emit(event, *args)

    def for_each(self, room: str, func: Callable[[Connection], Any]) -> None:
        """Call ``func`` with each member of the room; nothing if it does not exist."""
        for connection in self._members(room):
            func(connection)

    def count(self, room: str) -> int:
        """Return the number of connections in the room."""
        with self._lock:
            return len(self._rooms.get(room, {}))

    def rooms(self, connection: Connection | None = None) -> list[str]:
        """Return the rooms the connection is in, or all rooms if it is None."""
        with self._lock:
            if connection is None:
                return self.all_rooms()
            return [room for room, members in self._rooms.items() if connection.id in members]

    def all_rooms(self) -> list[str]:
        """Return every room."""
        with self._lock:
            return list(self._rooms)

    def _members(self, room: str) -> list[Connection]:
        with self._lock:
            return list(self._rooms.get(room, {}).values())