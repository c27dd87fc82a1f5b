"""Process-wide registry of admin rooms."""

from __future__ import annotations

import logging

from smsbridge.core.errors import InvariantViolationError
from smsbridge.models.session import AdminSession

logger = logging.getLogger("smsbridge.directory")


class BridgeDirectory:
    """Which rooms are admin rooms, and whose.

    Holds ``room_id -> AdminSession`` plus an ``owner -> room_id`` index that
    is updated together with it, so every owner maps to at most one session.
    Entries are never removed; the directory lives as long as the bridge.

    Mutation is synchronous and therefore atomic with respect to other
    coroutines. Callers serialise the surrounding check-then-act sequences
    with :class:`~smsbridge.core.locks.KeyedLockManager`.
    """

    def __init__(self) -> None:
        self._by_room: dict[str, AdminSession] = {}
        self._room_by_owner: dict[str, str] = {}

    def put(self, room_id: str, session: AdminSession) -> AdminSession:
        """Register *session* for *room_id* and return the authoritative session.

        Re-registering the same ``(room_id, owner)`` binding is a no-op that
        returns the session already stored.

        Raises:
            InvariantViolationError: If *session* is for another room, the room
                already belongs to a different owner, or the owner already has
                an admin room elsewhere. The first committed entry wins.
        """
        if session.room_id != room_id:
            raise InvariantViolationError(
                f"Session for room {session.room_id} cannot be registered under {room_id}"
            )

        existing = self._by_room.get(room_id)
        if existing is not None:
            if not existing.same_binding(session):
                raise InvariantViolationError(
                    f"Room {room_id} is the admin room of {existing.owner}, "
                    f"refusing to reassign it to {session.owner}"
                )
            return existing

        owner_room = self._room_by_owner.get(session.owner)
        if owner_room is not None and owner_room != room_id:
            raise InvariantViolationError(
                f"{session.owner} already has admin room {owner_room}, "
                f"refusing second admin room {room_id}"
            )

        self._by_room[room_id] = session
        self._room_by_owner[session.owner] = room_id
        logger.debug("Registered admin room %s for %s", room_id, session.owner)
        return session

    def get_by_room(self, room_id: str) -> AdminSession | None:
        return self._by_room.get(room_id)

    def get_by_owner(self, owner: str) -> AdminSession | None:
        room_id = self._room_by_owner.get(owner)
        if room_id is None:
            return None
        return self._by_room[room_id]

    def all(self) -> list[AdminSession]:
        """Snapshot of every registered session."""
        return list(self._by_room.values())

    def __len__(self) -> int:
        return len(self._by_room)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._by_room
