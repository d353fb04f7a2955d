from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from smalltalk.realtime.identity import IdentityAssignor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Member:
    sid: str
    identity: str


@dataclass
class RoomState:
    # insertion order doubles as join order for participant snapshots
    members: Dict[str, Member] = field(default_factory=dict)


@dataclass(frozen=True)
class Departure:
    room_id: str
    identity: str
    remaining_sids: List[str]


@dataclass(frozen=True)
class Arrival:
    room_id: str
    identity: str
    other_sids: List[str]
    participants: List[str]
    previous: Optional[Departure] = None


class RoomRegistry:
    """Tracks which connections belong to which room.

    A connection is a member of at most one room. Rooms exist only while they
    have members. All mutation happens under a single lock; the snapshot-returning
    methods (``enter``/``depart``) let callers fan out after the lock is released.
    """

    def __init__(self, assignor: IdentityAssignor | None = None) -> None:
        self._assignor = assignor or IdentityAssignor()
        self._rooms: Dict[str, RoomState] = {}
        self._memberships: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def join(self, room_id: str, sid: str) -> str:
        arrival = await self.enter(room_id, sid)
        return arrival.identity

    async def leave(self, room_id: str, sid: str) -> Optional[str]:
        departure = await self.depart(room_id, sid)
        return departure.identity if departure else None

    async def enter(self, room_id: str, sid: str) -> Arrival:
        async with self._lock:
            previous: Optional[Departure] = None
            current_room = self._memberships.get(sid)
            if current_room is not None:
                previous = self._remove(current_room, sid)

            identity = self._assignor.generate()
            room = self._rooms.get(room_id)
            if room is None:
                room = RoomState()
                self._rooms[room_id] = room
                logger.debug("Room %s created", room_id)
            room.members[sid] = Member(sid=sid, identity=identity)
            self._memberships[sid] = room_id

            return Arrival(
                room_id=room_id,
                identity=identity,
                other_sids=[member_sid for member_sid in room.members if member_sid != sid],
                participants=[member.identity for member in room.members.values()],
                previous=previous,
            )

    async def depart(self, room_id: str, sid: str) -> Optional[Departure]:
        async with self._lock:
            if self._memberships.get(sid) != room_id:
                return None
            return self._remove(room_id, sid)

    async def list_identities(self, room_id: str) -> list[str]:
        async with self._lock:
            room = self._rooms.get(room_id)
            if not room:
                return []
            return [member.identity for member in room.members.values()]

    async def member_sids(self, room_id: str) -> list[str]:
        async with self._lock:
            room = self._rooms.get(room_id)
            if not room:
                return []
            return list(room.members.keys())

    async def room_of(self, sid: str) -> Optional[str]:
        async with self._lock:
            return self._memberships.get(sid)

    async def has_room(self, room_id: str) -> bool:
        async with self._lock:
            return room_id in self._rooms

    async def room_count(self) -> int:
        async with self._lock:
            return len(self._rooms)

    def _remove(self, room_id: str, sid: str) -> Optional[Departure]:
        room = self._rooms.get(room_id)
        self._memberships.pop(sid, None)
        if room is None:
            return None
        member = room.members.pop(sid, None)
        if member is None:
            return None
        if not room.members:
            self._rooms.pop(room_id, None)
            logger.debug("Room %s is now empty and removed", room_id)
        return Departure(room_id=room_id, identity=member.identity, remaining_sids=list(room.members.keys()))
