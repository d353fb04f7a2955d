from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Protocol

from smalltalk.realtime.messages import Message, Presence, TextMessage, VoiceMessage, generate_message_id, now_ms
from smalltalk.realtime.room_registry import Departure, RoomRegistry

logger = logging.getLogger(__name__)

NICKNAME_ASSIGNED = "nickname-assigned"
PARTICIPANTS_LIST = "participants-list"
USER_JOINED = "user-joined"
USER_LEFT = "user-left"
NEW_MESSAGE = "new-message"


class Emitter(Protocol):
    async def emit(self, event: str, data: Any = None, to: Optional[str] = None) -> Any: ...


class ConnectionState(str, Enum):
    UNJOINED = "unjoined"
    IN_ROOM = "in_room"


@dataclass
class ConnectionSession:
    sid: str
    room_id: Optional[str] = None
    identity: Optional[str] = None
    closed: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def state(self) -> ConnectionState:
        if self.room_id is not None and self.identity is not None:
            return ConnectionState.IN_ROOM
        return ConnectionState.UNJOINED

    def enter(self, room_id: str, identity: str) -> None:
        self.room_id = room_id
        self.identity = identity

    def reset(self) -> None:
        self.room_id = None
        self.identity = None


class ChatRouter:
    """Per-connection state machine and fan-out for chat rooms.

    Each connection moves between ``Unjoined`` and ``InRoom``. Registry state is
    mutated first; notifications are delivered afterwards from the snapshots
    the registry returns, so a slow recipient never holds the registry lock.
    Delivery is fire-and-forget: failures are logged and otherwise ignored.
    """

    def __init__(self, registry: RoomRegistry, emitter: Emitter) -> None:
        self._registry = registry
        self._emitter = emitter
        self._sessions: Dict[str, ConnectionSession] = {}

    def session(self, sid: str) -> Optional[ConnectionSession]:
        return self._sessions.get(sid)

    async def connect(self, sid: str) -> ConnectionSession:
        session = self._sessions.get(sid)
        if session is None:
            session = ConnectionSession(sid=sid)
            self._sessions[sid] = session
        logger.debug("Client connected: %s", sid)
        return session

    async def join(self, sid: str, room_id: Any) -> None:
        session = self._sessions.get(sid)
        if session is None:
            logger.warning("Join from unknown connection: %s", sid)
            return
        if not isinstance(room_id, str):
            logger.warning("Join with invalid room id from %s: %r", sid, room_id)
            return

        async with session.lock:
            if session.closed:
                return
            arrival = await self._registry.enter(room_id, sid)
            session.enter(room_id, arrival.identity)
            logger.info("%s (%s) joined room: %s", arrival.identity, sid, room_id)

            if arrival.previous is not None:
                await self._announce_departure(arrival.previous)

            await self._deliver(NICKNAME_ASSIGNED, arrival.identity, [sid])
            joined = Presence(nickname=arrival.identity)
            await self._deliver(USER_JOINED, joined.model_dump(), arrival.other_sids)
            await self._deliver(PARTICIPANTS_LIST, list(arrival.participants), [sid])

    async def send_text(self, sid: str, content: Any) -> None:
        session = self._sessions.get(sid)
        if session is None or session.state is not ConnectionState.IN_ROOM:
            logger.warning("Message from unjoined user: %s", sid)
            return
        if not isinstance(content, str):
            logger.warning("Message with invalid content from %s", sid)
            return

        async with session.lock:
            room_id, identity = session.room_id, session.identity
            if session.closed or room_id is None or identity is None:
                return
            timestamp = now_ms()
            message = TextMessage(
                id=generate_message_id(timestamp=timestamp),
                content=content,
                nickname=identity,
                timestamp=timestamp,
            )
            logger.debug("Message in %s from %s: %s", room_id, identity, content[:50])
            await self._broadcast(room_id, message)

    async def send_voice(self, sid: str, blob_id: Any, url: Any, duration: Any = None) -> None:
        session = self._sessions.get(sid)
        if session is None or session.state is not ConnectionState.IN_ROOM:
            logger.warning("Voice message from unjoined user: %s", sid)
            return
        if not isinstance(blob_id, str) or not blob_id or not isinstance(url, str):
            logger.warning("Voice message with invalid reference from %s", sid)
            return

        async with session.lock:
            room_id, identity = session.room_id, session.identity
            if session.closed or room_id is None or identity is None:
                return
            message = VoiceMessage(
                id=blob_id,
                url=url,
                duration=_coerce_duration(duration),
                nickname=identity,
            )
            logger.debug("Voice message in %s from %s: %s", room_id, identity, blob_id)
            await self._broadcast(room_id, message)

    async def disconnect(self, sid: str) -> None:
        session = self._sessions.pop(sid, None)
        logger.debug("Client disconnected: %s", sid)
        if session is None:
            return

        async with session.lock:
            session.closed = True
            room_id = session.room_id
            session.reset()
            if room_id is None:
                return
            departure = await self._registry.depart(room_id, sid)
            if departure is not None:
                await self._announce_departure(departure)

    async def _broadcast(self, room_id: str, message: Message) -> None:
        recipients = await self._registry.member_sids(room_id)
        await self._deliver(NEW_MESSAGE, message.model_dump(), recipients)

    async def _announce_departure(self, departure: Departure) -> None:
        left = Presence(nickname=departure.identity)
        await self._deliver(USER_LEFT, left.model_dump(), departure.remaining_sids)

    async def _deliver(self, event: str, data: Any, sids: Iterable[str]) -> None:
        targets = list(sids)
        if not targets:
            return
        results = await asyncio.gather(
            *(self._emitter.emit(event, data, to=target) for target in targets),
            return_exceptions=True,
        )
        for target, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning("Failed to deliver %s to %s: %s", event, target, result)


def _coerce_duration(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value
