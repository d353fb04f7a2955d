from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from smalltalk.realtime.blob_store import BlobStore
from smalltalk.realtime.identity import IdentityAssignor
from smalltalk.realtime.room_registry import RoomRegistry
from smalltalk.realtime.router import ChatRouter


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class SequentialAssignor(IdentityAssignor):
    def __init__(self) -> None:
        super().__init__()
        self._counter = itertools.count(1000)

    def generate(self) -> str:
        return f"User{next(self._counter)}"


@dataclass
class Emitted:
    event: str
    data: Any
    to: Optional[str]


@dataclass
class RecordingEmitter:
    events: list[Emitted] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)

    async def emit(self, event: str, data: Any = None, to: Optional[str] = None) -> None:
        if to in self.failing:
            raise ConnectionError(f"{to} is gone")
        self.events.append(Emitted(event=event, data=data, to=to))

    def received(self, sid: str) -> list[Emitted]:
        return [item for item in self.events if item.to == sid]

    def names(self, sid: str) -> list[str]:
        return [item.event for item in self.received(sid)]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def blob_store(clock: FakeClock) -> BlobStore:
    return BlobStore(clock=clock)


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry(SequentialAssignor())


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def router(registry: RoomRegistry, emitter: RecordingEmitter) -> ChatRouter:
    return ChatRouter(registry, emitter)
