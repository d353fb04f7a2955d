"""Process-wide instances shared by the socket handlers and HTTP routes."""

from __future__ import annotations

from datetime import timedelta

from smalltalk.core.config import settings
from smalltalk.realtime.blob_store import BlobStore, BlobSweeper
from smalltalk.realtime.identity import IdentityAssignor
from smalltalk.realtime.room_registry import RoomRegistry
from smalltalk.realtime.router import ChatRouter
from smalltalk.realtime.server import sio

blob_store = BlobStore(retention=timedelta(seconds=settings.blob_retention_seconds))
blob_sweeper = BlobSweeper(blob_store, interval=timedelta(seconds=settings.blob_sweep_interval_seconds))
room_registry = RoomRegistry(IdentityAssignor())
chat_router = ChatRouter(room_registry, emitter=sio)
