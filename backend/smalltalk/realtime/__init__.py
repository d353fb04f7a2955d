"""Realtime chat relay (Socket.IO rooms, presence and voice references)."""

from .server import create_socket_app, sio  # noqa: F401
from .state import blob_store, blob_sweeper, chat_router, room_registry  # noqa: F401
