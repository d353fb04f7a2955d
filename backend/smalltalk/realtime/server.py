"""Socket.IO endpoint for the chat relay.

The server only transports events; room membership lives in ``RoomRegistry``
and every delivery is addressed to a single sid by ``ChatRouter``.
"""

from __future__ import annotations

from typing import Sequence

import socketio
from fastapi import FastAPI

from smalltalk.core.config import settings


def resolve_cors_origins(origins: Sequence[str]) -> list[str] | str:
    # python-socketio expects "*" as a plain string, not inside a list
    if "*" in origins:
        return "*"
    return list(dict.fromkeys(origin for origin in origins if origin))


def create_socket_server(origins: Sequence[str], *, ping_interval: int, debug: bool = False) -> socketio.AsyncServer:
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=resolve_cors_origins(origins),
        cors_credentials=settings.cors_allow_credentials,
        ping_interval=ping_interval,
        ping_timeout=ping_interval * 2,
        logger=debug,
        engineio_logger=debug,
    )


sio = create_socket_server(
    settings.allowed_origins,
    ping_interval=settings.websocket_ping_interval,
    debug=settings.debug,
)


def create_socket_app(app: FastAPI, path: str | None = None) -> socketio.ASGIApp:
    """Mount the relay's Socket.IO endpoint in front of the HTTP routes."""

    return socketio.ASGIApp(
        sio,
        other_asgi_app=app,
        socketio_path=path or settings.socketio_path,
    )
