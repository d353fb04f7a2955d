from __future__ import annotations

from typing import Any

from smalltalk.realtime.server import sio
from smalltalk.realtime.state import chat_router


def _field(data: Any, key: str) -> Any:
    if isinstance(data, dict):
        return data.get(key)
    return None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: dict[str, Any] | None = None) -> None:
    await chat_router.connect(sid)


@sio.event
async def disconnect(sid: str, *args: Any) -> None:
    await chat_router.disconnect(sid)


@sio.on("join-room")
async def handle_join_room(sid: str, room_id: Any = None) -> None:
    await chat_router.join(sid, room_id)


@sio.on("send-message")
async def handle_send_message(sid: str, data: Any = None) -> None:
    await chat_router.send_text(sid, _field(data, "content"))


@sio.on("send-voice")
async def handle_send_voice(sid: str, data: Any = None) -> None:
    await chat_router.send_voice(
        sid,
        _field(data, "messageId"),
        _field(data, "url"),
        _field(data, "duration"),
    )
