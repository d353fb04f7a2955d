from __future__ import annotations

import random
import string
import time
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

_ID_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_message_id(prefix: str = "msg", timestamp: int | None = None, length: int = 9) -> str:
    """Timestamp plus a random base36 tail; collisions are unlikely, not impossible."""

    stamp = now_ms() if timestamp is None else timestamp
    token = "".join(random.choice(_ID_ALPHABET) for _ in range(length))
    return f"{prefix}-{stamp}-{token}"


def generate_blob_id() -> str:
    return generate_message_id(prefix="voice")


class TextMessage(BaseModel):
    id: str
    type: Literal["text"] = "text"
    content: str
    nickname: str
    timestamp: int = Field(default_factory=now_ms)


class VoiceMessage(BaseModel):
    id: str
    type: Literal["voice"] = "voice"
    url: str
    duration: float = 0
    nickname: str
    timestamp: int = Field(default_factory=now_ms)


Message = Annotated[Union[TextMessage, VoiceMessage], Field(discriminator="type")]


class Presence(BaseModel):
    nickname: str
    timestamp: int = Field(default_factory=now_ms)
