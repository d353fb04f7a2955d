from __future__ import annotations

from pydantic import Field

from smalltalk.schemas.common import APIModel


class VoiceUploadResponse(APIModel):
    success: bool = True
    message_id: str = Field(alias="messageId", description="Blob id, reused as the voice message id")
    url: str = Field(description="Relative URL the audio can be fetched from")
