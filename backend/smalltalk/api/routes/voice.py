import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from smalltalk.api.dependencies import BlobStore, Settings, get_blob_store, get_settings
from smalltalk.realtime.messages import generate_blob_id
from smalltalk.schemas.voice import VoiceUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_READ_CHUNK = 64 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"


async def _read_limited(upload: UploadFile, limit: int) -> bytes:
    chunks: list[bytes] = []
    size = 0
    while True:
        chunk = await upload.read(_READ_CHUNK)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"Voice message exceeds {limit} bytes",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/upload-voice", response_model=VoiceUploadResponse)
async def upload_voice(
    audio: UploadFile | None = File(default=None),
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
) -> VoiceUploadResponse:
    if audio is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No audio file provided")

    data = await _read_limited(audio, settings.max_voice_upload_bytes)
    message_id = generate_blob_id()
    await store.put(message_id, data, audio.content_type or DEFAULT_CONTENT_TYPE)
    logger.info("Voice message uploaded: %s (%d bytes)", message_id, len(data))

    return VoiceUploadResponse(message_id=message_id, url=f"/voice/{message_id}")


@router.get("/voice/{message_id}", response_class=Response)
async def get_voice(message_id: str, store: BlobStore = Depends(get_blob_store)) -> Response:
    record = await store.get(message_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voice message not found")

    logger.debug("Voice message retrieved: %s", message_id)
    return Response(
        content=record.data,
        media_type=record.content_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )
