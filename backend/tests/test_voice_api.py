import pytest
from fastapi.testclient import TestClient

from smalltalk.api.dependencies import get_blob_store, get_settings
from smalltalk.core.config import Settings
from smalltalk.main import api_app
from smalltalk.realtime.blob_store import BlobStore


@pytest.fixture
def store() -> BlobStore:
    return BlobStore()


@pytest.fixture
def client(store):
    api_app.dependency_overrides[get_blob_store] = lambda: store
    api_app.dependency_overrides[get_settings] = lambda: Settings(max_voice_upload_bytes=16)
    with TestClient(api_app) as test_client:
        yield test_client
    api_app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert isinstance(data["timestamp"], int)


def test_service_info_lists_endpoints(client):
    data = client.get("/").json()
    assert data["endpoints"]["uploadVoice"] == "POST /upload-voice"


def test_upload_then_fetch_voice(client):
    resp = client.post("/upload-voice", files={"audio": ("clip.webm", b"\x1a\x45\xdf\xa3\x01", "audio/webm")})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["messageId"].startswith("voice-")
    assert body["url"] == f"/voice/{body['messageId']}"

    fetched = client.get(body["url"])
    assert fetched.status_code == 200
    assert fetched.content == b"\x1a\x45\xdf\xa3\x01"
    assert fetched.headers["content-type"].startswith("audio/webm")
    assert fetched.headers["cache-control"] == "public, max-age=86400"


def test_upload_without_file_is_rejected(client):
    resp = client.post("/upload-voice", data={"other": "field"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No audio file provided"


def test_oversized_upload_never_reaches_store(client, store):
    resp = client.post("/upload-voice", files={"audio": ("big.webm", b"x" * 17, "audio/webm")})
    assert resp.status_code == 413
    assert client.get("/voice/anything").status_code == 404


def test_unknown_voice_is_not_found(client):
    resp = client.get("/voice/voice-does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Voice message not found"
