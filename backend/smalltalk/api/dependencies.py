from smalltalk.core.config import Settings, get_settings
from smalltalk.realtime.blob_store import BlobStore
from smalltalk.realtime.state import blob_store


def get_blob_store() -> BlobStore:
    return blob_store


__all__ = ["BlobStore", "Settings", "get_blob_store", "get_settings"]
