from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(hours=24)
DEFAULT_SWEEP_INTERVAL = timedelta(hours=1)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class BlobRecord:
    id: str
    data: bytes
    content_type: str
    created_at: datetime

    @property
    def size(self) -> int:
        return len(self.data)


class BlobStore:
    """In-memory attachment storage with age-based eviction.

    Records are keyed only by their id. Retention is measured from the last
    ``put``; reads never extend it.
    """

    def __init__(self, retention: timedelta = DEFAULT_RETENTION, clock: Clock = utc_now) -> None:
        self._retention = retention
        self._clock = clock
        self._records: Dict[str, BlobRecord] = {}
        self._lock = asyncio.Lock()

    async def put(self, blob_id: str, data: bytes, content_type: str) -> BlobRecord:
        record = BlobRecord(id=blob_id, data=bytes(data), content_type=content_type, created_at=self._clock())
        async with self._lock:
            self._records[blob_id] = record
        logger.debug("Stored blob %s (%d bytes, %s)", blob_id, record.size, content_type)
        return record

    async def get(self, blob_id: str) -> Optional[BlobRecord]:
        async with self._lock:
            record = self._records.get(blob_id)
        if record is None:
            logger.debug("Blob lookup miss: %s", blob_id)
        return record

    async def sweep(self) -> int:
        now = self._clock()
        async with self._lock:
            expired = [blob_id for blob_id, record in self._records.items() if now - record.created_at > self._retention]
            for blob_id in expired:
                self._records.pop(blob_id, None)
        if expired:
            logger.info("Swept %d expired blob(s)", len(expired))
        return len(expired)

    async def count(self) -> int:
        async with self._lock:
            return len(self._records)


class BlobSweeper:
    """Runs ``BlobStore.sweep`` on a fixed interval in a background task."""

    def __init__(self, store: BlobStore, interval: timedelta = DEFAULT_SWEEP_INTERVAL) -> None:
        self._store = store
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="blob-sweeper")
        logger.debug("Blob sweeper started (interval=%ss)", self._interval.total_seconds())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Blob sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval.total_seconds())
            try:
                await self._store.sweep()
            except Exception:
                logger.exception("Blob sweep failed")
