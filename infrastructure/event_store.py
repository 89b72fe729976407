"""Append-only JSON Lines store for event records.

Every operation holds the store's asyncio.Lock for its whole duration, so
appends and reads are fully serialized: no torn lines, no reads of a
partially written record. Blocking file IO runs in a worker thread while
the lock is held so the event loop keeps serving other requests.

Records are never edited or deleted once appended. A line that cannot be
parsed is skipped on read and never repaired.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from errors import StorageError
from schemas.models.event import EventRecord
from shared.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class EventStore:
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def append(self, record: EventRecord) -> None:
        line = record.to_log_line() + "\n"
        async with self._lock:
            try:
                await self._run_in_thread(self._append_line, line)
            except OSError as e:
                log.error(
                    "event_append_failed",
                    path=str(self.path),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise StorageError("Failed to save log") from e

    async def read_all(self) -> list[EventRecord]:
        async with self._lock:
            try:
                content = await self._run_in_thread(self._read_text)
            except OSError as e:
                log.error(
                    "event_read_failed",
                    path=str(self.path),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise StorageError("Failed to read logs") from e

        if content is None:
            return []
        return self.parse_lines(content)

    async def read_raw(self) -> Optional[bytes]:
        """Return the log file's bytes, or None when nothing was written yet."""
        async with self._lock:
            try:
                return await self._run_in_thread(self._read_bytes)
            except OSError as e:
                log.error(
                    "event_read_failed",
                    path=str(self.path),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise StorageError("Failed to read logs") from e

    @staticmethod
    def parse_lines(content: str) -> list[EventRecord]:
        records: list[EventRecord] = []
        # "\n" only: U+2028 may appear unescaped inside JSON strings
        for lineno, line in enumerate(content.split("\n"), start=1):
            if not line.strip():
                continue
            try:
                records.append(EventRecord.model_validate_json(line))
            except PydanticValidationError:
                log.debug("event_line_skipped", lineno=lineno)
        return records

    @staticmethod
    async def _run_in_thread(fn: Callable[..., T], *args: Any) -> T:
        """Run *fn* in a worker thread; if cancelled, wait for the thread first.

        The caller holds the lock, so it is only released once the file IO
        has actually finished.
        """
        task = asyncio.ensure_future(asyncio.to_thread(fn, *args))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            while not task.done():
                try:
                    await asyncio.wait([task])
                except asyncio.CancelledError:
                    continue
            raise

    # ── blocking helpers, always called with the lock held ───────────────────

    def _append_line(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line)

    def _read_text(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None

    def _read_bytes(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
