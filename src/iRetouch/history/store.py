"""Bounded, compressed undo/redo history of edited frames.

The store keeps an ordered log of :class:`HistoryEntry` snapshots and a
pointer to the entry currently on screen.  Adding a state while the pointer
is not at the end first discards the entries after it (branch truncation);
appending beyond the capacity evicts the oldest entry and shifts the pointer
so it keeps referring to the same snapshot.

Every read-modify-write sequence runs under one lock.  Snapshot encoding is
the expensive part of :meth:`HistoryStore.add_state` and runs on a worker
thread before the lock is taken, so callers are never blocked by it.  The
change callback is invoked after the lock has been released, on the thread
that performed the mutation; marshalling it elsewhere is the caller's job.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from PySide6.QtCore import QThreadPool

from ..config import EngineSettings
from ..core import codec
from ..core.adjustments import AdjustmentParams
from ..core.pixel_buffer import PixelBuffer, require_buffer
from ..errors import CorruptEntryError, InvalidArgumentError
from .tasks import AddStateWorker

_LOGGER = logging.getLogger(__name__)

CURRENT_MARKER = "► "
OTHER_MARKER = "   "


@dataclass(frozen=True)
class HistoryEntry:
    """A single compressed snapshot in the history log."""

    sequence: int
    """Monotonic counter assigned at commit time; never reused by the store."""

    data: bytes = field(repr=False)
    description: str
    timestamp: datetime
    params: AdjustmentParams
    width: int
    height: int

    @property
    def is_valid(self) -> bool:
        return bool(self.data)

    def label(self) -> str:
        return f"{self.description} ({self.timestamp:%H:%M:%S})"


@dataclass(frozen=True)
class DecodedEntry:
    """A history entry together with its decoded frame."""

    entry: HistoryEntry
    buffer: PixelBuffer

    @property
    def description(self) -> str:
        return self.entry.description

    @property
    def params(self) -> AdjustmentParams:
        return self.entry.params


ChangeCallback = Callable[[], None]


class HistoryStore:
    """Thread-safe undo/redo log with compression and a fixed capacity."""

    def __init__(
        self,
        on_changed: Optional[ChangeCallback] = None,
        *,
        settings: Optional[EngineSettings] = None,
        thread_pool: Optional[QThreadPool] = None,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._capacity = self._settings.history_capacity
        self._on_changed = on_changed

        self._entries: list[HistoryEntry] = []
        self._current_index = -1
        self._next_sequence = 0
        self._pending = 0
        self._lock = threading.Lock()

        if thread_pool is None:
            # A single worker keeps snapshots from one caller in submission order.
            thread_pool = QThreadPool()
            thread_pool.setMaxThreadCount(1)
        self._pool = thread_pool

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._current_index

    @property
    def history_count(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def can_undo(self) -> bool:
        with self._lock:
            return self._current_index > 0

    @property
    def can_redo(self) -> bool:
        with self._lock:
            return self._current_index < len(self._entries) - 1

    @property
    def pending_count(self) -> int:
        """Number of :meth:`add_state` calls whose snapshot is not committed yet."""

        with self._lock:
            return self._pending

    def entries(self) -> tuple[HistoryEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def get_descriptions(self) -> tuple[str, ...]:
        """Return one line per entry, marking the current one with ``►``."""

        with self._lock:
            return tuple(
                f"{CURRENT_MARKER if index == self._current_index else OTHER_MARKER}{entry.label()}"
                for index, entry in enumerate(self._entries)
            )

    def current_state(self) -> Optional[DecodedEntry]:
        """Decode the entry under the pointer, or return ``None`` if there is none."""

        with self._lock:
            if not (0 <= self._current_index < len(self._entries)):
                return None
            return self._decode_entry(self._entries[self._current_index])

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_state(
        self,
        buffer: PixelBuffer,
        description: str,
        params: Optional[AdjustmentParams] = None,
    ) -> None:
        """Queue *buffer* as a new snapshot and return immediately.

        The buffer is validated synchronously; encoding and the commit happen
        on the store's thread pool.  The change callback fires once the entry
        is part of the log.
        """

        buffer = require_buffer(buffer)
        worker = AddStateWorker(
            self,
            buffer,
            description or "Unknown operation",
            params or AdjustmentParams(),
            datetime.now(),
        )
        with self._lock:
            self._pending += 1
        self._pool.start(worker)

    def undo(self) -> Optional[DecodedEntry]:
        """Step back one entry; ``None`` when impossible or the entry is corrupt."""

        return self._step(-1)

    def redo(self) -> Optional[DecodedEntry]:
        """Step forward one entry; ``None`` when impossible or the entry is corrupt."""

        return self._step(1)

    def jump_to(self, index: int) -> Optional[DecodedEntry]:
        """Walk the pointer to *index* one undo/redo step at a time.

        Navigation stops at the first entry that cannot be decoded, leaving the
        pointer on the last good entry.  Returns the entry reached at *index*,
        or ``None`` if the walk stopped early.
        """

        with self._lock:
            count = len(self._entries)
            current = self._current_index
        if not (0 <= index < count):
            raise InvalidArgumentError(f"History index {index} is outside 0..{count - 1}")
        if index == current:
            return self.current_state()

        reached: Optional[DecodedEntry] = None
        for _ in range(count):
            with self._lock:
                current = self._current_index
            if current == index:
                break
            reached = self._step(1 if current < index else -1)
            if reached is None:
                _LOGGER.warning("History navigation to %d stopped at %d", index, current)
                return None
        return reached

    def clear(self) -> None:
        """Drop every entry and reset the pointer."""

        with self._lock:
            self._entries.clear()
            self._current_index = -1
        _LOGGER.info("History cleared")
        self._notify()

    def wait_for_pending(self, timeout_ms: int = -1) -> bool:
        """Block until queued snapshots are committed; ``False`` on timeout."""

        return bool(self._pool.waitForDone(timeout_ms))

    # ------------------------------------------------------------------
    # Worker entry points
    # ------------------------------------------------------------------
    def encode_snapshot(self, buffer: PixelBuffer) -> bytes:
        return codec.encode(
            buffer,
            quality=self._settings.jpeg_quality,
            compression_level=self._settings.compression_level,
        )

    def commit_snapshot(
        self,
        payload: bytes,
        description: str,
        params: AdjustmentParams,
        timestamp: datetime,
        width: int,
        height: int,
    ) -> HistoryEntry:
        """Append an encoded snapshot, truncating and evicting as needed."""

        if not payload:
            raise CorruptEntryError("Refusing to store an empty snapshot")

        with self._lock:
            if self._current_index < len(self._entries) - 1:
                dropped = len(self._entries) - self._current_index - 1
                del self._entries[self._current_index + 1 :]
                _LOGGER.debug("Truncated %d redo entries", dropped)

            entry = HistoryEntry(
                sequence=self._next_sequence,
                data=payload,
                description=description,
                timestamp=timestamp,
                params=params,
                width=width,
                height=height,
            )
            self._next_sequence += 1
            self._entries.append(entry)
            self._current_index = len(self._entries) - 1

            while len(self._entries) > self._capacity:
                evicted = self._entries.pop(0)
                self._current_index -= 1
                _LOGGER.debug("Evicted history entry %d (%s)", evicted.sequence, evicted.description)

            count = len(self._entries)

        _LOGGER.info("Added history state %r (%d entries)", description, count)
        self._notify()
        return entry

    def task_finished(self) -> None:
        with self._lock:
            self._pending = max(0, self._pending - 1)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _step(self, delta: int) -> Optional[DecodedEntry]:
        with self._lock:
            target = self._current_index + delta
            if self._current_index < 0 or not (0 <= target < len(self._entries)):
                return None
            previous = self._current_index
            self._current_index = target
            decoded = self._decode_entry(self._entries[target])
            if decoded is None:
                self._current_index = previous
                _LOGGER.warning(
                    "Invalid history state encountered during %s; staying at %d",
                    "undo" if delta < 0 else "redo",
                    previous,
                )
                return None
        self._notify()
        return decoded

    @staticmethod
    def _decode_entry(entry: HistoryEntry) -> Optional[DecodedEntry]:
        if not entry.is_valid:
            return None
        try:
            buffer = codec.decode(entry.data)
        except CorruptEntryError as exc:
            _LOGGER.warning("History entry %d is corrupt: %s", entry.sequence, exc)
            return None
        return DecodedEntry(entry, buffer)

    def _notify(self) -> None:
        callback = self._on_changed
        if callback is None:
            return
        try:
            callback()
        except Exception:
            _LOGGER.exception("History change callback failed")


__all__ = ["DecodedEntry", "HistoryEntry", "HistoryStore"]
