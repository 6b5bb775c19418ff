"""Background worker that encodes and commits history snapshots."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from PySide6.QtCore import QRunnable

from ..core.adjustments import AdjustmentParams
from ..core.pixel_buffer import PixelBuffer

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .store import HistoryStore


_LOGGER = logging.getLogger(__name__)


class AddStateWorker(QRunnable):
    """Compress a frame off the caller's thread and append it to a :class:`HistoryStore`."""

    def __init__(
        self,
        store: "HistoryStore",
        buffer: PixelBuffer,
        description: str,
        params: AdjustmentParams,
        timestamp: datetime,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)

        # ``PixelBuffer`` is immutable, so the worker can hold the caller's
        # instance without copying it.
        self._store = store
        self._buffer = buffer
        self._description = description
        self._params = params
        self._timestamp = timestamp

    def run(self) -> None:  # type: ignore[override]
        """Encode the frame, then commit it under the store's lock."""

        try:
            payload = self._store.encode_snapshot(self._buffer)
            self._store.commit_snapshot(
                payload,
                self._description,
                self._params,
                self._timestamp,
                self._buffer.width,
                self._buffer.height,
            )
        except Exception:  # pragma: no cover - logged and dropped
            _LOGGER.exception("Failed to add history state %r", self._description)
        finally:
            self._store.task_finished()


__all__ = ["AddStateWorker"]
