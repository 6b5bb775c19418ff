"""Compressed undo/redo history for edited frames."""

from .store import DecodedEntry, HistoryEntry, HistoryStore
from .tasks import AddStateWorker

__all__ = ["AddStateWorker", "DecodedEntry", "HistoryEntry", "HistoryStore"]
