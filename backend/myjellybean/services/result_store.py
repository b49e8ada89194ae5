"""
Result store.

Holds the current analysis result and the bounded, locally persisted
history log (most recent first). The history file is a JSON array of
AnalysisResult objects. Writes go through a temporary file and
``os.replace`` so a crash leaves either the old or the new log on disk.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from myjellybean.core.config import get_path_config, get_settings
from myjellybean.core.exceptions import PersistenceCorruptionError
from myjellybean.core.logging import get_logger
from myjellybean.schemas.analysis import AnalysisResult

logger = get_logger(__name__)

DEFAULT_HISTORY_LIMIT = 10

_history_adapter = TypeAdapter(list[AnalysisResult])


class ResultStore:
    """
    Current-result holder plus persisted history.

    Args:
        history_path: Location of the history blob.
        limit: Maximum number of history entries kept.
    """

    def __init__(self, history_path: Path, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self._history_path = Path(history_path)
        self._limit = limit
        self._current: Optional[AnalysisResult] = None
        self._history: list[AnalysisResult] = []

    @property
    def current(self) -> Optional[AnalysisResult]:
        return self._current

    @property
    def history(self) -> list[AnalysisResult]:
        """Copy of the history, most recent first."""
        return list(self._history)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def history_path(self) -> Path:
        return self._history_path

    def set_current(self, result: AnalysisResult) -> None:
        """Replace the current result."""
        self._current = result

    def append_history(self, result: AnalysisResult) -> None:
        """
        Prepend a result and evict past the limit.

        The in-memory log only changes once the new log is on disk.

        Raises:
            OSError: If the history file cannot be written.
        """
        entries = [result, *self._history][: self._limit]
        self._persist(entries)
        self._history = entries
        logger.info("history_appended", history_count=len(entries))

    def clear(self) -> None:
        """Empty the history and persist the empty log."""
        self._persist([])
        self._history = []
        logger.info("history_cleared")

    def load_history(self) -> list[AnalysisResult]:
        """
        Load history from disk.

        A missing or unreadable blob yields an empty history; the problem
        is logged, never raised.
        """
        try:
            self._history = self._read()[: self._limit]
        except PersistenceCorruptionError as e:
            logger.warning(
                "history_discarded",
                path=str(self._history_path),
                reason=e.message,
            )
            self._history = []
        logger.info("history_loaded", history_count=len(self._history))
        return self.history

    def _read(self) -> list[AnalysisResult]:
        if not self._history_path.exists():
            return []
        try:
            raw = self._history_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceCorruptionError(f"Unreadable history file: {e}") from e
        try:
            return _history_adapter.validate_json(raw)
        except PydanticValidationError as e:
            raise PersistenceCorruptionError(
                f"History does not match the result schema ({e.error_count()} errors)"
            ) from e

    def _persist(self, entries: list[AnalysisResult]) -> None:
        payload = json.dumps(
            [entry.model_dump(mode="json") for entry in entries],
            ensure_ascii=False,
            indent=2,
        )
        directory = self._history_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._history_path.name}.",
            suffix=".tmp",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._history_path)
        except OSError:
            logger.error("history_persist_failed", path=str(self._history_path), exc_info=True)
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


def build_result_store() -> ResultStore:
    """Result store wired to the configured history location."""
    settings = get_settings()
    return ResultStore(
        history_path=get_path_config().history_path,
        limit=settings.history_limit,
    )
