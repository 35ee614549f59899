"""Append-only session history backed by a JSON document."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from deepflow.utils.logger import get_logger

from .session import Session

logger = get_logger("focus.history")


class DataStore(Protocol):
    """Opaque key-value document persistence."""

    def load(self) -> dict[str, Any]: ...

    def save(self, data: dict[str, Any]) -> None: ...


class JsonDataStore:
    """Keeps the whole application document in a single JSON file."""

    def __init__(self, path: Path | None = None):
        """Initialize the data store."""
        if path is None:
            from platformdirs import user_data_dir

            path = Path(user_data_dir("deepflow")) / "data.json"

        self.path = path

    def load(self) -> dict[str, Any]:
        """Read the document. A missing file is an empty document."""
        if not self.path.exists():
            return {}

        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def save(self, data: dict[str, Any]) -> None:
        """Write the document atomically via a temp file in the same directory."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            # Set secure permissions
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise


class SessionStore:
    """In-memory list of completed sessions, mirrored to a DataStore.

    Persistence failures are logged and never undo an in-memory change.
    Only the ``sessions`` key of the document is touched; every other key is
    written back as it was read. An unreadable document counts as empty, and
    the next save replaces it, keeping the keys of the last good read.
    """

    SESSIONS_KEY = "sessions"

    def __init__(self, data_store: DataStore):
        self.data_store = data_store
        # Last document read successfully; its other keys survive a bad read
        self._document: dict[str, Any] = {}
        self._sessions: list[Session] = self._load()

    def _read_document(self) -> dict[str, Any]:
        try:
            data = self.data_store.load()
        except Exception as e:
            logger.error("Failed to load session data, treating it as empty: %s", e)
            return dict(self._document)

        if not isinstance(data, dict):
            logger.error("Session data is not a document, treating it as empty")
            return dict(self._document)

        self._document = dict(data)
        return data

    def _load(self) -> list[Session]:
        records = self._read_document().get(self.SESSIONS_KEY) or []
        if not isinstance(records, list):
            logger.warning("Ignoring non-list %r value: %r", self.SESSIONS_KEY, records)
            return []

        sessions = []
        for record in records:
            try:
                sessions.append(Session.from_dict(record))
            except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
                logger.warning("Skipping malformed session record %r: %s", record, e)
        return sessions

    def _persist(self) -> bool:
        data = self._read_document()
        data[self.SESSIONS_KEY] = [s.to_dict() for s in self._sessions]
        try:
            self.data_store.save(data)
        except Exception as e:
            logger.error("Failed to save sessions: %s", e)
            return False
        self._document = dict(data)
        return True

    def append(self, session: Session) -> bool:
        """Record a session. Returns False if it could not be persisted."""
        self._sessions.append(session)
        return self._persist()

    def all(self) -> list[Session]:
        """All sessions in the order they were recorded."""
        return list(self._sessions)

    def clear(self) -> bool:
        """Delete every session. Returns False if it could not be persisted."""
        self._sessions = []
        return self._persist()

    def __len__(self) -> int:
        return len(self._sessions)
