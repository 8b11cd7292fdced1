"""Persisted string key-value settings."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class SettingsStore(ABC):
    """Abstract base class for persisted settings storage.

    Values are plain strings; parsing is the reader's job.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Retrieve value for ``key``.

        Returns:
            Stored value or None if not set
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        pass


class InMemorySettingsStore(SettingsStore):
    """Process-local store, mainly for tests and embedding in other apps."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileSettingsStore(SettingsStore):
    """Settings kept as one JSON object in a file.

    The file is re-read on every access so that edits made by another
    process (e.g. a second CLI invocation) are picked up.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    @property
    def backup_path(self) -> Path:
        """Where an unparseable settings file is moved before it is rewritten."""
        return self.path.with_suffix(self.path.suffix + ".bak")

    def _read(self) -> dict[str, str] | None:
        """Parse the file; None when it exists but cannot be used."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected a JSON object", self.path)
            return None
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _load(self) -> dict[str, str]:
        data = self._read()
        return {} if data is None else data

    def _load_for_update(self) -> dict[str, str]:
        data = self._read()
        if data is None:
            # Keep the unreadable file (it may hold API keys) instead of overwriting it.
            self.path.replace(self.backup_path)
            logger.warning("Moved unreadable settings file to %s", self.backup_path)
            return {}
        return data

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load_for_update()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load_for_update()
        if key in data:
            del data[key]
            self._save(data)
