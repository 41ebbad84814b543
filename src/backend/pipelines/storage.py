from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Protocol


class StoragePort(Protocol):
    """Key-value persistence implemented by the shell (browser storage, file, database)."""

    def get(self, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Return stored values for `keys` (all values when None); absent keys are omitted."""
        ...

    def set(self, data: Dict[str, Any]) -> None:
        ...

    def remove(self, keys: Iterable[str]) -> None:
        ...


class InMemoryStorage:
    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        if keys is None:
            return dict(self._data)
        return {k: self._data[k] for k in keys if k in self._data}

    def set(self, data: Dict[str, Any]) -> None:
        self._data.update(data)

    def remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)


class LocalJsonStorage:
    """Stores all keys in one JSON document; values must be JSON-serialisable."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as handle:
            raw = json.loads(handle.read() or "{}")
        if not isinstance(raw, dict):
            return {}
        return raw

    def _write(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)

    def get(self, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        data = self._load()
        if keys is None:
            return data
        return {k: data[k] for k in keys if k in data}

    def set(self, data: Dict[str, Any]) -> None:
        current = self._load()
        current.update(data)
        self._write(current)

    def remove(self, keys: Iterable[str]) -> None:
        current = self._load()
        for key in keys:
            current.pop(key, None)
        self._write(current)
