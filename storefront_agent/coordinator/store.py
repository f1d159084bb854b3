"""Durable key-value stores backing the coordinator."""

import asyncio
import hashlib
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class DurableStore(ABC):
    """Per-instance key-value store that survives coordinator restarts.

    Values are JSON-compatible. Each call is atomic on its own; there are no
    transactions.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None when absent."""

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""


class InMemoryDurableStore(DurableStore):
    """Dict-backed store for tests and single-process development."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value)

    async def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class FileDurableStore(DurableStore):
    """Stores each key as a JSON file under a directory.

    File names are a digest of the key so any key length fits the filesystem;
    the key itself is kept inside the file.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{hashlib.sha256(key.encode('utf-8')).hexdigest()}.json"

    def _read(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        try:
            with open(path, 'r') as f:
                stored = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable store entry {key}: {e}")
            return None

        if not isinstance(stored, dict) or stored.get("key") != key:
            logger.warning(f"Ignoring store entry with unexpected layout for {key}")
            return None
        return stored.get("value")

    def _write(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, 'w') as f:
            json.dump({"key": key, "value": value}, f)
        # replace is atomic, readers never see a half-written file
        os.replace(tmp_path, path)

    async def get(self, key: str) -> Optional[Any]:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._write, key, value)
