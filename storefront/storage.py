# storefront/storage.py
import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

# Key/value string storage with the same surface as a browser's localStorage.

log = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = os.getenv("CART_STORAGE_PATH", str(Path.home() / ".storefront" / "storage.json"))


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """
    Keys live in a single JSON object on disk. Every set_item rewrites the
    file before returning. An unreadable file is treated as empty.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_STORAGE_PATH):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            log.warning("ignoring unreadable storage file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
