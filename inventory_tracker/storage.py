"""
Best-effort key/value persistence for the ledger.

Every backend stores JSON text. A missing key, unreadable file or corrupt
document yields the caller's default; a failed write is logged and dropped.
The ledger keeps working in memory either way.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _dumps(value: Any) -> str:
    # Deterministic so that save(load()) rewrites an identical document.
    return json.dumps(value, indent=2, ensure_ascii=False)


def _safe_key(key: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9_.-]+", "_", key.strip())
    if not slug.strip("."):
        raise ValueError(f"Invalid storage key: {key!r}")
    return slug


class Storage(ABC):
    """Key/value store contract used by the ledger."""

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._read(key)
        except FileNotFoundError:
            return default
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes and keys the backend cannot map.
            logger.warning(f"⚠️ Could not read '{key}' from storage: {e}. Using default.")
            return default

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ Stored data for '{key}' is corrupt ({e}). Using default.")
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            raw = _dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"❌ Could not serialize '{key}': {e}. Change kept in memory only.")
            return

        try:
            self._write(key, raw)
        except (OSError, ValueError) as e:
            logger.error(f"❌ Could not write '{key}' to storage: {e}. Change kept in memory only.")

    @abstractmethod
    def _read(self, key: str) -> str | None:
        """Returns the stored text for key, or None when the key is absent."""
        pass

    @abstractmethod
    def _write(self, key: str, raw: str) -> None:
        pass


class JsonFileStorage(Storage):
    """One `<key>.json` file per key inside base_dir."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self.base_dir / f"{_safe_key(key)}.json"

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, raw: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling file first so a crash never leaves half a document behind.
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(raw, encoding="utf-8")
        tmp_path.replace(path)


class MemoryStorage(Storage):
    """Process-local storage, used when durability is not wanted (and in tests)."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def _read(self, key: str) -> str | None:
        return self.data.get(key)

    def _write(self, key: str, raw: str) -> None:
        self.data[key] = raw
