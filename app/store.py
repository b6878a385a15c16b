import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


class MemorySlot:
    """In-process key → string mapping."""

    def __init__(self) -> None:
        self.items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self.items))

    def clear(self) -> None:
        self.items.clear()


class FileSlot(MemorySlot):
    """
    Key → string mapping persisted as a single JSON object on disk.

    The whole file is rewritten on every change. A missing or unreadable
    file loads as an empty slot.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        self.items = self._load()

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store file %s: top level is not an object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            fh = os.fdopen(fd, "w", encoding="utf-8")
        except BaseException:
            os.close(fd)
            os.unlink(tmp)
            raise
        try:
            with fh:
                json.dump(self.items, fh)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self._flush()

    def remove_item(self, key: str) -> None:
        if key in self.items:
            super().remove_item(key)
            self._flush()

    def clear(self) -> None:
        super().clear()
        self._flush()


class RecordStore:
    """
    Named JSON values on top of a slot.

    Every collection is read and written whole; there is no locking, so two
    interleaved read-modify-write sequences lose the earlier write.
    """

    def __init__(self, slot: Optional[MemorySlot] = None) -> None:
        self.slot = slot if slot is not None else MemorySlot()

    # ── JSON values ───────────────────────────────────────────────────────────

    def read(self, key: str, default: Any = None) -> Any:
        raw = self.slot.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding corrupt record %r", key)
            return default

    def read_collection(self, key: str) -> list:
        value = self.read(key, [])
        if not isinstance(value, list):
            logger.warning("Record %r is not a collection, treating as empty", key)
            return []
        return value

    def write(self, key: str, value: Any) -> None:
        self.slot.set_item(key, json.dumps(value))

    # ── plain string scalars ──────────────────────────────────────────────────

    def get_text(self, key: str) -> Optional[str]:
        return self.slot.get_item(key)

    def set_text(self, key: str, text: str) -> None:
        self.slot.set_item(key, text)

    # ── housekeeping ──────────────────────────────────────────────────────────

    def remove(self, key: str) -> None:
        self.slot.remove_item(key)

    def keys(self) -> list[str]:
        return list(self.slot.keys())

    def clear(self) -> None:
        self.slot.clear()
