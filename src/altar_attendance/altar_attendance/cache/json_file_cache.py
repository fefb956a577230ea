from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Optional

from ..attendance.model import Snapshot
from .repository import LocalCache

logger = logging.getLogger(__name__)


def cache_file_name(group_key: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9_-]+", "_", group_key) or "default"
    return f"attendance_{safe}.json"


class JsonFileCache(LocalCache):
    """One JSON file per group, replaced atomically on every write."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @classmethod
    def for_group(cls, cache_dir: str | Path, group_key: str) -> "JsonFileCache":
        return cls(Path(cache_dir) / cache_file_name(group_key))

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[Snapshot]:
        if not self._path.exists():
            return None
        raw = self._path.read_text(encoding="utf-8").strip()
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            self._quarantine()
            return None
        return Snapshot.from_dict(data)

    def _quarantine(self) -> None:
        """Move an unreadable file aside so the next write cannot destroy it."""
        target = self._path.with_suffix(self._path.suffix + ".corrupt")
        self._path.replace(target)
        logger.warning("Unreadable cache file %s moved to %s", self._path, target.name)

    def write(self, snapshot: Snapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self._path)
