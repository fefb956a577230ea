from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, List

import pyuca


@dataclass(frozen=True)
class RosterEntry:
    """Domain entity: one altar server of a Mass group.

    Attributes never change after creation; renaming is not supported.
    """

    entry_id: str
    name: str
    group_key: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.entry_id, "name": self.name, "group_name": self.group_key}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RosterEntry":
        # older cached payloads used "group" instead of "group_name"
        group_key = data.get("group_name", data.get("group", ""))
        return cls(entry_id=str(data["id"]), name=str(data["name"]), group_key=str(group_key or ""))


def name_key(name: str) -> str:
    """Normalized name used for duplicate detection."""
    return name.strip().casefold()


@lru_cache(maxsize=1)
def _collator() -> pyuca.Collator:
    # loading the collation table is slow, build it once
    return pyuca.Collator()


def sort_key(entry: RosterEntry):
    """Unicode collation order (Á next to A, Ñ after N), exact name as tie-break."""
    return (_collator().sort_key(entry.name.casefold()), entry.name)


def sorted_by_name(entries: Iterable[RosterEntry]) -> List[RosterEntry]:
    return sorted(entries, key=sort_key)
