from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LeaderAccount:
    """Shared login of one Mass group's leaders."""

    username: str
    password: str
    group_key: str


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    username: str
    group_key: str
