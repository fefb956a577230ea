from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from .attendance.registry import StoreRegistry
from .attendance.store import AttendanceStore
from .cache.json_file_cache import JsonFileCache
from .cache.repository import LocalCache
from .core.constants import DEFAULT_FLUSH_DELAY_SECONDS, DEFAULT_LOAD_TIMEOUT_SECONDS, DEFAULT_SYNC_TIMEOUT_SECONDS
from .core.enums import MarkAllScope
from .database.connection import DBConfig, DatabaseConnection
from .sync.gateway import NullSyncGateway, SyncGateway
from .sync.mysql_gateway import MySQLSyncGateway
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    gateway: SyncGateway
    auth_service: AuthService
    stores: StoreRegistry


def build_container(
    *,
    db_config: dict,
    leader_accounts: Iterable,
    sync_enabled: bool = True,
    sync_timeout: int = DEFAULT_SYNC_TIMEOUT_SECONDS,
    cache_dir: str | Path = "instance/cache",
    flush_delay: float = DEFAULT_FLUSH_DELAY_SECONDS,
    load_timeout: float = DEFAULT_LOAD_TIMEOUT_SECONDS,
    mark_all_scope: MarkAllScope | str = MarkAllScope.GROUP,
    gateway: Optional[SyncGateway] = None,
    cache_factory: Optional[Callable[[str], LocalCache]] = None,
    timer_factory: Callable[..., threading.Timer] = threading.Timer,
) -> Container:
    if gateway is None:
        if sync_enabled:
            conn = DatabaseConnection(DBConfig.from_dict(db_config, timeout=sync_timeout))
            gateway = MySQLSyncGateway(conn)
        else:
            gateway = NullSyncGateway()

    if cache_factory is None:
        def cache_factory(group_key: str) -> LocalCache:
            return JsonFileCache.for_group(cache_dir, group_key)

    scope = MarkAllScope(mark_all_scope)

    def make_store(group_key: str) -> AttendanceStore:
        return AttendanceStore(
            group_key,
            cache_factory(group_key),
            gateway,
            flush_delay=flush_delay,
            load_timeout=load_timeout,
            mark_all_scope=scope,
            timer_factory=timer_factory,
        )

    return Container(
        gateway=gateway,
        auth_service=AuthService(leader_accounts),
        stores=StoreRegistry(make_store),
    )
