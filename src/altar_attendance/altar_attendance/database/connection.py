from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

from ..core.constants import DEFAULT_SYNC_TIMEOUT_SECONDS


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    timeout: int = DEFAULT_SYNC_TIMEOUT_SECONDS

    @classmethod
    def from_dict(cls, db_config: dict, *, timeout: Optional[int] = None) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            timeout=int(timeout if timeout is not None else DEFAULT_SYNC_TIMEOUT_SECONDS),
        )


class DatabaseConnection:
    """DB connection factory.

    Note: We create short-lived connections per operation; a hung server is bounded
    by `connection_timeout`.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=int(self._config.timeout),
        )
