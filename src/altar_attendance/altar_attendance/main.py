from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

# "altar_attendance" when installed, longer when imported from the source tree
PACKAGE_LOGGER = __name__.rpartition(".")[0]


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger(PACKAGE_LOGGER)
    root.handlers.clear()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root.addHandler(handler)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = getattr(settings, "DB_CONFIG")
    sync_enabled = bool(getattr(settings, "SYNC_ENABLED", False))
    logger.info(
        "settings=%s sync=%s db=%s@%s:%s/%s",
        settings_module,
        "on" if sync_enabled else "off",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if sync_enabled and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            tables = apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(tables))

        container = build_container(
            db_config=db_config,
            leader_accounts=getattr(settings, "LEADER_ACCOUNTS"),
            sync_enabled=sync_enabled,
            sync_timeout=int(getattr(settings, "SYNC_TIMEOUT_SECONDS", 10)),
            cache_dir=getattr(settings, "CACHE_DIR", "instance/cache"),
            flush_delay=float(getattr(settings, "FLUSH_DELAY_SECONDS", 1.5)),
            load_timeout=float(getattr(settings, "LOAD_TIMEOUT_SECONDS", 10)),
            mark_all_scope=getattr(settings, "MARK_ALL_SCOPE", "group"),
        )
        atexit.register(container.stores.close_all)

    app.extensions["altar_attendance"] = container

    register_users(app, container)
    register_attendance(app, container)

    return app
