import os

from config.config import DEFAULT_LEADER_ACCOUNTS, db_config_from_env, leader_accounts_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Remote MySQL sync is optional; the local JSON cache always works.
SYNC_ENABLED = bool(int(os.getenv("SYNC_ENABLED", "0")))
SYNC_TIMEOUT_SECONDS = int(os.getenv("SYNC_TIMEOUT_SECONDS", "10"))
LOAD_TIMEOUT_SECONDS = float(os.getenv("LOAD_TIMEOUT_SECONDS", "10"))
FLUSH_DELAY_SECONDS = float(os.getenv("FLUSH_DELAY_SECONDS", "1.5"))

CACHE_DIR = os.getenv("CACHE_DIR", "instance/cache")

# "group" marks the whole group roster, "visible" only the filtered rows
MARK_ALL_SCOPE = os.getenv("MARK_ALL_SCOPE", "group")

LEADER_ACCOUNTS = leader_accounts_from_env(DEFAULT_LEADER_ACCOUNTS)

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
