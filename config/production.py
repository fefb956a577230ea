import os

from config.config import db_config_from_env, leader_accounts_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SYNC_ENABLED = bool(int(os.getenv("SYNC_ENABLED", "1")))
SYNC_TIMEOUT_SECONDS = int(os.getenv("SYNC_TIMEOUT_SECONDS", "10"))
LOAD_TIMEOUT_SECONDS = float(os.getenv("LOAD_TIMEOUT_SECONDS", "10"))
FLUSH_DELAY_SECONDS = float(os.getenv("FLUSH_DELAY_SECONDS", "1.5"))

CACHE_DIR = os.getenv("CACHE_DIR", "instance/cache")
MARK_ALL_SCOPE = os.getenv("MARK_ALL_SCOPE", "group")

# Must come from the environment in production.
LEADER_ACCOUNTS = leader_accounts_from_env()

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
