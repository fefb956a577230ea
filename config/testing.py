import os

from config.config import DEFAULT_LEADER_ACCOUNTS

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "altar_attendance_test",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SYNC_ENABLED = False
SYNC_TIMEOUT_SECONDS = 2
LOAD_TIMEOUT_SECONDS = 2.0
FLUSH_DELAY_SECONDS = 0.05

CACHE_DIR = os.getenv("CACHE_DIR", "instance/test-cache")
MARK_ALL_SCOPE = "group"

LEADER_ACCOUNTS = list(DEFAULT_LEADER_ACCOUNTS)

AUTO_INIT_DB = False
