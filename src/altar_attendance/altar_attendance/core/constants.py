"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_FLUSH_DELAY_SECONDS = 1.5
DEFAULT_LOAD_TIMEOUT_SECONDS = 10.0
DEFAULT_SYNC_TIMEOUT_SECONDS = 10

ISO_DATE_FORMAT = "%Y-%m-%d"
