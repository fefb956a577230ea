import os

_ENV_MODULES = {
    "dev": "config.development",
    "development": "config.development",
    "test": "config.testing",
    "testing": "config.testing",
    "prod": "config.production",
    "production": "config.production",
}


def get_settings_module() -> str:
    """Settings module for this process.

    ALTAR_SETTINGS names a module outright (e.g. a parish-specific deployment);
    otherwise APP_ENV picks one of the bundled modules, development by default.
    """
    explicit = os.getenv("ALTAR_SETTINGS", "").strip()
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    if env not in _ENV_MODULES:
        raise ValueError(f"Unknown APP_ENV {env!r}; expected one of {sorted(_ENV_MODULES)}")
    return _ENV_MODULES[env]
