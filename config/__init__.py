import importlib
import os
from types import ModuleType
from typing import Optional

_SETTINGS_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    # APP_ENV selects the settings module, defaulting to development
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())


def env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_grace_minutes(name: str = "GRACE_MINUTES") -> Optional[int]:
    """Global late-arrival grace override; None keeps each schedule's own."""
    value = os.getenv(name, "").strip()
    if not value:
        return None
    minutes = int(value)
    if minutes < 0:
        raise ValueError(f"{name} must be >= 0, got {minutes}")
    return minutes


def env_weekend_days(name: str = "WEEKEND_DAYS", default: str = "4,5") -> tuple[int, ...]:
    """Comma separated Python weekdays (Monday=0); Friday and Saturday by default."""
    days = tuple(int(d) for d in os.getenv(name, default).split(",") if d.strip())
    for day in days:
        if not 0 <= day <= 6:
            raise ValueError(f"{name} must list weekdays 0-6, got {day}")
    return days
