"""Runtime settings, read once from the environment.

EXPENSES_DATA_DIR        directory for the default SQLite file (./data)
EXPENSES_DATABASE_URL    SQLAlchemy URL (sqlite file in the data dir)
EXPENSES_TIMEZONE        IANA zone that defines "today" for date validation and
                         the default chart window (UTC). Set it to the users'
                         zone, e.g. Europe/Berlin, or dates entered early in
                         their day are rejected as being in the future.
EXPENSES_CSRF_SECRET     signing key for form tokens
EXPENSES_CSRF_MAX_AGE_SECS  token lifetime (7200)
EXPENSES_LOG_LEVEL       root log level (INFO)
EXPENSES_DAILY_SERIES_DAYS  length of the default "recent" window (30)
"""

import os
from functools import lru_cache
from pathlib import Path


class Settings:
    def __init__(
        self,
        database_url: str,
        timezone: str,
        csrf_secret: str,
        csrf_max_age_secs: int,
        log_level: str,
        daily_series_days: int,
    ) -> None:
        self.database_url = database_url
        self.timezone = timezone
        self.csrf_secret = csrf_secret
        self.csrf_max_age_secs = csrf_max_age_secs
        self.log_level = log_level
        self.daily_series_days = daily_series_days


def _ensure_data_dir() -> Path:
    root = Path(os.getenv("EXPENSES_DATA_DIR", "./data")).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir = _ensure_data_dir()
    default_db = data_dir / "expenses.db"
    database_url = os.getenv("EXPENSES_DATABASE_URL", f"sqlite:///{default_db}")
    timezone = os.getenv("EXPENSES_TIMEZONE", "UTC")
    csrf_secret = os.getenv(
        "EXPENSES_CSRF_SECRET",
        "5f0c1d7e2a9b48c6a3e1f4d8b7c2e9a06d3f1b8c4e7a2d9f0b6c3e8a1d4f7b2c",
    )
    csrf_max_age_secs = int(os.getenv("EXPENSES_CSRF_MAX_AGE_SECS", "7200"))
    log_level = os.getenv("EXPENSES_LOG_LEVEL", "INFO").upper()
    daily_series_days = int(os.getenv("EXPENSES_DAILY_SERIES_DAYS", "30"))
    return Settings(
        database_url=database_url,
        timezone=timezone,
        csrf_secret=csrf_secret,
        csrf_max_age_secs=csrf_max_age_secs,
        log_level=log_level,
        daily_series_days=daily_series_days,
    )
