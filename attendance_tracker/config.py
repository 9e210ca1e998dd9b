"""App configuration — environment variable loading with typed defaults.

Loads settings from .env file (via python-dotenv) and os.environ.
Real environment variables take precedence over .env file values.

Usage:
    from attendance_tracker.config import get_settings
    settings = get_settings()
    print(settings.attendance_threshold)  # 75.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Only load .env from the project root — don't traverse parent directories.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DOTENV_PATH = _PROJECT_ROOT / ".env"

STORAGE_BACKENDS: tuple[str, ...] = ("file", "memory")


@dataclass(frozen=True)
class Settings:
    """Typed configuration for the attendance tracker.

    All fields have sensible defaults for local development.
    """

    # App
    app_env: str
    log_level: str

    # Storage
    storage_backend: str
    data_dir: str

    # Alerts
    attendance_threshold: float
    alert_window_hours: float
    notification_poll_seconds: int


def _resolve_backend(env_var: str, value: str) -> str:
    """Validates a storage backend name.

    Args:
        env_var: Name of the environment variable (for error messages).
        value: The backend name from the environment.

    Returns:
        The backend name, lowercased.

    Raises:
        ValueError: If the value isn't one of STORAGE_BACKENDS.
    """
    backend = value.strip().lower()
    if backend in STORAGE_BACKENDS:
        return backend
    valid = ", ".join(STORAGE_BACKENDS)
    raise ValueError(
        f"Invalid value for {env_var}: {value!r}. "
        f"Valid options: {valid}"
    )


def _parse_number(env_var: str, value: str, *, minimum: float = 0.0) -> float:
    """Parses a non-negative number, naming the variable on failure."""
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"Invalid value for {env_var}: {value!r}. Expected a number.") from None
    if number < minimum:
        raise ValueError(f"Invalid value for {env_var}: {value!r}. Must be >= {minimum:g}.")
    return number


def _load_settings() -> Settings:
    """Loads configuration from .env file and environment variables.

    Returns:
        A fully resolved Settings instance.
    """
    load_dotenv(_DOTENV_PATH)

    return Settings(
        # App
        app_env=os.environ.get("APP_ENV", "development"),
        log_level=os.environ.get("LOG_LEVEL", "info"),
        # Storage
        storage_backend=_resolve_backend(
            "STORAGE_BACKEND", os.environ.get("STORAGE_BACKEND", "file")
        ),
        data_dir=os.environ.get("DATA_DIR", "data"),
        # Alerts
        attendance_threshold=_parse_number(
            "ATTENDANCE_THRESHOLD", os.environ.get("ATTENDANCE_THRESHOLD", "75")
        ),
        alert_window_hours=_parse_number(
            "ALERT_WINDOW_HOURS", os.environ.get("ALERT_WINDOW_HOURS", "24")
        ),
        notification_poll_seconds=int(
            _parse_number(
                "NOTIFICATION_POLL_SECONDS",
                os.environ.get("NOTIFICATION_POLL_SECONDS", "30"),
                minimum=1,
            )
        ),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Returns the singleton Settings instance. Loads .env on first call."""
    global _settings
    if _settings is None:
        _settings = _load_settings()
    return _settings
