from __future__ import annotations
import os
from datetime import timedelta
from typing import Any, Dict

DEFAULT_ACCESS_SECONDS = 3600
DEFAULT_REFRESH_SECONDS = 7 * 24 * 3600


def _seconds(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f'{name} must be an integer number of seconds')


def env_settings() -> Dict[str, Any]:
    """Read runtime settings from the environment (after load_dotenv)."""
    return {
        'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///dev.db'),
        'JWT_ACCESS_TOKEN_EXPIRES': timedelta(seconds=_seconds('JWT_EXPIRE', DEFAULT_ACCESS_SECONDS)),
        'JWT_REFRESH_TOKEN_EXPIRES': timedelta(seconds=_seconds('JWT_REFRESH_EXPIRE', DEFAULT_REFRESH_SECONDS)),
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO').upper(),
    }
