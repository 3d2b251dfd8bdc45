"""Environment-driven configuration helpers."""

import os

from core.utils.constants import ENV_ENVIRONMENT, PRODUCTION_ENVIRONMENTS


def require_env(name: str) -> str:
    """Return a required environment variable or fail fast."""
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"{name} environment variable is not set")
    return value


def get_int_env(name: str, default: int) -> int:
    """Read a positive integer setting, falling back to ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got '{raw}'") from exc

    if value < 1:
        raise RuntimeError(f"{name} must be a positive integer, got {value}")

    return value


def is_production() -> bool:
    """Whether internal error details must be hidden from clients."""
    return os.getenv(ENV_ENVIRONMENT, "").strip().lower() in PRODUCTION_ENVIRONMENTS
