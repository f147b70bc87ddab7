"""
Service configuration from environment variables (``.env`` is loaded by main).

  CTXBRIDGE_EVENT_BUFFER_SIZE     ring buffer capacity          200  (50-1000)
  CTXBRIDGE_EVENT_WINDOW_SECONDS  assembly window               60   (10-300)
  CTXBRIDGE_MAX_DIAGNOSTICS       diagnostics kept in a bundle  50   (10-200)
  CTXBRIDGE_ENDPOINT              bundle delivery URL           unset
  CTXBRIDGE_REPO_PATH             git repository for status     cwd
  CTXBRIDGE_HTTP_TIMEOUT          delivery timeout (seconds)    10

Malformed numbers fall back to the default; out-of-range numbers are
clamped. Neither aborts startup.
"""

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    event_buffer_size: int = 200
    event_window_seconds: int = 60
    max_diagnostics: int = 50
    endpoint: Optional[str] = None
    repo_path: Optional[str] = None
    http_timeout: float = 10.0


def _bounded_int(environ: Mapping[str, str], name: str, default: int, lo: int, hi: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("config: %s=%r is not an integer, using default %d", name, raw, default)
        return default
    if value < lo or value > hi:
        clamped = min(max(value, lo), hi)
        logger.warning("config: %s=%d outside %d-%d, using %d", name, value, lo, hi, clamped)
        return clamped
    return value


def _positive_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        logger.warning("config: %s=%r is not a number, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("config: %s=%s must be positive, using default %s", name, value, default)
        return default
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        event_buffer_size=_bounded_int(env, "CTXBRIDGE_EVENT_BUFFER_SIZE", 200, 50, 1000),
        event_window_seconds=_bounded_int(env, "CTXBRIDGE_EVENT_WINDOW_SECONDS", 60, 10, 300),
        max_diagnostics=_bounded_int(env, "CTXBRIDGE_MAX_DIAGNOSTICS", 50, 10, 200),
        endpoint=(env.get("CTXBRIDGE_ENDPOINT") or "").strip() or None,
        repo_path=(env.get("CTXBRIDGE_REPO_PATH") or "").strip() or None,
        http_timeout=_positive_float(env, "CTXBRIDGE_HTTP_TIMEOUT", 10.0),
    )
