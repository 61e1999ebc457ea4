"""
Runtime settings read from the environment.

Environment Variables:
    SUGIYAMA_TRACE_DEBUG_ORDER=true/false - Log every ordering sweep (default false)
    SUGIYAMA_TRACE_LOG_LEVEL=LEVEL        - Default log level (default WARNING)

Command-line flags take precedence over both.
"""

import os
from typing import Dict, Mapping, Optional

DEBUG_ORDER_ENV = "SUGIYAMA_TRACE_DEBUG_ORDER"
LOG_LEVEL_ENV = "SUGIYAMA_TRACE_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUTHY = {"1", "true", "yes", "on"}


def _env(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def debug_order_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when the ordering trace should be logged."""
    return _env(environ).get(DEBUG_ORDER_ENV, "false").strip().lower() in _TRUTHY


def default_log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Log level from the environment, falling back to WARNING.

    Raises:
        ValueError: If the variable names an unknown level
    """
    level = _env(environ).get(LOG_LEVEL_ENV, "WARNING").strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level in {LOG_LEVEL_ENV}: '{level}'. "
            f"Available levels: {', '.join(LOG_LEVELS)}"
        )
    return level


def get_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, object]:
    """All settings and their current values."""
    return {
        "debug_order": debug_order_enabled(environ),
        "log_level": default_log_level(environ),
    }
