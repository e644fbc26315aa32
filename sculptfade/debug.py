#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Debug switch for SculptFade, seeded from the SCULPTFADE_DEBUG variable."""

from __future__ import annotations

import os
from typing import Any, Callable

from .utils.debug import (
    debug_log as _debug_log_impl,
    update_state as _update_state_impl,
    log_error as _log_error_impl,
    set_debug_mode as _set_debug_mode_impl,
    debug_manager,
)

_TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


DEBUG_ENABLED: bool = _as_bool(os.getenv("SCULPTFADE_DEBUG", ""))
_set_debug_mode_impl(DEBUG_ENABLED)


def _call_when_enabled(callback: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    if DEBUG_ENABLED:
        return callback(*args, **kwargs)
    return None


def is_debug_enabled() -> bool:
    return DEBUG_ENABLED


def set_debug_mode(enabled: bool) -> None:
    """Toggle debug output and propagate to the event recorder."""
    global DEBUG_ENABLED
    DEBUG_ENABLED = bool(enabled)
    _set_debug_mode_impl(DEBUG_ENABLED)


def debug_log(*args: Any, **kwargs: Any) -> None:
    _call_when_enabled(_debug_log_impl, *args, **kwargs)


def update_state(*args: Any, **kwargs: Any) -> None:
    _call_when_enabled(_update_state_impl, *args, **kwargs)


def log_error(*args: Any, **kwargs: Any) -> None:
    _call_when_enabled(_log_error_impl, *args, **kwargs)


__all__ = [
    "DEBUG_ENABLED",
    "debug_log",
    "update_state",
    "log_error",
    "debug_manager",
    "is_debug_enabled",
    "set_debug_mode",
]
