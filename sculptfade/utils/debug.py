#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Structured debug event recording for SculptFade."""

import time
from typing import Dict, Any, List, Optional


class DebugManager:
    """Collects debug events and per-component state for troubleshooting runs."""

    def __init__(self):
        self.enabled = False
        self.start_time = time.time()
        self.events: List[Dict[str, Any]] = []
        self.current_state: Dict[str, Dict[str, Any]] = {}

    def enable(self):
        self.enabled = True
        self.debug_log("DEBUG_MODE_ENABLED", "Debug mode activated")

    def disable(self):
        if self.enabled:
            self.debug_log("DEBUG_MODE_DISABLED", "Debug mode deactivated")
        self.enabled = False

    def _emit(self, line: str):
        # Route through the TUI log buffer so the live display is not corrupted
        from ..ui.tui import tui_manager

        if tui_manager.tui_enabled and tui_manager.live_display is not None:
            tui_manager.log(line)
        else:
            print(line)

    def debug_log(self, event_type: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Record a debug event and echo it with the runtime offset."""
        if not self.enabled:
            return

        timestamp = time.time()
        runtime = timestamp - self.start_time

        entry = {
            "timestamp": timestamp,
            "runtime_seconds": round(runtime, 3),
            "event_type": event_type,
            "message": message,
        }
        if data:
            entry["data"] = data
        self.events.append(entry)

        self._emit(f"[DEBUG:{runtime:7.3f}s] {event_type}: {message}")
        for key, value in (data or {}).items():
            self._emit(f"[DEBUG:{runtime:7.3f}s]   {key}: {value}")

    def update_state(self, component: str, key: str, value: Any, description: str = ""):
        """Track a component attribute and log the transition."""
        if not self.enabled:
            return

        component_state = self.current_state.setdefault(component, {})
        old_value = component_state.get(key)
        component_state[key] = value

        prefix = f"{description} " if description else ""
        self.debug_log(
            "STATE_CHANGE",
            f"{prefix}{component}.{key}: {old_value} -> {value}",
            {"component": component, "key": key, "old_value": old_value, "new_value": value},
        )

    def log_error(self, error_type: str, component: str, error_msg: str, details: Optional[Dict[str, Any]] = None):
        if not self.enabled:
            return

        error_data = {"component": component, "error_message": error_msg}
        if details:
            error_data.update(details)
        self.debug_log("ERROR", f"{component}: {error_type} - {error_msg}", error_data)

    def get_current_state(self) -> Dict[str, Any]:
        """Snapshot of tracked component state."""
        return {
            "runtime_seconds": round(time.time() - self.start_time, 3),
            "debug_enabled": self.enabled,
            "state": {name: dict(values) for name, values in self.current_state.items()},
            "total_events": len(self.events),
        }

    def print_state_summary(self):
        if not self.enabled:
            return

        state = self.get_current_state()
        runtime = state["runtime_seconds"]
        self._emit(f"[DEBUG:{runtime:7.3f}s] === STATE SUMMARY ===")
        self._emit(f"[DEBUG:{runtime:7.3f}s] Total events: {state['total_events']}")
        for component, component_state in state["state"].items():
            self._emit(f"[DEBUG:{runtime:7.3f}s] {component}:")
            for key, value in component_state.items():
                self._emit(f"[DEBUG:{runtime:7.3f}s]   {key}: {value}")
        self._emit(f"[DEBUG:{runtime:7.3f}s] === END STATE SUMMARY ===")


debug_manager = DebugManager()


def set_debug_mode(enabled: bool):
    if enabled:
        debug_manager.enable()
    else:
        debug_manager.disable()


def debug_log(event_type: str, message: str, data: Optional[Dict[str, Any]] = None):
    debug_manager.debug_log(event_type, message, data)


def update_state(component: str, key: str, value: Any, description: str = ""):
    debug_manager.update_state(component, key, value, description)


def log_error(error_type: str, component: str, error_msg: str, details: Optional[Dict[str, Any]] = None):
    debug_manager.log_error(error_type, component, error_msg, details)
