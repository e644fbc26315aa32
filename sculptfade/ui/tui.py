#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#

import os
import time
from collections import deque

import psutil
from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .. import (
    STATE_DESTROYED,
    STATE_DISABLED,
    STATE_FADING,
    STATE_IDLE,
    STATE_TRIGGERED,
    STATE_WAITING,
    UI_APP_NAME,
    UI_COLUMN_OBJECT,
    UI_COLUMN_OPACITY,
    UI_COLUMN_SOURCES,
    UI_COLUMN_STATUS,
    UI_NO_OBJECTS,
    UI_PANEL_CHRONICLE,
    UI_PANEL_SCENE,
    VERSION,
)

DEFAULT_PANEL_PADDING = (0, 1)
LOG_BUFFER_SIZE = 50

STATE_COLORS = {
    STATE_IDLE: "bright_white",
    STATE_TRIGGERED: "yellow",
    STATE_WAITING: "magenta",
    STATE_FADING: "cyan",
    STATE_DESTROYED: "dim white",
    STATE_DISABLED: "red",
}


class TUIManager:
    """Shared log hub and live status display for the scene runner."""

    def __init__(self):
        self.console = Console()
        self.log_buffer = deque(maxlen=LOG_BUFFER_SIZE)
        self.log_file_handle = None
        self.log_file_path = None
        self.objects_status = {}
        self.scene_name = "Unknown Scene"
        self.scene_clock = 0.0
        self.live_display = None
        self.tui_enabled = False
        self.chronicle_visible = True
        self.is_quitting = False
        self.progress_chars = ["◐", "◓", "◑", "◒"]
        self.progress_animation_index = 0
        self.last_cpu_check = 0
        self.cached_cpu_percent = 0.0

        self.is_tmux = os.environ.get("TMUX") is not None
        self.last_update_time = 0
        self.update_throttle = 0.1 if self.is_tmux else 0.05

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    def log(self, message):
        """Add a log message to the TUI buffer (or stdout) and the session file."""
        timestamped = f"{time.strftime('%H:%M:%S')} {message}"

        if self.log_file_handle:
            try:
                self.log_file_handle.write(timestamped + "\n")
                self.log_file_handle.flush()
            except OSError:
                pass

        if self.tui_enabled:
            self.log_buffer.append(timestamped)
            if self.chronicle_visible:
                self.update_display()
        else:
            print(message)

    def start_file_logging(self, log_path):
        """Enable file logging to the specified path."""
        try:
            if self.log_file_handle:
                self.stop_file_logging()
            self.log_file_handle = open(log_path, "w", encoding="utf-8")
            self.log_file_path = log_path
        except OSError as exc:
            self.log_file_handle = None
            self.log_file_path = None
            print(f"Warning: unable to start file logging ({exc})")

    def stop_file_logging(self):
        """Close file logging if active."""
        if self.log_file_handle:
            try:
                self.log_file_handle.flush()
                self.log_file_handle.close()
            except OSError:
                pass
            finally:
                self.log_file_handle = None
                self.log_file_path = None

    # ------------------------------------------------------------------
    # State updates
    # ------------------------------------------------------------------
    def enable_tui(self):
        self.tui_enabled = True

    def disable_tui(self):
        self.tui_enabled = False
        self.stop_live_display()

    def set_quitting(self, quitting=True):
        self.is_quitting = quitting

    def update_scene_name(self, name):
        self.scene_name = name

    def update_scene_clock(self, clock):
        self.scene_clock = clock

    def update_object_status(self, object_name, status):
        """Record the latest controller snapshot for an object."""
        self.objects_status[object_name] = dict(status)

    def toggle_chronicle(self):
        """Toggle event log panel visibility"""
        self.chronicle_visible = not self.chronicle_visible
        state_label = "shown" if self.chronicle_visible else "hidden"
        self.log(f"{UI_PANEL_CHRONICLE} {state_label}. Press c to toggle.")

    def get_progress_symbol(self):
        if self.is_quitting:
            return "⏹"
        symbol = self.progress_chars[self.progress_animation_index]
        self.progress_animation_index = (self.progress_animation_index + 1) % len(
            self.progress_chars
        )
        return symbol

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _build_system_metrics_text(self):
        metrics_text = Text()
        metrics_text.append(f"{self.get_progress_symbol()} t={self.scene_clock:6.2f}s", style="bright_white")

        current_time = time.time()
        if current_time - self.last_cpu_check > 1.0:
            self.cached_cpu_percent = psutil.cpu_percent(interval=None)
            self.last_cpu_check = current_time
        ram_percent = psutil.virtual_memory().percent

        metrics_text.append("  ", style="dim white")
        metrics_text.append(f"CPU: {int(self.cached_cpu_percent)}%", style="yellow")
        metrics_text.append("  ", style="dim white")
        metrics_text.append(f"RAM: {int(ram_percent)}%", style="green")
        return metrics_text

    def _create_opacity_bar(self, opacity, color, width=20):
        """Bar showing remaining opacity with a percentage suffix."""
        opacity = max(0.0, min(1.0, opacity))
        filled = int(round(opacity * width))
        bar_text = Text()
        bar_text.append("█" * filled, style=color)
        bar_text.append("░" * (width - filled), style=f"dim {color}")
        bar_text.append(f" {opacity * 100:3.0f}%", style=color)
        return bar_text

    def _build_objects_table(self):
        table = Table(show_header=True, header_style="bold white", expand=True, box=None)
        table.add_column(UI_COLUMN_OBJECT, style="cyan")
        table.add_column(UI_COLUMN_STATUS)
        table.add_column(UI_COLUMN_OPACITY)
        table.add_column(UI_COLUMN_SOURCES, style="dim white")

        for index, (name, status) in enumerate(self.objects_status.items(), 1):
            state = status.get("state", STATE_IDLE)
            color = STATE_COLORS.get(state, "white")
            sources = ", ".join(status.get("sources") or []) or "manual only"
            table.add_row(
                f"{index}. {name}",
                Text(state, style=color),
                self._create_opacity_bar(status.get("opacity", 1.0), color),
                sources,
            )

        if not self.objects_status:
            table.add_row("", Text(UI_NO_OBJECTS, style="dim"), "", "")
        return table

    def create_layout(self):
        layout = Layout()
        if self.chronicle_visible:
            layout.split_column(
                Layout(name="header", size=3),
                Layout(name="main", ratio=2),
                Layout(name="footer", ratio=1),
            )
        else:
            layout.split_column(Layout(name="header", size=3), Layout(name="main"))

        header = Table.grid(expand=True)
        header.add_column(justify="left")
        header.add_column(justify="right")
        header.add_row(Text(f"{UI_APP_NAME} {VERSION}", style="bold white"), self._build_system_metrics_text())
        layout["header"].update(Panel(header, border_style="green"))

        layout["main"].update(
            Panel(
                self._build_objects_table(),
                title=self.scene_name.strip() or UI_PANEL_SCENE,
                border_style="blue",
                padding=DEFAULT_PANEL_PADDING,
            )
        )

        if self.chronicle_visible:
            layout["footer"].update(
                Panel(
                    "\n".join(list(self.log_buffer)[-12:]),
                    title=UI_PANEL_CHRONICLE,
                    border_style="yellow",
                    padding=DEFAULT_PANEL_PADDING,
                )
            )
        return layout

    def start_live_display(self):
        """Start the live TUI display"""
        if not self.tui_enabled:
            return

        try:
            self.live_display = Live(
                self.create_layout(),
                console=self.console,
                refresh_per_second=5 if self.is_tmux else 10,
                screen=True,
            )
            self.live_display.start()
        except Exception as e:
            self.tui_enabled = False
            self.live_display = None
            self.log(f"Failed to start TUI: {e}")

    def update_display(self, force=False):
        """Refresh the live display, throttled to keep tmux happy"""
        if not self.tui_enabled or not self.live_display:
            return

        current_time = time.time()
        if not force and current_time - self.last_update_time < self.update_throttle:
            return

        self.live_display.update(self.create_layout())
        self.last_update_time = current_time

    def stop_live_display(self):
        if self.live_display:
            try:
                self.live_display.stop()
            finally:
                self.live_display = None


# Global TUI manager instance
tui_manager = TUIManager()
