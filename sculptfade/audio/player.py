#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Interaction sound playback for SculptFade."""

import os
from pathlib import Path

import pygame

from ..debug import debug_log, is_debug_enabled, log_error
from ..ui.tui import tui_manager

DEFAULT_CLIP_VOLUME = 1.0


class ClipPlayer:
    """Holds one interaction clip ready to play; never plays on load."""

    def __init__(self, clip_path, owner_name=None, volume=DEFAULT_CLIP_VOLUME):
        self.clip_path = Path(clip_path)
        self.owner_name = owner_name or self.clip_path.stem
        self.volume = max(0.0, min(1.0, float(volume)))
        self.sound = None
        self.duration = 0.0
        self.play_count = 0
        self.last_error = None

    @property
    def is_loaded(self):
        return self.sound is not None

    def load(self):
        """Decode the clip through the pygame mixer. Returns True on success."""
        if self.sound is not None:
            return True

        file_path = str(self.clip_path)
        if not os.path.exists(file_path):
            self.last_error = f"File not found: {file_path}"
            tui_manager.log(f"[{self.owner_name}] Sound file not found: {file_path}")
            return False

        try:
            sound = pygame.mixer.Sound(file_path)
            sound.set_volume(self.volume)
        except (pygame.error, OSError) as exc:
            self.last_error = str(exc)
            tui_manager.log(f"[{self.owner_name}] Error loading {file_path}: {exc}")
            log_error("CLIP_LOAD", self.owner_name, str(exc), {"path": file_path})
            return False

        self.sound = sound
        self.duration = sound.get_length()

        if is_debug_enabled():
            debug_log(
                "CLIP_LOADED",
                f"{self.owner_name} clip loaded",
                {"path": file_path, "duration": self.duration, "volume": self.volume},
            )
        return True

    def play(self):
        """Start the clip; returns the mixer channel or None when unavailable."""
        if self.sound is None:
            return None

        channel = self.sound.play()
        self.play_count += 1
        debug_log(
            "CLIP_PLAY",
            f"{self.owner_name} playing {self.clip_path.name}",
            {"duration": self.duration},
        )
        return channel
