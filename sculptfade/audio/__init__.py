#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Audio utilities for SculptFade."""

import importlib
from typing import Any

__all__ = ['ClipPlayer']


def __getattr__(name: str) -> Any:
    if name == 'ClipPlayer':
        module = importlib.import_module('sculptfade.audio.player')
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'sculptfade.audio' has no attribute {name!r}")
