#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#

__version__ = "0.1"
__author__ = "Martynas Jocius"
__license__ = "MIT"

VERSION = __version__

STATE_IDLE = "Idle"
STATE_TRIGGERED = "Triggered"
STATE_WAITING = "Waiting"
STATE_FADING = "Fading"
STATE_DESTROYED = "Destroyed"
STATE_DISABLED = "Disabled"

DEFAULT_PROPERTY_NAME = "_MainTex"
DEFAULT_DISAPPEAR_DELAY = 2.0
DEFAULT_FADE_DURATION = 1.0
DEFAULT_FPS = 60

UI_APP_NAME = "SculptFade"
UI_PANEL_SCENE = "Scene"
UI_PANEL_CHRONICLE = "Events"
UI_COLUMN_OBJECT = "Object"
UI_COLUMN_OPACITY = "Opacity"
UI_COLUMN_STATUS = "Status"
UI_COLUMN_SOURCES = "Sources"
UI_NO_OBJECTS = "No objects in scene"
