#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Interaction latch, fade sequencing and scene hosting for SculptFade."""

import importlib
from typing import Any

_EXPORTS = {
    'TriggerSource': 'sculptfade.core.triggers',
    'InteractableEvent': 'sculptfade.core.triggers',
    'PokeInteractable': 'sculptfade.core.triggers',
    'RayInteractable': 'sculptfade.core.triggers',
    'GrabInteractable': 'sculptfade.core.triggers',
    'InteractionLatch': 'sculptfade.core.triggers',
    'Material': 'sculptfade.core.visual',
    'Renderer': 'sculptfade.core.visual',
    'Texture': 'sculptfade.core.visual',
    'VisualMutator': 'sculptfade.core.visual',
    'FadeState': 'sculptfade.core.sequencer',
    'TimedFadeSequencer': 'sculptfade.core.sequencer',
    'InteractiveObjectConfig': 'sculptfade.core.controller',
    'LifecycleController': 'sculptfade.core.controller',
    'SceneObject': 'sculptfade.core.scene',
    'InteractiveScene': 'sculptfade.core.scene',
}

__all__ = list(_EXPORTS)


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = importlib.import_module(_EXPORTS[name])
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'sculptfade.core' has no attribute {name!r}")
