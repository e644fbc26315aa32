#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Test helpers for SculptFade."""

from unittest import mock

from sculptfade.core.controller import InteractiveObjectConfig, LifecycleController
from sculptfade.core.scene import SceneObject
from sculptfade.core.triggers import SOURCE_TYPES
from sculptfade.core.visual import Material, Renderer, Texture
from sculptfade.ui.tui import tui_manager


class RecordingRemover:
    """Stands in for the scene: records removal requests and runs object teardown."""

    def __init__(self):
        self.destroyed = []

    def destroy(self, scene_object):
        self.destroyed.append(scene_object)
        scene_object.destroy()


class RecordingAudio:
    """Audio handle that counts plays instead of touching the mixer."""

    instances = []

    def __init__(self, clip_path, owner_name=None, loads=True):
        self.clip_path = clip_path
        self.owner_name = owner_name
        self.loads = loads
        self.plays = 0
        RecordingAudio.instances.append(self)

    def load(self):
        return self.loads

    def play(self):
        self.plays += 1


class RecordingSourceMixin:
    """Tracks every handle handed out and taken back."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.subscribed = []
        self.unsubscribed = []

    def subscribe(self, handler):
        handle = super().subscribe(handler)
        self.subscribed.append(handle)
        return handle

    def unsubscribe(self, handle):
        self.unsubscribed.append(handle)
        super().unsubscribe(handle)


def recording_source(kind):
    base = SOURCE_TYPES[kind]
    source_cls = type(f"Recording{base.__name__}", (RecordingSourceMixin, base), {})
    return source_cls(f"test.{kind}")


TEST_TEXTURE = Texture("lit", None)


def build_object(name="prop", sources=("poke",), renderer=True, slots=("_MainTex",), **config):
    """Create a scene object wired to a controller with recording collaborators."""
    scene_object = SceneObject(name)
    if renderer:
        scene_object.add_component(
            Renderer(Material.with_slots(slots, color=(0.2, 0.4, 0.6, 1.0)))
        )
    for kind in sources:
        scene_object.add_component(recording_source(kind))

    config.setdefault("visual_replacement", TEST_TEXTURE)
    remover = RecordingRemover()
    controller = LifecycleController(
        scene_object,
        InteractiveObjectConfig(**config),
        remover=remover,
        audio_factory=RecordingAudio,
    )
    scene_object.controller = controller
    return scene_object, controller, remover


def quiet_tui_log():
    """Patcher for the shared log hub; start it in setUpModule, stop it in tearDownModule."""
    return mock.patch.object(tui_manager, "log")
