#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Scene hosting for interactive objects: loading, frame stepping, removal."""

from __future__ import annotations

import json
import queue
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from ..debug import debug_log, is_debug_enabled, update_state
from ..ui.tui import tui_manager
from .controller import InteractiveObjectConfig, LifecycleController
from .triggers import InteractableEvent, create_source
from .visual import Material, Renderer

C = TypeVar("C")


class SceneObject:
    """A named scene-graph node holding components such as renderers and sources."""

    def __init__(self, name: str, components: Optional[List[Any]] = None) -> None:
        self.name = name
        self.components: List[Any] = list(components or [])
        self.controller: Optional[LifecycleController] = None
        self.alive = True

    def add_component(self, component: Any) -> Any:
        self.components.append(component)
        return component

    def get_component(self, component_type: Type[C]) -> Optional[C]:
        for component in self.components:
            if isinstance(component, component_type):
                return component
        return None

    def find_components(self, component_type: Type[C]) -> List[C]:
        return [c for c in self.components if isinstance(c, component_type)]

    def get_source(self, kind: str) -> Optional[InteractableEvent]:
        for component in self.find_components(InteractableEvent):
            if component.kind == kind:
                return component
        return None

    def destroy(self) -> None:
        """Mark the node dead and run its controller teardown."""
        if not self.alive:
            return
        self.alive = False
        if self.controller is not None:
            self.controller.teardown()

    def __repr__(self) -> str:
        return f"SceneObject({self.name!r})"


@dataclass(order=True)
class TimelineEvent:
    """Scripted interaction fired when the scene clock reaches ``time``."""

    time: float
    object_name: str = field(compare=False)
    source: Optional[str] = field(default=None, compare=False)
    manual: bool = field(default=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimelineEvent":
        return cls(
            time=float(data.get("time", 0.0)),
            object_name=data["object"],
            source=data.get("source"),
            manual=bool(data.get("manual", False)) or not data.get("source"),
        )


class InteractiveScene:
    """Owns the interactive objects of one scene and advances them frame by frame."""

    def __init__(self, scene_file: Path | str | None = None) -> None:
        self.scene_file = Path(scene_file) if scene_file is not None else None
        self.scene_config: Optional[Dict[str, Any]] = None
        self.name = "Untitled Scene"
        self.objects: List[SceneObject] = []
        # Spawn order, matching the numbered rows of the status table
        self.roster: List[SceneObject] = []
        self.removed: List[SceneObject] = []
        self.timeline: List[TimelineEvent] = []
        self.clock = 0.0
        self.frame_index = 0
        self._manual_requests: "queue.Queue[int]" = queue.Queue()

        debug_log(
            "SCENE_INIT",
            "Scene initialized",
            {"scene_file": str(self.scene_file) if self.scene_file else None},
        )

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------
    def load_scene(self) -> bool:
        """Load the scene JSON file and spawn its objects."""
        if self.scene_file is None:
            tui_manager.log("No scene file configured")
            return False

        try:
            with open(self.scene_file, "r", encoding="utf-8") as f:
                scene_config = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            tui_manager.log(f"Error loading scene {self.scene_file}: {exc}")
            return False

        try:
            self.load_config(scene_config, base_path=self.scene_file.parent)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            tui_manager.log(f"Error building scene {self.scene_file}: {exc}")
            self.shutdown()
            return False
        return True

    def load_config(self, scene_config: Dict[str, Any], base_path: Optional[Path] = None) -> None:
        self.scene_config = scene_config
        self.name = scene_config.get("name", self.name)
        tui_manager.update_scene_name(self.name)

        for object_config in scene_config.get("objects", []):
            self.spawn(object_config, base_path)

        self.timeline = sorted(
            TimelineEvent.from_dict(event) for event in scene_config.get("events", [])
        )
        tui_manager.log(
            f"Loaded scene: {self.name} ({len(self.objects)} objects, "
            f"{len(self.timeline)} scripted events)"
        )

    def spawn(self, object_config: Dict[str, Any], base_path: Optional[Path] = None) -> SceneObject:
        """Create a scene object with its renderer, sources and controller."""
        name = object_config.get("name", f"object-{len(self.objects) + 1}")
        config = InteractiveObjectConfig.from_dict(object_config, base_path)
        scene_object = SceneObject(name)

        if object_config.get("renderer", True):
            color = tuple(float(c) for c in object_config.get("color", (1.0, 1.0, 1.0, 1.0)))
            if len(color) != 4:
                raise ValueError(f"{name}.color must have 4 components, got {len(color)}")
            material = Material.with_slots(object_config.get("slots", ["_MainTex"]), color=color)
            scene_object.add_component(Renderer(material))

        for kind in object_config.get("sources", []):
            scene_object.add_component(create_source(kind, f"{name}.{kind}"))

        return self.add_object(scene_object, config)

    def add_object(
        self, scene_object: SceneObject, config: InteractiveObjectConfig, **controller_kwargs: Any
    ) -> SceneObject:
        controller = LifecycleController(scene_object, config, remover=self, **controller_kwargs)
        scene_object.controller = controller
        self.objects.append(scene_object)
        self.roster.append(scene_object)
        controller.initialize()
        tui_manager.update_object_status(scene_object.name, controller.snapshot())
        return scene_object

    def find_object(self, name: str) -> Optional[SceneObject]:
        for scene_object in self.objects:
            if scene_object.name == name:
                return scene_object
        return None

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------
    def destroy(self, scene_object: SceneObject) -> None:
        """Remove an object from the scene; its teardown runs immediately."""
        if scene_object not in self.objects:
            return
        self.objects.remove(scene_object)
        self.removed.append(scene_object)
        scene_object.destroy()
        if scene_object.controller is not None:
            tui_manager.update_object_status(scene_object.name, scene_object.controller.snapshot())
        debug_log(
            "OBJECT_REMOVED",
            f"{scene_object.name} removed at t={self.clock:.3f}",
            {"remaining": len(self.objects)},
        )

    def shutdown(self) -> None:
        """Remove every remaining object, unsubscribing all of their sources."""
        for scene_object in list(self.objects):
            self.destroy(scene_object)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------
    def queue_manual_trigger(self, index: int) -> None:
        """Request ``on_interact`` for the ``index``-th spawned object; safe from any thread."""
        self._manual_requests.put(index)

    def _drain_manual_requests(self) -> None:
        while True:
            try:
                index = self._manual_requests.get_nowait()
            except queue.Empty:
                return
            if not 0 <= index < len(self.roster):
                tui_manager.log(f"No object #{index + 1} to interact with")
                continue
            scene_object = self.roster[index]
            if not scene_object.alive:
                tui_manager.log(f"Object #{index + 1} ({scene_object.name}) is already removed")
                continue
            scene_object.controller.on_interact()

    def _dispatch_due_events(self) -> None:
        while self.timeline and self.timeline[0].time <= self.clock:
            event = self.timeline.pop(0)
            scene_object = self.find_object(event.object_name)
            if scene_object is None:
                tui_manager.log(
                    f"Skipping event for '{event.object_name}' at t={event.time:g}; "
                    "object is not in the scene"
                )
                continue

            if event.manual:
                scene_object.controller.on_interact()
                continue

            source = scene_object.get_source(event.source)
            if source is None:
                tui_manager.log(
                    f"[{scene_object.name}] has no {event.source} source; event ignored"
                )
                continue
            source.emit({"time": self.clock, "source": event.source})

    def step(self, dt: float) -> None:
        """Advance the scene by one frame of ``dt`` seconds."""
        dt = max(0.0, float(dt))
        self.clock += dt
        self.frame_index += 1

        self._drain_manual_requests()
        self._dispatch_due_events()

        for scene_object in list(self.objects):
            scene_object.controller.tick(dt)

        for scene_object in self.objects:
            tui_manager.update_object_status(scene_object.name, scene_object.controller.snapshot())
        tui_manager.update_scene_clock(self.clock)

        if is_debug_enabled():
            update_state("scene", "clock", round(self.clock, 3))

    def has_active_sequences(self) -> bool:
        return any(obj.controller.sequencer is not None and obj.controller.sequencer.is_running
                   for obj in self.objects)

    def is_finished(self) -> bool:
        """True once nothing further can happen without outside input."""
        if not self.objects:
            return True
        return not self.timeline and not self.has_active_sequences()
