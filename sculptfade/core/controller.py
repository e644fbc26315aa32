#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Interaction response controller: latch, swap, sound, fade, remove."""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from .. import (
    DEFAULT_DISAPPEAR_DELAY,
    DEFAULT_FADE_DURATION,
    DEFAULT_PROPERTY_NAME,
    STATE_DISABLED,
)
from ..audio.player import ClipPlayer
from ..debug import debug_log, update_state
from ..ui.tui import tui_manager
from .sequencer import FadeState, TimedFadeSequencer
from .triggers import InteractionLatch, TriggerSource
from .visual import Renderer, Texture, VisualMutator

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from .scene import SceneObject


def _non_negative(value: Any, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be a number, got {value!r}") from None
    if math.isnan(number) or number < 0:
        raise ValueError(f"{field_name} must be >= 0, got {value!r}")
    return number


@dataclass(frozen=True)
class InteractiveObjectConfig:
    """Per-object settings, fixed for the lifetime of the controller."""

    visual_replacement: Optional[Texture] = None
    property_name: str = DEFAULT_PROPERTY_NAME
    disappear_delay: float = DEFAULT_DISAPPEAR_DELAY
    fade_duration: float = DEFAULT_FADE_DURATION
    interaction_clip: Optional[Path] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "disappear_delay", _non_negative(self.disappear_delay, "disappear_delay")
        )
        object.__setattr__(
            self, "fade_duration", _non_negative(self.fade_duration, "fade_duration")
        )
        if not isinstance(self.property_name, str) or not self.property_name:
            raise ValueError("property_name must be a non-empty string")
        if self.interaction_clip is not None:
            object.__setattr__(self, "interaction_clip", Path(self.interaction_clip))

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "InteractiveObjectConfig":
        """Build a config from a scene-file object entry."""

        def resolve(value: Optional[str]) -> Optional[Path]:
            if not value:
                return None
            path = Path(value)
            if base_path is not None and not path.is_absolute():
                path = base_path / path
            return path

        texture_path = resolve(data.get("texture"))
        return cls(
            visual_replacement=Texture.from_path(texture_path) if texture_path else None,
            property_name=data.get("property", DEFAULT_PROPERTY_NAME),
            disappear_delay=data.get("delay", DEFAULT_DISAPPEAR_DELAY),
            fade_duration=data.get("fade", DEFAULT_FADE_DURATION),
            interaction_clip=resolve(data.get("sound")),
        )


class LifecycleController:
    """Drives one scene object from first interaction to removal.

    ``initialize`` wires every trigger source found on the object, and
    ``teardown`` unwires them again whichever way the object goes away. Only
    ``on_interact`` and the source handler may fire the latch.
    """

    def __init__(
        self,
        scene_object: "SceneObject",
        config: Optional[InteractiveObjectConfig] = None,
        remover: Optional[Any] = None,
        audio_factory: Callable[..., Any] = ClipPlayer,
    ) -> None:
        self.scene_object = scene_object
        self.config = config or InteractiveObjectConfig()
        self.remover = remover
        self.audio_factory = audio_factory
        self.name = getattr(scene_object, "name", "object")

        self.latch = InteractionLatch()
        self.mutator: Optional[VisualMutator] = None
        self.sequencer: Optional[TimedFadeSequencer] = None
        self.audio: Optional[Any] = None
        self.subscriptions: List[Tuple[TriggerSource, Any]] = []
        self.source_kinds: List[str] = []
        self.trigger_origin: Optional[str] = None
        self.rejected_triggers = 0

        self.enabled = True
        self.initialized = False
        self.torn_down = False

    # ------------------------------------------------------------------
    # Initialization and teardown
    # ------------------------------------------------------------------
    def initialize(self) -> bool:
        """Resolve collaborators and subscribe to sources. False when disabled."""
        if self.initialized or self.torn_down:
            return self.enabled

        self.initialized = True

        renderer = self.scene_object.get_component(Renderer)
        material = renderer.get_owned_material() if renderer is not None else None
        if material is None:
            tui_manager.log(
                f"[{self.name}] Error: No Renderer found; interaction response disabled"
            )
            self.enabled = False
            update_state(self.name, "state", STATE_DISABLED, "Controller disabled")
            return False

        self.mutator = VisualMutator(material)
        self.sequencer = TimedFadeSequencer(
            self.mutator,
            self.config.disappear_delay,
            self.config.fade_duration,
            on_complete=self._on_sequence_complete,
            name=self.name,
        )

        if self.config.interaction_clip is not None:
            self.audio = self.audio_factory(self.config.interaction_clip, self.name)
            if not self.audio.load():
                tui_manager.log(f"[{self.name}] Interaction sound unavailable; continuing silently")

        sources = self.scene_object.find_components(TriggerSource)
        self.source_kinds = [getattr(source, "kind", type(source).__name__) for source in sources]
        for source in sources:
            handle = source.subscribe(functools.partial(self._on_source_interaction, source))
            self.subscriptions.append((source, handle))

        if not sources:
            tui_manager.log(
                f"[{self.name}] Warning: No interactable source found; "
                "add a poke, ray or grab source or call on_interact()"
            )

        debug_log(
            "CONTROLLER_INIT",
            f"{self.name} ready",
            {
                "sources": self.source_kinds,
                "delay": self.config.disappear_delay,
                "fade": self.config.fade_duration,
                "has_audio": self.audio is not None,
            },
        )
        update_state(self.name, "state", self.state.label)
        return True

    def teardown(self) -> None:
        """Detach every subscription; safe to call at any time, any number of times."""
        if self.torn_down:
            return
        self.torn_down = True

        subscriptions, self.subscriptions = self.subscriptions, []
        for source, handle in subscriptions:
            try:
                source.unsubscribe(handle)
            except Exception as exc:
                tui_manager.log(f"[{self.name}] Failed to unsubscribe from {source!r}: {exc}")

        if self.sequencer is not None and not self.sequencer.is_finished:
            # Removed before the sequence finished; no further ticks will arrive
            self.sequencer.abandon()
            debug_log("CONTROLLER_TEARDOWN", f"{self.name} removed before fade completed")

        update_state(self.name, "subscriptions", 0, "Teardown")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def on_interact(self) -> bool:
        """Manual trigger for callers outside the standard source set."""
        return self._fire("manual")

    def _on_source_interaction(self, source: TriggerSource, interactor_view: Any = None) -> None:
        self._fire(getattr(source, "kind", type(source).__name__))

    def _fire(self, origin: str) -> bool:
        if not self.enabled or self.torn_down or self.sequencer is None:
            return False

        if not self.latch.try_fire():
            self.rejected_triggers += 1
            debug_log("TRIGGER_REJECTED", f"{self.name} already triggered", {"origin": origin})
            return False

        self.trigger_origin = origin
        self.sequencer.trigger()

        self.mutator.apply_replacement(
            self.config.property_name, self.config.visual_replacement
        )
        if self.audio is not None:
            self.audio.play()

        self.sequencer.start()

        tui_manager.log(
            f"[{self.name}] Interaction ({origin}); disappearing in "
            f"{self.config.disappear_delay:g}s"
        )
        update_state(self.name, "state", self.state.label, f"Triggered by {origin}")
        return True

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------
    def tick(self, dt: float) -> None:
        if not self.enabled or self.torn_down or self.sequencer is None:
            return
        if not self.sequencer.is_running:
            return

        previous = self.sequencer.state
        self.sequencer.tick(dt)
        if self.sequencer.state != previous:
            update_state(self.name, "state", self.sequencer.state.label)
            if self.sequencer.state == FadeState.FADING:
                tui_manager.log(
                    f"[{self.name}] Fading out over {self.config.fade_duration:g}s"
                )

    def _on_sequence_complete(self) -> None:
        tui_manager.log(f"[{self.name}] Removed from scene")
        if self.remover is not None:
            try:
                self.remover.destroy(self.scene_object)
            except Exception as exc:
                tui_manager.log(f"[{self.name}] Scene removal failed: {exc}")
        self.teardown()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    @property
    def state(self) -> FadeState:
        if self.sequencer is None:
            return FadeState.IDLE
        return self.sequencer.state

    @property
    def status_label(self) -> str:
        if not self.enabled:
            return STATE_DISABLED
        return self.state.label

    @property
    def opacity(self) -> float:
        if self.mutator is None:
            return 1.0
        return self.mutator.opacity

    def snapshot(self) -> Dict[str, Any]:
        """Status dictionary consumed by the TUI."""
        sequencer = self.sequencer
        return {
            "state": self.status_label,
            "opacity": self.opacity,
            "progress": sequencer.progress if sequencer is not None else 0.0,
            "sources": list(self.source_kinds),
            "origin": self.trigger_origin,
            "rejected": self.rejected_triggers,
        }
