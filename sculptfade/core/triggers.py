#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Interaction trigger sources and the once-only interaction latch."""

from __future__ import annotations

import itertools
from typing import Any, Callable, Dict, Optional

from ..debug import debug_log

TriggerHandler = Callable[[Any], None]


class TriggerSource:
    """Producer of "interaction occurred" notifications.

    Anything attached to a scene object that can report an interaction (a
    poke volume, a ray target, a grab handle) exposes this contract. Handlers
    receive the interactor view that caused the notification, which may be
    ``None`` for synthetic events.
    """

    kind = "source"

    def subscribe(self, handler: TriggerHandler) -> Any:
        raise NotImplementedError

    def unsubscribe(self, handle: Any) -> None:
        raise NotImplementedError


class InteractableEvent(TriggerSource):
    """Multicast trigger source fired by the interaction subsystem via ``emit``."""

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name or self.kind
        self._handlers: Dict[int, TriggerHandler] = {}
        self._handles = itertools.count(1)

    def subscribe(self, handler: TriggerHandler) -> int:
        handle = next(self._handles)
        self._handlers[handle] = handler
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._handlers.pop(handle, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def emit(self, interactor_view: Any = None) -> int:
        """Notify every subscriber; returns how many handlers were called."""
        # Snapshot so handlers may unsubscribe while being notified
        handlers = list(self._handlers.values())
        debug_log(
            "TRIGGER_EMIT",
            f"{self.name} emitted",
            {"kind": self.kind, "subscribers": len(handlers)},
        )
        for handler in handlers:
            handler(interactor_view)
        return len(handlers)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class PokeInteractable(InteractableEvent):
    kind = "poke"


class RayInteractable(InteractableEvent):
    kind = "ray"


class GrabInteractable(InteractableEvent):
    kind = "grab"


SOURCE_TYPES = {
    cls.kind: cls for cls in (PokeInteractable, RayInteractable, GrabInteractable)
}


def create_source(kind: str, name: Optional[str] = None) -> InteractableEvent:
    """Build a trigger source from its scene-file kind ("poke", "ray", "grab")."""
    try:
        source_cls = SOURCE_TYPES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown trigger source '{kind}'; expected one of {sorted(SOURCE_TYPES)}"
        ) from None
    return source_cls(name)


class InteractionLatch:
    """Once-only gate turning any number of trigger notifications into one effect."""

    def __init__(self) -> None:
        self._fired = False

    @property
    def has_fired(self) -> bool:
        return self._fired

    def try_fire(self) -> bool:
        if self._fired:
            return False
        self._fired = True
        return True
