#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Tick-driven delay-then-fade sequence for a triggered object."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Optional

from .. import (
    STATE_DESTROYED,
    STATE_FADING,
    STATE_IDLE,
    STATE_TRIGGERED,
    STATE_WAITING,
)
from ..debug import debug_log
from .visual import VisualMutator


class FadeState(IntEnum):
    """Lifecycle of a disappearing object. Values only ever increase."""

    IDLE = 0
    TRIGGERED = 1
    WAITING = 2
    FADING = 3
    DESTROYED = 4

    @property
    def label(self) -> str:
        return _STATE_LABELS[self]


_STATE_LABELS = {
    FadeState.IDLE: STATE_IDLE,
    FadeState.TRIGGERED: STATE_TRIGGERED,
    FadeState.WAITING: STATE_WAITING,
    FadeState.FADING: STATE_FADING,
    FadeState.DESTROYED: STATE_DESTROYED,
}


def fade_opacity(elapsed: float, duration: float) -> float:
    """Opacity after ``elapsed`` seconds of a linear 1 -> 0 fade."""
    if duration <= 0:
        return 0.0
    t = elapsed / duration
    alpha = 1.0 + (0.0 - 1.0) * t
    return max(0.0, min(1.0, alpha))


class TimedFadeSequencer:
    """Waits ``disappear_delay`` seconds, fades opacity out, then completes.

    The sequence advances only through :meth:`tick`, called once per frame
    with that frame's delta time. The delay timer starts on the first tick
    after :meth:`start`; the delta of that tick is not counted because it
    elapsed before the interaction happened. Entering ``FADING`` switches the
    material to transparent in the same tick the delay runs out, and
    interpolation steps begin on the following tick. The tick that reaches
    the full duration writes opacity 0 and completes the sequence.
    """

    def __init__(
        self,
        mutator: VisualMutator,
        disappear_delay: float,
        fade_duration: float,
        on_complete: Optional[Callable[[], None]] = None,
        name: str = "object",
    ) -> None:
        self.mutator = mutator
        self.disappear_delay = float(disappear_delay)
        self.fade_duration = float(fade_duration)
        self.on_complete = on_complete
        self.name = name

        self.state = FadeState.IDLE
        self.waited = 0.0
        self.elapsed = 0.0
        self.fade_frames = 0
        self._timer_started = False

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------
    def _advance(self, new_state: FadeState) -> None:
        if new_state <= self.state:
            raise RuntimeError(
                f"{self.name}: cannot move from {self.state.label} to {new_state.label}"
            )
        debug_log(
            "FADE_STATE",
            f"{self.name}: {self.state.label} -> {new_state.label}",
            {"waited": round(self.waited, 4), "elapsed": round(self.elapsed, 4)},
        )
        self.state = new_state

    def trigger(self) -> None:
        """Mark the object as triggered; visual and audio effects follow."""
        self._advance(FadeState.TRIGGERED)

    def start(self) -> None:
        """Begin the delay timer."""
        if self.state < FadeState.TRIGGERED:
            self._advance(FadeState.TRIGGERED)
        self._advance(FadeState.WAITING)

    def abandon(self) -> None:
        """Stop without completing, used when the object is removed externally."""
        if self.state != FadeState.DESTROYED:
            self._advance(FadeState.DESTROYED)

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------
    def tick(self, dt: float) -> None:
        if dt < 0:
            debug_log("FADE_TICK", f"{self.name}: negative delta {dt} treated as 0")
            dt = 0.0

        if self.state == FadeState.WAITING:
            self._tick_waiting(dt)
        elif self.state == FadeState.FADING:
            self._tick_fading(dt)

    def _tick_waiting(self, dt: float) -> None:
        if self._timer_started:
            self.waited += dt
        else:
            self._timer_started = True

        if self.waited < self.disappear_delay:
            return

        if self.fade_duration > 0:
            self._advance(FadeState.FADING)
            self.mutator.enable_transparency()
            self.mutator.set_opacity(1.0)
        else:
            self._complete()

    def _tick_fading(self, dt: float) -> None:
        self.elapsed += dt
        self.mutator.set_opacity(fade_opacity(self.elapsed, self.fade_duration))
        self.fade_frames += 1

        if self.elapsed >= self.fade_duration:
            self._complete()

    def _complete(self) -> None:
        self._advance(FadeState.DESTROYED)
        if self.on_complete is not None:
            self.on_complete()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self.state in (FadeState.WAITING, FadeState.FADING)

    @property
    def is_finished(self) -> bool:
        return self.state == FadeState.DESTROYED

    @property
    def progress(self) -> float:
        """Fraction of the whole delay plus fade sequence that has passed."""
        total = self.disappear_delay + self.fade_duration
        if self.state == FadeState.DESTROYED:
            return 1.0
        if self.state < FadeState.WAITING or total <= 0:
            return 0.0
        done = min(self.waited, self.disappear_delay) + min(self.elapsed, self.fade_duration)
        return max(0.0, min(1.0, done / total))
