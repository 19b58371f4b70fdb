"""
Flip Controller Module

State machine that owns a panel's FlipState and turns host ticks into
published FlipFrames.

States:
    Idle      -> flip()              -> Animating (progress reset to 0)
    Animating -> progress reaches 1  -> Idle (orientation toggled,
                                          angle offset + pi, future resolved)

The controller does not own a clock. The host calls advance(dt) or
set_progress(p) once per frame; every call that moves progress recomputes
the frame and publishes it when it changed. Calling flip() while a flip is
in flight is ignored: the in-flight future is returned and no second
rotation is started or queued. There is no cancellation.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

import numpy as np

from .channel import FlipFrame, FrameChannel
from .state import (
    FlipConfig,
    FlipState,
    Orientation,
    complete_flip,
    flip_angle,
    initial_state,
    start_flip,
    with_progress,
)
from .transforms import build_transforms
from .visibility import is_front_visible

# Accumulated dt / duration steps land within this of 1.0 on the final tick
PROGRESS_TOLERANCE = 1e-9


class FlipController:
    """
    Drives one two-sided panel through discrete flips.

    Inputs:
      - config: FlipConfig (defaults used when omitted)

    Outputs (via subscribe / frame):
      - FlipFrame(current_transform, opposite_transform, is_front_visible, ...)

    Notes:
      - A resting frame is computed and stored at construction so a renderer
        attaching before the first tick still has something correct to draw.
      - All state changes happen inside flip(), advance() and set_progress();
        the controller is not thread safe and does not need to be.
    """

    def __init__(self, config: Optional[FlipConfig] = None):
        self._config = config if config is not None else FlipConfig()
        self._state = initial_state(self._config)
        self._pending: Optional[Future] = None
        self._channel = FrameChannel()
        self._refresh()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def config(self) -> FlipConfig:
        return self._config

    @property
    def state(self) -> FlipState:
        """Copy of the current state."""
        s = self._state
        return FlipState(s.orientation, s.angle_offset, s.progress, s.animating)

    @property
    def orientation(self) -> Orientation:
        return self._state.orientation

    @property
    def angle_offset(self) -> float:
        return self._state.angle_offset

    @property
    def progress(self) -> float:
        return self._state.progress

    @property
    def is_animating(self) -> bool:
        return self._state.animating

    @property
    def angle(self) -> float:
        return flip_angle(self._state, self._config)

    @property
    def frame(self) -> FlipFrame:
        return self._channel.value

    def subscribe(self, callback: Callable[[FlipFrame], None], replay: bool = False) -> Callable[[], None]:
        """Receive every published frame; returns an unsubscribe function."""
        return self._channel.subscribe(callback, replay=replay)

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def flip(self) -> Future:
        """
        Start a flip toward the opposite face.

        Returns a Future resolved with the new resting Orientation once
        progress reaches 1. While a flip is already running the request is
        dropped and the running flip's Future is returned.
        """
        if self._state.animating:
            return self._pending

        future = Future()
        # Moves the future to RUNNING so callers cannot cancel it
        future.set_running_or_notify_cancel()
        self._pending = future

        self._state = start_flip(self._state)
        self._refresh()
        return future

    def handle_tap(self) -> Optional[Future]:
        """Flip in response to a tap when flip_on_tap is enabled."""
        if not self._config.flip_on_tap:
            return None
        return self.flip()

    # ------------------------------------------------------------------
    # Host ticks
    # ------------------------------------------------------------------

    def advance(self, dt: float) -> bool:
        """
        Move progress forward by dt seconds of animation time.

        Returns False (and does nothing) when idle. Overshooting the end is
        clipped to progress 1, and a sum that falls short of 1 only by
        rounding counts as the end, so duration / dt ticks finish the flip.
        """
        dt = float(dt)
        if not np.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite value >= 0, got {dt}")
        if not self._state.animating:
            return False

        progress = self._state.progress + dt / self._config.duration
        if progress > 1.0 - PROGRESS_TOLERANCE:
            progress = 1.0
        self._update_progress(progress)
        return True

    def set_progress(self, progress: float) -> bool:
        """
        Jump to an absolute progress value in [0, 1].

        Progress only moves forward within a flip; a smaller value than the
        current one raises ValueError. Returns False when idle.
        """
        progress = float(progress)
        if not np.isfinite(progress) or not 0.0 <= progress <= 1.0:
            raise ValueError(f"progress must be in [0, 1], got {progress}")
        if not self._state.animating:
            return False
        if progress < self._state.progress:
            raise ValueError(
                f"progress cannot move backwards ({self._state.progress} -> {progress})"
            )

        self._update_progress(progress)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update_progress(self, progress: float) -> None:
        self._state = with_progress(self._state, progress)
        self._refresh()
        if self._state.progress >= 1.0:
            self._finish()

    def _finish(self) -> None:
        self._state = complete_flip(self._state)
        # The resting angle can differ from the last tick's (CONTINUOUS wraps -2pi to 0)
        self._refresh()
        future, self._pending = self._pending, None
        # State is idle before done-callbacks run, so they may flip again
        future.set_result(self._state.orientation)

    def _compute_frame(self) -> FlipFrame:
        cfg = self._config
        angle = flip_angle(self._state, cfg)
        current, opposite = build_transforms(angle, cfg.axis, cfg.perspective, cfg.back_face)
        return FlipFrame(
            current_transform=current,
            opposite_transform=opposite,
            is_front_visible=is_front_visible(angle),
            angle=angle,
            progress=self._state.progress,
        )

    def _refresh(self) -> bool:
        return self._channel.publish(self._compute_frame())

    def __repr__(self) -> str:
        s = self._state
        return (f"FlipController(orientation={s.orientation.value}, "
                f"progress={s.progress:.3f}, animating={s.animating})")
