"""
channel.py

Single publish/subscribe channel for derived flip frames.

A FlipFrame bundles the two face transforms and the visibility flag computed
for one progress value, so subscribers never observe a transform from one
tick paired with a visibility flag from another. The channel keeps the last
published frame and only notifies when something changed numerically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np


@dataclass(frozen=True, eq=False)
class FlipFrame:
    """Everything a renderer needs to place both faces for one tick.

    Attributes:
        current_transform: (4, 4) transform of the face that started the flip in view.
        opposite_transform: (4, 4) transform of the other face.
        is_front_visible: True when the front face should be drawn and hit-tested.
        angle: Signed panel angle (rad) the transforms were built from.
        progress: Animation progress the frame belongs to.
    """
    current_transform: np.ndarray
    opposite_transform: np.ndarray
    is_front_visible: bool
    angle: float
    progress: float

    def same_appearance(self, other: Optional["FlipFrame"]) -> bool:
        """True when both transforms and the visibility flag are identical."""
        if other is None:
            return False
        return (
            self.is_front_visible == other.is_front_visible
            and np.array_equal(self.current_transform, other.current_transform)
            and np.array_equal(self.opposite_transform, other.opposite_transform)
        )


class FrameChannel:
    """
    Holds the latest FlipFrame and fans it out to subscribers.

    Subscribers are called synchronously, in subscription order, from
    whichever call published the frame.
    """

    def __init__(self, initial: Optional[FlipFrame] = None):
        self._value = initial
        self._subscribers: List[Callable[[FlipFrame], None]] = []
        self.publish_count = 0

    @property
    def value(self) -> Optional[FlipFrame]:
        return self._value

    def subscribe(self, callback: Callable[[FlipFrame], None], replay: bool = False) -> Callable[[], None]:
        """
        Register callback and return a function that removes it.

        With replay=True the current frame (if any) is delivered immediately.
        """
        if not callable(callback):
            raise ValueError("callback must be callable")
        self._subscribers.append(callback)
        if replay and self._value is not None:
            callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, frame: FlipFrame) -> bool:
        """Store frame and notify subscribers if it differs from the last one.

        Returns whether subscribers were notified.
        """
        if frame.same_appearance(self._value):
            return False
        self._value = frame
        self.publish_count += 1
        # Copy so a callback may unsubscribe itself
        for callback in list(self._subscribers):
            callback(frame)
        return True
