"""
Flip Profile Module

Fixed-step drivers for FlipController, used to inspect a flip offline the
same way a host frame clock would drive it at runtime.

Every profile is produced by a real controller, so the sampled angle and
visibility are exactly what a renderer would have been given.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .controller import FlipController
from .state import FlipConfig

# Frame period of a typical display refresh.
DEFAULT_FRAME_DT = 1.0 / 60.0  # 60 Hz


@dataclass
class FlipProfile:
    """Per-tick samples of one or more consecutive flips.

    Attributes:
        t: Time since the first flip started (s).
        progress: Progress of the flip each sample belongs to (0 at rest).
        fraction: Eased rotation fraction at that progress.
        angle: Signed panel angle (rad).
        front_visible: Whether the front face was showing.
        flip_index: 0 for the resting sample, then 1..n_flips.
    """
    t: np.ndarray
    progress: np.ndarray
    fraction: np.ndarray
    angle: np.ndarray
    front_visible: np.ndarray
    flip_index: np.ndarray

    def __len__(self) -> int:
        return len(self.t)


def run_flip(controller: FlipController,
             dt: float = DEFAULT_FRAME_DT,
             on_tick: Optional[Callable[[FlipController], None]] = None) -> int:
    """
    Flip and tick the controller until it is idle again.

    Inputs:
    - controller: the FlipController to drive.
    - dt: tick period [s].
    - on_tick: optional callback invoked after every tick.

    Outputs:
    - number of ticks delivered.
    """
    if dt <= 0:
        raise ValueError(f"dt must be > 0, got {dt}")

    controller.flip()
    ticks = 0
    while controller.is_animating:
        controller.advance(dt)
        ticks += 1
        if on_tick is not None:
            on_tick(controller)
    return ticks


def sample_flip_profile(config: Optional[FlipConfig] = None,
                        n_flips: int = 1,
                        dt: float = DEFAULT_FRAME_DT) -> FlipProfile:
    """
    Sample n_flips consecutive flips at a fixed tick rate.

    Inputs:
    - config: FlipConfig (defaults when omitted).
    - n_flips: number of back-to-back flips (>= 1).
    - dt: tick period [s].

    Outputs:
    - FlipProfile with one resting sample followed by one sample per tick.
    """
    config = config if config is not None else FlipConfig()
    if n_flips < 1:
        raise ValueError(f"n_flips must be >= 1, got {n_flips}")
    if dt <= 0:
        raise ValueError(f"dt must be > 0, got {dt}")
    if dt > config.duration:
        warnings.warn(f"dt={dt} exceeds the flip duration {config.duration}; "
                      f"each flip will be a single step.")

    controller = FlipController(config)
    rows = []

    def record(t, flip_index):
        frame = controller.frame
        if flip_index:
            progress, fraction = frame.progress, float(config.fraction(frame.progress))
        else:
            # Resting row, whichever face is showing
            progress, fraction = 0.0, 0.0
        rows.append((t, progress, fraction, frame.angle, frame.is_front_visible, flip_index))

    record(0.0, 0)

    elapsed = 0.0
    for k in range(1, n_flips + 1):
        def on_tick(_controller, k=k):
            nonlocal elapsed
            elapsed += dt
            record(elapsed, k)

        run_flip(controller, dt, on_tick)

    columns = list(zip(*rows))
    return FlipProfile(
        t=np.array(columns[0], dtype=float),
        progress=np.array(columns[1], dtype=float),
        fraction=np.array(columns[2], dtype=float),
        angle=np.array(columns[3], dtype=float),
        front_visible=np.array(columns[4], dtype=bool),
        flip_index=np.array(columns[5], dtype=int),
    )
