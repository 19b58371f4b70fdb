"""
visibility.py

Decides which face of the panel points at the viewer for a given rotation
angle. The swap happens at a quarter turn: the front is visible while the
panel is within 90 degrees of its starting orientation on either side of a
full turn, the back otherwise.

The host uses this flag to decide which face to draw and hit-test; it must be
evaluated on every tick, not only when a flip completes.
"""

from __future__ import annotations

import numpy as np

QUARTER_TURN = np.pi / 2
THREE_QUARTER_TURN = 3 * np.pi / 2


def is_front_visible(angle):
    """
    Return True where the front face is showing.

    Inputs:
    - angle: rotation angle [rad], scalar or array. Only its magnitude matters.

    Outputs:
    - bool for a scalar input, boolean ndarray otherwise.

    Both bounds are inclusive: |angle| == pi/2 and |angle| == 3pi/2 count as
    front-visible.
    """
    a = np.abs(np.asarray(angle, dtype=float))
    visible = (a <= QUARTER_TURN) | (a >= THREE_QUARTER_TURN)
    if visible.ndim == 0:
        return bool(visible)
    return visible
