"""
state.py

Configuration, mutable flip state, and the pure functions that advance it.

This module is the single source of truth for the flip parameters. The
controller owns one FlipState value and replaces it through the transition
functions below (start_flip, with_progress, complete_flip); it never edits
fields in place. flip_angle turns a state plus its configuration into the
signed rotation angle that the transform builder and visibility selector
consume.

Angle convention:
    The resting angle of the panel is -(angle_offset mod 2pi), i.e. 0 when
    the front is resting and -pi when the back is resting. A flip from the
    front rotates toward negative angles.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional

import numpy as np

from .easing import two_phase_fraction, validate_fraction_parameters

# ============================================================================
# Defaults
# ============================================================================
# Half a second feels responsive without hiding the two-phase profile.
DEFAULT_DURATION = 0.5  # s

# 20% of the time covers 75% of the rotation: a quick snap then a settle.
DEFAULT_TIME_FOR_FIRST_PART = 0.2
DEFAULT_PROCESS_FOR_FIRST_PART = 0.75

# Projective entry at [3, 2]; small enough that the card only recedes slightly.
DEFAULT_PERSPECTIVE = 0.001

HALF_TURN = np.pi
FULL_TURN = 2 * np.pi


# ============================================================================
# Enumerations
# ============================================================================

class Orientation(Enum):
    """Resting face of the panel."""
    FRONT = "front"
    BACK = "back"

    def opposite(self) -> "Orientation":
        return Orientation.BACK if self is Orientation.FRONT else Orientation.FRONT


class Axis(Enum):
    """Rotation plane: HORIZONTAL turns about X, VERTICAL about Y."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class BackFaceMode(Enum):
    """How the opposite-face transform follows the current face."""
    TRACKING = "tracking"   # angle + pi, with perspective
    PINNED = "pinned"       # constant half turn, nested inside current


class RotationSense(Enum):
    """Direction of consecutive flips."""
    ALTERNATE = "alternate"     # front->back winds negative, back->front unwinds
    CONTINUOUS = "continuous"   # every flip winds negative


def coerce_enum(enum_cls, value, name: str):
    """
    Accept an enum member or its name/value (case insensitive).

    Raises ValueError naming the valid choices for anything else.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for member in enum_cls:
            if key in (member.value, member.name.lower()):
                return member
    valid = ", ".join(repr(m.value) for m in enum_cls)
    raise ValueError(f"Unknown {name}: {value!r}. Use one of {valid}")


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class FlipConfig:
    """Construction-time parameters of a flip panel.

    Attributes:
        duration: Length of one flip (seconds), strictly positive.
        axis: Rotation plane.
        initial_orientation: Face resting before the first flip.
        time_for_first_part: Fraction of the duration spent in the fast phase.
        process_for_first_part: Fraction of the rotation done in the fast phase.
        perspective: Projective entry applied before rotating (>= 0).
        back_face: Opposite-face transform strategy.
        rotation_sense: Whether consecutive flips alternate direction.
        flip_on_tap: Whether FlipController.handle_tap starts a flip.
        easing: Optional replacement for the two-phase curve, called as
            easing(progress, time_for_first_part, process_for_first_part).
    """

    duration: float = DEFAULT_DURATION
    axis: Axis = Axis.VERTICAL
    initial_orientation: Orientation = Orientation.FRONT
    time_for_first_part: float = DEFAULT_TIME_FOR_FIRST_PART
    process_for_first_part: float = DEFAULT_PROCESS_FOR_FIRST_PART
    perspective: float = DEFAULT_PERSPECTIVE
    back_face: BackFaceMode = BackFaceMode.TRACKING
    rotation_sense: RotationSense = RotationSense.ALTERNATE
    flip_on_tap: bool = False
    easing: Optional[Callable] = field(default=None, compare=False)

    def __post_init__(self):
        duration = float(self.duration)
        if not np.isfinite(duration) or duration <= 0:
            raise ValueError(f"duration must be > 0, got {self.duration}")

        validate_fraction_parameters(self.time_for_first_part, self.process_for_first_part)

        perspective = float(self.perspective)
        if not np.isfinite(perspective) or perspective < 0:
            raise ValueError(f"perspective must be >= 0, got {self.perspective}")

        if self.easing is not None and not callable(self.easing):
            raise ValueError("easing must be callable")

        if not isinstance(self.flip_on_tap, (bool, np.bool_)):
            raise ValueError(f"flip_on_tap must be True or False, got {self.flip_on_tap!r}")

        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "duration", duration)
        object.__setattr__(self, "time_for_first_part", float(self.time_for_first_part))
        object.__setattr__(self, "process_for_first_part", float(self.process_for_first_part))
        object.__setattr__(self, "perspective", perspective)
        object.__setattr__(self, "axis", coerce_enum(Axis, self.axis, "axis"))
        object.__setattr__(self, "initial_orientation",
                           coerce_enum(Orientation, self.initial_orientation, "initial_orientation"))
        object.__setattr__(self, "back_face", coerce_enum(BackFaceMode, self.back_face, "back_face"))
        object.__setattr__(self, "rotation_sense",
                           coerce_enum(RotationSense, self.rotation_sense, "rotation_sense"))
        object.__setattr__(self, "flip_on_tap", bool(self.flip_on_tap))

    def replace(self, **changes) -> "FlipConfig":
        """Validated copy with some fields changed."""
        return replace(self, **changes)

    def fraction(self, progress):
        """Evaluate the configured easing curve."""
        easing = self.easing if self.easing is not None else two_phase_fraction
        return easing(progress, self.time_for_first_part, self.process_for_first_part)


# ============================================================================
# Flip state and transitions
# ============================================================================

@dataclass
class FlipState:
    """Everything that changes while a panel flips."""
    orientation: Orientation
    angle_offset: float
    progress: float = 0.0
    animating: bool = False


def initial_state(config: FlipConfig) -> FlipState:
    """Idle state at rest on config.initial_orientation."""
    if config.initial_orientation is Orientation.FRONT:
        return FlipState(Orientation.FRONT, 0.0, progress=0.0)
    # The back starts as if one flip had already completed
    return FlipState(Orientation.BACK, HALF_TURN, progress=1.0)


def start_flip(state: FlipState) -> FlipState:
    return replace(state, progress=0.0, animating=True)


def with_progress(state: FlipState, progress: float) -> FlipState:
    return replace(state, progress=float(np.clip(progress, 0.0, 1.0)))


def complete_flip(state: FlipState) -> FlipState:
    """
    Settle on the opposite face.

    The offset gains a half turn and is reduced modulo 2pi, so it is always
    0 (front resting) or pi (back resting).
    """
    offset = float(np.mod(state.angle_offset + HALF_TURN, FULL_TURN))
    return FlipState(state.orientation.opposite(), offset, progress=1.0, animating=False)


def resting_angle(angle_offset: float) -> float:
    return -float(np.mod(angle_offset, FULL_TURN))


def flip_angle(state: FlipState, config: FlipConfig) -> float:
    """
    Signed rotation angle of the panel for the given state.

    Inputs:
    - state: current FlipState.
    - config: FlipConfig supplying the easing and rotation sense.

    Outputs:
    - angle [rad]. In ALTERNATE mode it lies in [-pi, pi]; in CONTINUOUS
      mode in [-2pi, 0].

    Process:
    - Idle panels sit at their resting angle.
    - While animating, the eased fraction scales a half turn whose sign is
      -pi when leaving the front and +pi when leaving the back (ALTERNATE),
      or always -pi (CONTINUOUS), and is added to the resting angle.
    """
    base = resting_angle(state.angle_offset)
    if not state.animating:
        return base

    fraction = float(config.fraction(state.progress))

    if config.rotation_sense is RotationSense.CONTINUOUS:
        return base - fraction * HALF_TURN

    direction = -HALF_TURN if state.orientation is Orientation.FRONT else HALF_TURN
    return float(np.clip(base + fraction * direction, -HALF_TURN, HALF_TURN))
