"""
Flip Animation Core

Timing, rotation and visibility logic for a two-sided panel that flips about
a horizontal or vertical axis with a two-phase (snap then settle) angular
velocity.

This package provides the following modules:

    easing      : two-phase flip fraction and a linear reference curve
    state       : FlipConfig, FlipState, enums and the angle derivation
    transforms  : perspective + rotation matrices for both faces
    visibility  : which face is turned toward the viewer
    channel     : FlipFrame and the change-detecting publish channel
    controller  : FlipController state machine driven by host ticks
    profile     : fixed-step sampling of whole flips
    plotting    : matplotlib view of a sampled profile
"""

__version__ = "0.1.0"

# ============================================================================
# Pure derivations
# ============================================================================
from .easing import (
    flip_fraction,
    two_phase_fraction,
    linear_fraction,
    validate_fraction_parameters,
)
from .transforms import (
    build_transforms,
    perspective_matrix,
    rotation_matrix,
    apply_transform,
    face_normal,
)
from .visibility import is_front_visible

# ============================================================================
# Configuration and state
# ============================================================================
from .state import (
    Axis,
    Orientation,
    BackFaceMode,
    RotationSense,
    FlipConfig,
    FlipState,
    flip_angle,
)

# ============================================================================
# Controller and tooling
# ============================================================================
from .channel import FlipFrame, FrameChannel
from .controller import FlipController
from .profile import DEFAULT_FRAME_DT, FlipProfile, run_flip, sample_flip_profile

# plotting is not imported here so that importing the core does not pull in
# a matplotlib backend.

__all__ = [
    "__version__",
    # Easing
    "flip_fraction",
    "two_phase_fraction",
    "linear_fraction",
    "validate_fraction_parameters",
    # Transforms
    "build_transforms",
    "perspective_matrix",
    "rotation_matrix",
    "apply_transform",
    "face_normal",
    # Visibility
    "is_front_visible",
    # State
    "Axis",
    "Orientation",
    "BackFaceMode",
    "RotationSense",
    "FlipConfig",
    "FlipState",
    "flip_angle",
    # Controller
    "FlipFrame",
    "FrameChannel",
    "FlipController",
    # Profiles
    "DEFAULT_FRAME_DT",
    "FlipProfile",
    "run_flip",
    "sample_flip_profile",
]
