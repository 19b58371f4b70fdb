"""
Easing Module
=============

Maps linear animation progress onto the amount of rotation completed so far
(the "flip fraction"). The default curve is a two-phase ramp: a fast first
part that covers most of the angular travel, followed by a slow settle.

Available Curves:
-----------------
- two_phase_fraction: two linear segments meeting at time_for_first_part
- linear_fraction: single segment reference curve (progress == fraction)

Both accept a scalar or a numpy array of progress values and return the same
kind. Progress outside [0, 1] is clipped before evaluation.
"""

from __future__ import annotations

import numpy as np


# ==============================================================================
# PARAMETER VALIDATION
# ==============================================================================

def validate_fraction_parameters(time_for_first_part, process_for_first_part):
    """
    Check the two shape parameters of the two-phase curve.

    Both values must lie strictly inside (0, 1). At either bound one of the
    segments collapses and its slope divides by zero.

    Raises
    ------
    ValueError
        If either value is not a finite number strictly inside (0, 1).
    """
    for name, value in (
        ("time_for_first_part", time_for_first_part),
        ("process_for_first_part", process_for_first_part),
    ):
        value = float(value)
        if not np.isfinite(value) or not 0.0 < value < 1.0:
            raise ValueError(f"{name} must be strictly between 0 and 1, got {value}")


# ==============================================================================
# EASING CURVES
# ==============================================================================

def two_phase_fraction(progress, time_for_first_part, process_for_first_part):
    """
    Two-phase flip fraction.

    During the first ``time_for_first_part`` of the animation the panel covers
    ``process_for_first_part`` of its rotation; the remainder is spread over
    the rest of the time.

    Parameters
    ----------
    progress : float or ndarray
        Normalized animation time in [0, 1].
    time_for_first_part : float
        Fraction of the duration spent in the fast phase, in (0, 1).
    process_for_first_part : float
        Fraction of the rotation completed in the fast phase, in (0, 1).

    Returns
    -------
    fraction : float or ndarray
        Rotation completed so far, in [0, 1].

    Notes
    -----
    The curve is piecewise linear::

        p < t :  f = p / t * P
        p >= t:  f = P + (p - t) / (1 - t) * (1 - P)

    so f(0) = 0, f(1) = 1, it is continuous at p = t and strictly increasing
    because both slopes (P / t and (1 - P) / (1 - t)) are positive.

    Examples
    --------
    >>> two_phase_fraction(0.1, 0.2, 0.75)
    0.375
    """
    validate_fraction_parameters(time_for_first_part, process_for_first_part)
    t_first = float(time_for_first_part)
    p_first = float(process_for_first_part)

    p = np.clip(np.asarray(progress, dtype=float), 0.0, 1.0)

    # Fast phase and settle phase evaluated everywhere, then selected
    fast = p / t_first * p_first
    settle = p_first + (p - t_first) / (1.0 - t_first) * (1.0 - p_first)
    fraction = np.where(p < t_first, fast, settle)

    if fraction.ndim == 0:
        return float(fraction)
    return fraction


def linear_fraction(progress, time_for_first_part=None, process_for_first_part=None):
    """Constant angular velocity; the shape parameters are ignored."""
    p = np.clip(np.asarray(progress, dtype=float), 0.0, 1.0)
    if p.ndim == 0:
        return float(p)
    return p


# Name used by FlipController when no override is configured
flip_fraction = two_phase_fraction


def get_easing_info():
    """
    Return a dictionary describing the bundled easing curves.

    Examples
    --------
    >>> for name, details in get_easing_info().items():
    ...     print(f"{name}: {details['description']}")
    """
    return {
        'two_phase': {
            'function': two_phase_fraction,
            'segments': 2,
            'description': 'Fast first part then slow settle',
            'parameters': ['time_for_first_part', 'process_for_first_part'],
        },
        'linear': {
            'function': linear_fraction,
            'segments': 1,
            'description': 'Constant angular velocity reference',
            'parameters': [],
        },
    }
