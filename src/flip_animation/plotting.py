"""
plotting.py

Matplotlib views of sampled flip profiles.
"""

from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .profile import FlipProfile


def plot_flip_profile(profile: FlipProfile, ax: Optional[plt.Axes] = None, title: Optional[str] = None):
    """
    Plot panel angle against time with back-visible spans shaded.

    Inputs:
    - profile: FlipProfile from sample_flip_profile.
    - ax: axes to draw into; a new figure is created when omitted.
    - title: optional axes title.

    Outputs:
    - the Axes drawn into.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 4))

    angle_deg = np.degrees(profile.angle)
    ax.plot(profile.t, angle_deg, color='tab:blue', linewidth=1.8, label='panel angle')

    # Shade every run of samples where the back face is showing
    back = ~profile.front_visible
    edges = np.flatnonzero(np.diff(np.concatenate([[0], back.astype(int), [0]])))
    for start, stop in zip(edges[::2], edges[1::2]):
        t0 = profile.t[start]
        t1 = profile.t[stop - 1]
        ax.axvspan(t0, t1, color='tab:orange', alpha=0.15, linewidth=0)

    for level in (-270, -90, 90, 270):
        if angle_deg.min() - 1 <= level <= angle_deg.max() + 1:
            ax.axhline(level, color='gray', linestyle='--', linewidth=0.8)

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Angle (deg)')
    ax.grid(True, alpha=0.3)
    ax.legend(loc='best')
    if title:
        ax.set_title(title)
    return ax
