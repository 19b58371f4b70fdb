"""
Basic Usage Examples for the Flip Animation Core

This script demonstrates how a host drives a FlipController.
"""

import numpy as np
from flip_animation import (
    Axis,
    FlipConfig,
    FlipController,
    Orientation,
    flip_fraction,
    is_front_visible,
    sample_flip_profile,
)


def example_1_easing_curve():
    """Example 1: Inspect the two-phase easing curve"""
    print("="*60)
    print("Example 1: Two-Phase Easing")
    print("="*60)

    t_first, p_first = 0.2, 0.75
    print(f"\nFast phase: {t_first*100:.0f}% of the time covers {p_first*100:.0f}% of the turn")
    print(f"\n{'Progress':<10} {'Fraction':<10} {'Angle (deg)':<12} {'Front?'}")
    print("-"*45)
    for p in np.linspace(0.0, 1.0, 11):
        f = flip_fraction(p, t_first, p_first)
        angle = -f * np.pi
        print(f"{p:<10.2f} {f:<10.3f} {np.degrees(angle):<12.1f} {is_front_visible(angle)}")


def example_2_host_loop():
    """Example 2: Drive a controller from a 60 Hz frame clock"""
    print("\n" + "="*60)
    print("Example 2: Host Frame Loop")
    print("="*60)

    controller = FlipController(FlipConfig(axis=Axis.HORIZONTAL, duration=0.5))
    swaps = []

    def on_frame(frame):
        if swaps and swaps[-1] == frame.is_front_visible:
            return
        swaps.append(frame.is_front_visible)
        face = "front" if frame.is_front_visible else "back"
        print(f"  progress={frame.progress:.3f}  angle={np.degrees(frame.angle):7.1f} deg  showing {face}")

    controller.subscribe(on_frame, replay=True)

    done = controller.flip()
    dt = 1.0 / 60.0
    ticks = 0
    while not done.done():
        controller.advance(dt)
        ticks += 1

    print(f"\n  Finished after {ticks} frames, resting on {done.result().value}")


def example_3_repeated_flips():
    """Example 3: Consecutive flips return to the starting face"""
    print("\n" + "="*60)
    print("Example 3: Repeated Flips")
    print("="*60)

    config = FlipConfig(initial_orientation=Orientation.FRONT)
    profile = sample_flip_profile(config, n_flips=4)
    for k in range(1, 5):
        last = np.flatnonzero(profile.flip_index == k)[-1]
        face = "front" if profile.front_visible[last] else "back"
        print(f"  after flip {k}: {face}")


if __name__ == "__main__":
    example_1_easing_curve()
    example_2_host_loop()
    example_3_repeated_flips()
