"""Sample a flip profile and save it as a plot and/or CSV.

Drives a FlipController at a fixed frame rate for one or more consecutive
flips and records the panel angle and visible face at every tick.

Generates:
    - <out-dir>/flip_profile.png : angle against time, back-visible spans shaded
    - <out-dir>/flip_profile.csv : raw per-tick samples (with --csv)
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Optional

# Add src directory to path for flip_animation imports
_script_dir = Path(__file__).parent.resolve()
_src_dir = _script_dir.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import matplotlib

matplotlib.use("Agg")  # Non interactive backend, the figure is only saved
import matplotlib.pyplot as plt

from flip_animation import DEFAULT_FRAME_DT, FlipConfig, sample_flip_profile
from flip_animation.plotting import plot_flip_profile


def write_profile_csv(profile, path: Path) -> None:
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(["t_s", "flip", "progress", "fraction", "angle_rad", "front_visible"])
        for row in zip(profile.t, profile.flip_index, profile.progress,
                       profile.fraction, profile.angle, profile.front_visible):
            t, k, p, f, a, front = row
            writer.writerow([f"{t:.6f}", int(k), f"{p:.6f}", f"{f:.6f}", f"{a:.6f}", int(front)])


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Flip animation profile")
    parser.add_argument("--axis", default="vertical", choices=["vertical", "horizontal"])
    parser.add_argument("--duration", type=float, default=0.5, help="Flip duration (s)")
    parser.add_argument("--initial", default="front", choices=["front", "back"],
                        help="Initial resting face")
    parser.add_argument("--time-first", type=float, default=0.2,
                        help="Fraction of the duration spent in the fast phase")
    parser.add_argument("--process-first", type=float, default=0.75,
                        help="Fraction of the rotation done in the fast phase")
    parser.add_argument("--sense", default="alternate", choices=["alternate", "continuous"],
                        help="Rotation sense of consecutive flips")
    parser.add_argument("--flips", type=int, default=2, help="Number of consecutive flips")
    parser.add_argument("--dt", type=float, default=DEFAULT_FRAME_DT, help="Tick period (s)")
    parser.add_argument("--out-dir", default="output", help="Output directory")
    parser.add_argument("--csv", action="store_true", help="Also export raw samples")
    parser.add_argument("--no-plots", action="store_true", help="Skip plot generation")
    args = parser.parse_args(argv)

    try:
        config = FlipConfig(
            duration=args.duration,
            axis=args.axis,
            initial_orientation=args.initial,
            time_for_first_part=args.time_first,
            process_for_first_part=args.process_first,
            rotation_sense=args.sense,
        )
    except ValueError as exc:
        parser.error(str(exc))

    profile = sample_flip_profile(config, n_flips=args.flips, dt=args.dt)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    print(f"Sampled {len(profile)} ticks over {args.flips} flip(s), "
          f"final face: {'front' if profile.front_visible[-1] else 'back'}")

    if args.csv:
        csv_path = out_dir / "flip_profile.csv"
        write_profile_csv(profile, csv_path)
        print(f"Saved {csv_path}")

    if not args.no_plots:
        fig, ax = plt.subplots(figsize=(8, 4))
        plot_flip_profile(profile, ax=ax,
                          title=f"{args.axis} flip, t1={args.time_first}, p1={args.process_first}")
        plot_path = out_dir / "flip_profile.png"
        plt.savefig(plot_path, dpi=200, bbox_inches="tight", facecolor="white")
        plt.close(fig)
        print(f"Saved {plot_path}")


if __name__ == "__main__":
    main()
