"""CLI entry point for liquidglass."""

import argparse
import logging
import sys
from pathlib import Path

from . import generate
from .config import ConfigurationError
from .logging_config import setup_logging
from .profiles import PROFILES, get_profile


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate liquid-glass displacement and specular maps"
    )
    parser.add_argument("width", type=float, help="Object width in CSS pixels")
    parser.add_argument("height", type=float, help="Object height in CSS pixels")
    parser.add_argument(
        "--radius", "-r", type=float, default=None,
        help="Corner radius (default: half the shorter side)"
    )
    parser.add_argument(
        "--canvas", nargs=2, type=float, default=None,
        metavar=("W", "H"),
        help="Canvas size if larger than the object"
    )
    parser.add_argument(
        "--bezel-width", "-b", type=float, default=20.0,
        help="Width of the curved border band (default: 20)"
    )
    parser.add_argument(
        "--thickness", "-t", type=float, default=None,
        help="Glass thickness (default: 40)"
    )
    parser.add_argument(
        "--refractive-index", "-n", type=float, default=None,
        help="Refractive index of the glass, > 1 (default: 1.5)"
    )
    parser.add_argument(
        "--profile", "-p", choices=sorted(PROFILES), default="convex",
        help="Bezel profile (default: convex)"
    )
    parser.add_argument(
        "--segments", type=int, default=None,
        help="Outline chords per corner for the specular layer (default: 50)"
    )
    parser.add_argument(
        "--dpr", type=float, default=1.0,
        help="Device pixel ratio (default: 1)"
    )
    parser.add_argument(
        "--output-dir", "-o", default=".",
        help="Directory for displacement.png and specular.png"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log each pipeline stage"
    )

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    radius = args.radius
    if radius is None:
        radius = min(args.width, args.height) / 2

    kwargs = {"bezel_height_fn": get_profile(args.profile)}
    if args.thickness is not None:
        kwargs["glass_thickness"] = args.thickness
    if args.refractive_index is not None:
        kwargs["refractive_index"] = args.refractive_index
    if args.segments is not None:
        kwargs["specular_segments"] = args.segments

    canvas_w, canvas_h = args.canvas if args.canvas else (None, None)
    try:
        inputs = generate(
            args.width, args.height, radius,
            canvas_width=canvas_w,
            canvas_height=canvas_h,
            bezel_width=args.bezel_width,
            dpr=args.dpr,
            **kwargs,
        )
    except ConfigurationError as exc:
        parser.error(str(exc))

    output = Path(args.output_dir)
    output.mkdir(parents=True, exist_ok=True)
    if inputs.displacement_map.width == 0 or inputs.displacement_map.height == 0:
        print("Canvas has zero area, nothing written", file=sys.stderr)
        return 1

    displacement_path = output / "displacement.png"
    specular_path = output / "specular.png"
    inputs.displacement_map.save(displacement_path)
    w, h = inputs.displacement_map.size
    print(f"Saved displacement map ({w}x{h}) to {displacement_path}")

    if len(inputs.specular_map):
        inputs.specular_map.save(specular_path)
        print(f"Saved specular map to {specular_path}")
    print(f"Displacement scale: {inputs.scale:.4f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
