# -*- coding: utf-8 -*-
import argparse
from datetime import datetime, timedelta, timezone
import logging
import sys
from typing import List, Optional

from .astro import fractional_phase
from .config import load_last_location, save_last_location
from .paths import DEFAULT_SIZE
from .renderer import render_moon_image, render_moon_image_for_date
from .types import Antialiasing, RenderingOptions


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments."""
    parser = argparse.ArgumentParser(description="Moon phase image renderer")
    parser.add_argument("output", type=str, help="Output PNG file")
    parser.add_argument("-p", "--phase", type=float, default=None, help="Phase fraction (0=new, 0.5=full). Default: computed from the current time")
    parser.add_argument("-H", "--hours", type=float, default=0, help="Number of hours to add to current time (default: 0)")
    parser.add_argument("-D", "--days", type=float, default=0, help="Number of days to add to current time (default: 0)")
    parser.add_argument("--lat", type=float, default=None, help="Observer latitude [deg] (default: same as the last run)")
    parser.add_argument("--lon", type=float, default=None, help="Observer longitude [deg] (default: same as the last run)")
    parser.add_argument(
        "-s", "--size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=list(DEFAULT_SIZE),
        help="Image size in pixels (default: %(default)s)",
    )
    parser.add_argument(
        "-a", "--antialiasing",
        choices=[m.value for m in Antialiasing],
        default=Antialiasing.X4.value,
        help="Multisample level, with --phase (default: %(default)s)",
    )
    parser.add_argument("-e", "--exposure", type=float, default=1.0, help="Light gain 0 to 4, with --phase (default: 1.0)")
    parser.add_argument("-r", "--orientation", type=float, default=None, help="Rotate the moon about the view axis [rad], with --phase")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show rendering diagnostics")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the moon phase renderer."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if (args.lat is None) != (args.lon is None):
        print("Specify both --lat and --lon", file=sys.stderr)
        return 2

    size = tuple(args.size)
    if args.phase is not None:
        options = RenderingOptions(
            antialiasing=Antialiasing(args.antialiasing),
            exposure=args.exposure,
            orientation_correction=args.orientation,
        )
        print(f"Phase: {args.phase:.4f}")
        data = render_moon_image(args.phase, size, options)
    else:
        location = (args.lat, args.lon) if args.lat is not None else load_last_location()
        when = datetime.now(timezone.utc) + timedelta(days=args.days, hours=args.hours)
        print(f"Time: {when:%Y-%m-%d %H:%M:%S UTC}")
        print(f"Phase: {fractional_phase(when):.4f}")
        data = render_moon_image_for_date(when, location, size)
        if args.lat is not None:
            save_last_location((args.lat, args.lon))

    with open(args.output, "wb") as f:
        f.write(data)
    print(f"Wrote: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
