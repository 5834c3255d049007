#!/usr/bin/env python3
"""
Route Page Fitting Tool

Covers a route with fixed-size map pages and writes the page centres,
sizes and orientations, optionally with an animation of the fit.

Usage:
    python fit_route_pages.py <route.txt> [clusters.txt] [--page=A3] [--scale=25000]
                              [--animation=fit.gif] [--seed=42]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from page_fitting import (
    ClusterAnimator,
    PageFitError,
    PageFitter,
    PageSpec,
    load_coordinates,
    save_pages,
)
from page_fitting import config
from page_fitting.output import print_fit_stats


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Cover a route with the fewest fixed-size map pages"
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=str(config.ROUTE_PATH),
        help=f"Route coordinate file (default: {config.ROUTE_PATH})",
    )
    parser.add_argument(
        "output",
        nargs="?",
        help="Page result file (default: <input>-clusters.txt)",
    )
    parser.add_argument(
        "--page",
        default=config.DEFAULT_PAGE,
        choices=sorted(config.PAGE_SIZES),
        help=f"Paper size (default: {config.DEFAULT_PAGE})",
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=config.DEFAULT_SCALE,
        help=f"Map scale denominator (default: {config.DEFAULT_SCALE:g})",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=config.DEFAULT_REFINEMENT_ITERATIONS,
        help=f"Refinement passes per added page (default: {config.DEFAULT_REFINEMENT_ITERATIONS})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible fits",
    )
    parser.add_argument(
        "--delimiter",
        default=config.DEFAULT_DELIMITER,
        help=f"Field delimiter for input and output files (default: {config.DEFAULT_DELIMITER!r})",
    )
    parser.add_argument(
        "--animation",
        metavar="GIF",
        help="Write an animated GIF of the fit to this file",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=config.ANIMATION_WIDTH,
        help=f"Animation width in pixels (default: {config.ANIMATION_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=config.ANIMATION_HEIGHT,
        help=f"Animation height in pixels (default: {config.ANIMATION_HEIGHT})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress of the fit",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = input_path.with_name(input_path.stem + "-clusters.txt")

    print(f"Input: {input_path}")
    print(f"Output: {output_path}")
    print(f"Page: {args.page} at 1:{args.scale:g}")
    print()

    try:
        coordinates = load_coordinates(input_path, args.delimiter)
        print(f"Loaded {len(coordinates)} coordinates")

        page_spec = PageSpec.from_preset(args.page, args.scale)

        animator = None
        if args.animation:
            animator = ClusterAnimator(args.animation, coordinates, args.width, args.height)

        print("\nFitting pages...")
        fitter = PageFitter(
            coordinates,
            page_spec,
            refinement_iterations=args.iterations,
            listener=animator,
            seed=args.seed,
        )
        pages = fitter.fit()

        print("\nFitting results:")
        print_fit_stats(fitter.stats)

        print(f"\nWriting pages to {output_path}...")
        save_pages(output_path, pages, args.delimiter)
        if animator is not None:
            print(f"Animation written to {animator.path}")

    except PageFitError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
