"""
Console reporting for fitting runs.
"""

from .types import FitStats


def print_fit_stats(stats: FitStats, label: str = "") -> None:
    """
    Print statistics about a completed fit.

    Args:
        stats: FitStats to report on
        label: Optional label for the output
    """
    prefix = f"{label}: " if label else ""

    print(f"{prefix}Input coordinates: {stats.coordinate_count}")
    print(f"{prefix}Pages: {stats.page_count}")
    print(f"{prefix}Landscape pages: {stats.landscape_count}")
    print(f"{prefix}Empty pages: {stats.empty_page_count}")
    print(f"{prefix}Coverage rounds: {stats.outer_iterations}")
    print(f"{prefix}Refinement passes: {stats.refinement_steps}")

    density = (
        stats.page_count / stats.coordinate_count * 100
        if stats.coordinate_count > 0
        else 0
    )
    print(f"{prefix}Pages per 100 coordinates: {density:.1f}")
