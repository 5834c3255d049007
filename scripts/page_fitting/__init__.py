"""
Route Page Fitting Module

Covers an ordered route with the fewest fixed-size map pages it can
find, choosing each page's position and orientation, and orders the
pages along the route.
"""

from .types import Coordinate, Rect, Orientation, PageSpec, PageRecord, FitStats
from .errors import ErrorKind, PageFitError
from .geometry import bounds, rect_centre, rect_from_centre, contains
from .page import Page
from .listener import ClusterListener, NullListener, ListenerChain
from .fitting import PageFitter, fit_pages
from .coordinate_file import load_coordinates, save_coordinates, save_pages, load_pages
from .animation import ClusterAnimator

__all__ = [
    "Coordinate",
    "Rect",
    "Orientation",
    "PageSpec",
    "PageRecord",
    "FitStats",
    "ErrorKind",
    "PageFitError",
    "bounds",
    "rect_centre",
    "rect_from_centre",
    "contains",
    "Page",
    "ClusterListener",
    "NullListener",
    "ListenerChain",
    "PageFitter",
    "fit_pages",
    "load_coordinates",
    "save_coordinates",
    "save_pages",
    "load_pages",
    "ClusterAnimator",
]
