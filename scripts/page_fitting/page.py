"""
A single map page being fitted to part of a route.

A Page is a k-means style cluster: it has a centre, the points most
recently assigned to it, and a page rectangle of fixed paper size
placed on that centre in whichever orientation holds more points.
"""

import math
from typing import Dict, List, Optional, Sequence

from .geometry import bounds, count_contained, rect_from_centre
from .types import Coordinate, Orientation, PageRecord, PageSpec, Rect


class Page:
    """
    A page placement and the route points currently assigned to it.

    The page owns its PageSpec; pass a copy when several pages are
    created from the same template.
    """

    def __init__(self, centre: Coordinate, spec: PageSpec):
        """
        Initialize a page centred on a coordinate.

        The page rectangle is placed immediately so that a new page
        counts towards coverage before its first refresh.

        Args:
            centre: Initial centre, usually an uncovered route point
            spec: Page size owned by this page
        """
        self.centre = centre
        self.spec = spec
        self.points: List[Coordinate] = []
        self.cluster_rect: Optional[Rect] = None
        self.page_rect: Rect = rect_from_centre(centre, spec.scaled_width, spec.scaled_height)
        self.order_key: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"Page(centre=({self.centre.x:g}, {self.centre.y:g}), "
            f"{self.spec.page_id} {self.orientation.value}, points={len(self.points)})"
        )

    @property
    def orientation(self) -> Orientation:
        return self.spec.orientation

    @property
    def page_id(self) -> str:
        return self.spec.page_id

    @property
    def scale(self) -> float:
        return self.spec.scale

    def distance_squared(self, point: Coordinate) -> float:
        """Squared distance from the page centre to a point."""
        return self.centre.distance_squared_to(point)

    def covers(self, point: Coordinate) -> bool:
        """Check if the page rectangle contains a point."""
        return self.page_rect.contains(point)

    def refresh(self) -> None:
        """
        Re-centre the page on its assigned points and pick its orientation.

        With no assigned points the centre stays where it is; the
        orientation choice then sees no points and falls back to portrait.
        """
        if self.points:
            self.cluster_rect = bounds(self.points)
            self.centre = self.cluster_rect.centre()

        self.choose_orientation()

    def choose_orientation(self) -> None:
        """
        Commit the orientation whose rectangle holds more assigned points.

        Portrait wins ties, including the case of no points at all.
        """
        self.spec.set_portrait()
        portrait_rect = rect_from_centre(self.centre, self.spec.scaled_width, self.spec.scaled_height)

        self.spec.set_landscape()
        landscape_rect = rect_from_centre(self.centre, self.spec.scaled_width, self.spec.scaled_height)

        in_portrait = count_contained(portrait_rect, self.points)
        in_landscape = count_contained(landscape_rect, self.points)

        if in_portrait >= in_landscape:
            self.spec.set_portrait()
            self.page_rect = portrait_rect
        else:
            self.spec.set_landscape()
            self.page_rect = landscape_rect

    def compute_order_key(self, all_coordinates: Sequence[Coordinate]) -> float:
        """
        Set the order key to the mean input position of the assigned points.

        Points are located by identity; a coordinate object that appears
        more than once in the input resolves to its first position. A page
        with no points gets +inf so it sorts after every populated page.

        Args:
            all_coordinates: The full input sequence the points came from

        Returns:
            The new order key
        """
        if not self.points:
            self.order_key = math.inf
            return self.order_key

        positions: Dict[int, int] = {}
        for index, coordinate in enumerate(all_coordinates):
            positions.setdefault(id(coordinate), index)

        total = sum(positions[id(p)] for p in self.points)
        self.order_key = total / len(self.points)
        return self.order_key

    def to_record(self) -> PageRecord:
        """Snapshot of the page as an output record."""
        return PageRecord(
            centre_x=self.centre.x,
            centre_y=self.centre.y,
            page_id=self.spec.page_id,
            orientation=self.spec.orientation,
            scale=self.spec.scale,
        )
