"""
Coverage-driven page fitting.

Pages are added one at a time, each seeded on a random route point
that no page covers yet. After every addition a fixed number of
refinement rounds reassign points to their nearest page and re-centre
each page on the bounding box of its points. Fitting stops as soon as
every route point lies inside some page rectangle, and the pages are
then ordered along the route.
"""

import logging
import math
import random
from typing import List, Optional, Sequence, Tuple

from .errors import ErrorKind, PageFitError
from .geometry import rect_from_centre
from .listener import ClusterListener, NullListener
from .page import Page
from .types import Coordinate, FitStats, PageSpec

logger = logging.getLogger(__name__)


def _page_extents(page_spec: PageSpec) -> List[Tuple[float, float]]:
    """Scaled (width, height) of the page in portrait and landscape."""
    portrait = page_spec.copy()
    portrait.set_portrait()
    landscape = page_spec.copy()
    landscape.set_landscape()
    return [
        (portrait.scaled_width, portrait.scaled_height),
        (landscape.scaled_width, landscape.scaled_height),
    ]


class PageFitter:
    """
    Fits a set of fixed-size pages over an ordered route.

    The fitter is single use: construct it, call fit(), read the result.
    """

    def __init__(
        self,
        coordinates: Sequence[Coordinate],
        page_spec: PageSpec,
        refinement_iterations: int = 10,
        listener: Optional[ClusterListener] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        notify_each_refinement: bool = False,
    ):
        """
        Initialize and validate a fitting run.

        Args:
            coordinates: Route points in map units, in route order
            page_spec: Template page size; every page gets its own copy
            refinement_iterations: Assign+refresh passes after each new page
            listener: Optional observer of intermediate states
            seed: Seed for a private random.Random (ignored if rng is given)
            rng: Random source used to pick seed points
            notify_each_refinement: Notify the listener after every
                                    refinement pass, not just the last one

        Raises:
            PageFitError: If the coordinates or parameters are invalid, or if
                          a page centred on some coordinate cannot contain it
                          (page extent below float resolution at that point)
        """
        if not coordinates:
            raise PageFitError(ErrorKind.INVALID_INPUT, "at least one coordinate is required", "coordinates")

        for index, coordinate in enumerate(coordinates):
            if not (math.isfinite(coordinate.x) and math.isfinite(coordinate.y)):
                raise PageFitError(
                    ErrorKind.INVALID_INPUT,
                    f"coordinate {coordinate.as_tuple()} is not finite",
                    index,
                )

        extents = _page_extents(page_spec)
        for index, coordinate in enumerate(coordinates):
            if not any(rect_from_centre(coordinate, w, h).contains(coordinate) for w, h in extents):
                raise PageFitError(
                    ErrorKind.DEGENERATE_COVERAGE,
                    f"a {page_spec.page_id} page at scale {page_spec.scale:g} centred on "
                    f"{coordinate.as_tuple()} does not contain it",
                    index,
                )

        if isinstance(refinement_iterations, bool) or not isinstance(refinement_iterations, int):
            raise PageFitError(
                ErrorKind.INVALID_INPUT,
                f"must be an integer, got {refinement_iterations!r}",
                "refinement_iterations",
            )
        if refinement_iterations < 1:
            raise PageFitError(
                ErrorKind.INVALID_INPUT,
                f"must be at least 1, got {refinement_iterations}",
                "refinement_iterations",
            )

        self.coordinates = coordinates
        self.page_spec = page_spec
        self.refinement_iterations = refinement_iterations
        self.listener: ClusterListener = listener if listener is not None else NullListener()
        self.rng = rng if rng is not None else random.Random(seed)
        self.notify_each_refinement = notify_each_refinement

        self.pages: List[Page] = []
        self.stats: Optional[FitStats] = None
        self._refinement_steps = 0

    def uncovered(self) -> List[Coordinate]:
        """
        Find route points that no page rectangle contains.

        Returns:
            Uncovered coordinates, in input order
        """
        return [c for c in self.coordinates if not any(page.covers(c) for page in self.pages)]

    def assign_all(self) -> None:
        """
        Assign every route point to its nearest page.

        Distance ties go to the page created first.
        """
        for page in self.pages:
            page.points.clear()

        for coordinate in self.coordinates:
            nearest: Optional[Page] = None
            nearest_distance = math.inf

            for page in self.pages:
                distance = page.distance_squared(coordinate)
                if distance < nearest_distance:
                    nearest_distance = distance
                    nearest = page

            if nearest is not None:
                nearest.points.append(coordinate)

    def refine(self) -> None:
        """Run one refinement pass: assign points, then refresh every page."""
        self.assign_all()
        for page in self.pages:
            page.refresh()
        self._refinement_steps += 1

    def add_page(self, uncovered: Sequence[Coordinate]) -> Page:
        """
        Add a page seeded on a random uncovered point.

        Args:
            uncovered: Candidate seed points

        Returns:
            The new page
        """
        seed_point = self.rng.choice(uncovered)
        page = Page(seed_point, self.page_spec.copy())
        self.pages.append(page)

        logger.debug(
            "Added page %d at (%g, %g), %d points uncovered",
            len(self.pages),
            seed_point.x,
            seed_point.y,
            len(uncovered),
        )
        return page

    def fit(self) -> List[Page]:
        """
        Cover every route point with pages and order them along the route.

        Returns:
            Pages sorted by the mean input position of their points;
            pages with equal keys keep their creation order
        """
        if self.stats is not None:
            raise PageFitError(ErrorKind.INVALID_INPUT, "fit() has already been run", "fitter")

        logger.info(
            "Fitting %s pages at scale %g to %d coordinates",
            self.page_spec.page_id,
            self.page_spec.scale,
            len(self.coordinates),
        )

        outer_iterations = 0
        uncovered = self.uncovered()

        while uncovered:
            self.add_page(uncovered)
            outer_iterations += 1

            for step in range(self.refinement_iterations):
                self.refine()

                last_step = step == self.refinement_iterations - 1
                if last_step or self.notify_each_refinement:
                    self.listener.updated(list(self.pages))

            uncovered = self.uncovered()
            logger.debug(
                "Round %d: %d pages, %d points uncovered",
                outer_iterations,
                len(self.pages),
                len(uncovered),
            )

        for page in self.pages:
            page.compute_order_key(self.coordinates)

        # sorted() is stable, so equal keys keep creation order
        sorted_pages = sorted(self.pages, key=lambda p: p.order_key)

        self.stats = FitStats.create(
            sorted_pages,
            coordinate_count=len(self.coordinates),
            outer_iterations=outer_iterations,
            refinement_steps=self._refinement_steps,
        )
        logger.info(
            "Covered %d coordinates with %d pages (%d landscape)",
            self.stats.coordinate_count,
            self.stats.page_count,
            self.stats.landscape_count,
        )

        self.listener.updated(list(sorted_pages))
        self.listener.finished()

        return sorted_pages


def fit_pages(
    coordinates: Sequence[Coordinate],
    page_spec: PageSpec,
    refinement_iterations: int = 10,
    listener: Optional[ClusterListener] = None,
    seed: Optional[int] = None,
) -> List[Page]:
    """
    Fit pages over a route in one call.

    Args:
        coordinates: Route points in map units, in route order
        page_spec: Template page size
        refinement_iterations: Assign+refresh passes after each new page
        listener: Optional observer of intermediate states
        seed: Random seed for reproducible results

    Returns:
        Pages ordered along the route
    """
    fitter = PageFitter(
        coordinates,
        page_spec,
        refinement_iterations=refinement_iterations,
        listener=listener,
        seed=seed,
    )
    return fitter.fit()
