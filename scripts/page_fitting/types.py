"""
Data types for page fitting.

Coordinates, rectangles and page records are frozen dataclasses.
PageSpec is the one mutable type: its orientation is chosen per page
while fitting, so every page owns its own copy.
"""

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import List, Optional, Protocol, Sequence, Tuple

from . import config
from .errors import ErrorKind, PageFitError


@dataclass(frozen=True)
class Coordinate:
    """
    2D point in map units.

    Map units are the same units as scaled page dimensions
    (metres for the built-in paper sizes).
    """
    x: float
    y: float

    def distance_squared_to(self, other: "Coordinate") -> float:
        """Squared Euclidean distance to another coordinate."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def as_tuple(self) -> Tuple[float, float]:
        """Return coordinates as a tuple."""
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle given by its lower-left corner and extent.

    Containment is half-open: a point on the max_x or max_y edge is
    outside, a point on the x or y edge is inside.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def centre(self) -> Coordinate:
        """Centre point of the rectangle."""
        return Coordinate(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def contains(self, point: Coordinate) -> bool:
        """Half-open containment test, [x, max_x) by [y, max_y)."""
        return self.x <= point.x < self.max_x and self.y <= point.y < self.max_y


class Orientation(Enum):
    """Which paper dimension runs horizontally in map space."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @property
    def is_landscape(self) -> bool:
        return self is Orientation.LANDSCAPE

    def to_flag(self) -> str:
        """Result file convention: "true" for LANDSCAPE, "false" for PORTRAIT."""
        return "true" if self.is_landscape else "false"

    @staticmethod
    def from_flag(flag: str) -> "Orientation":
        """Parse the result file orientation flag."""
        value = flag.strip().lower()
        if value == "true":
            return Orientation.LANDSCAPE
        if value == "false":
            return Orientation.PORTRAIT
        raise PageFitError(
            ErrorKind.PARSE_FAILURE,
            f"orientation flag must be 'true' or 'false', got {flag!r}",
            "orientation",
        )


@dataclass
class PageSpec:
    """
    Paper size, map scale and orientation of a single page.

    unscaled_width and unscaled_height are the paper dimensions in
    portrait form; scale converts paper units to map units. Only the
    orientation changes during fitting.
    """
    unscaled_width: float
    unscaled_height: float
    scale: float
    page_id: str
    orientation: Orientation = field(default=Orientation.PORTRAIT)

    def __post_init__(self):
        for name in ("unscaled_width", "unscaled_height", "scale"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise PageFitError(
                    ErrorKind.INVALID_INPUT,
                    f"must be a positive finite number, got {value!r}",
                    name,
                )
        if not self.page_id:
            raise PageFitError(ErrorKind.INVALID_INPUT, "must not be empty", "page_id")

        if self.unscaled_width > self.unscaled_height:
            self.unscaled_width, self.unscaled_height = self.unscaled_height, self.unscaled_width

    @property
    def scaled_width(self) -> float:
        """Horizontal extent in map units for the current orientation."""
        if self.orientation is Orientation.PORTRAIT:
            return self.unscaled_width * self.scale
        return self.unscaled_height * self.scale

    @property
    def scaled_height(self) -> float:
        """Vertical extent in map units for the current orientation."""
        if self.orientation is Orientation.PORTRAIT:
            return self.unscaled_height * self.scale
        return self.unscaled_width * self.scale

    def set_portrait(self) -> None:
        self.orientation = Orientation.PORTRAIT

    def set_landscape(self) -> None:
        self.orientation = Orientation.LANDSCAPE

    def copy(self) -> "PageSpec":
        """Independent copy, so orientation changes do not leak between pages."""
        return PageSpec(
            unscaled_width=self.unscaled_width,
            unscaled_height=self.unscaled_height,
            scale=self.scale,
            page_id=self.page_id,
            orientation=self.orientation,
        )

    @staticmethod
    def from_preset(name: str, scale: float) -> "PageSpec":
        """
        Build a portrait PageSpec from a named paper size.

        Args:
            name: Key of config.PAGE_SIZES, case insensitive
            scale: Map scale denominator (e.g. 25000 for 1:25000)

        Returns:
            New PageSpec

        Raises:
            PageFitError: If the paper size is unknown
        """
        key = name.upper()
        if key not in config.PAGE_SIZES:
            known = ", ".join(sorted(config.PAGE_SIZES))
            raise PageFitError(
                ErrorKind.INVALID_INPUT,
                f"unknown paper size {name!r} (known: {known})",
                "page_id",
            )
        width, height = config.PAGE_SIZES[key]
        return PageSpec(width, height, scale, key)

    @staticmethod
    def a3(scale: float) -> "PageSpec":
        return PageSpec.from_preset("A3", scale)

    @staticmethod
    def a4(scale: float) -> "PageSpec":
        return PageSpec.from_preset("A4", scale)


class PageView(Protocol):
    """
    Read-only view of a page, as seen by listeners and renderers.

    Listeners must not mutate a page or keep references to it after
    the callback returns.
    """

    @property
    def centre(self) -> Coordinate: ...

    @property
    def orientation(self) -> Orientation: ...

    @property
    def points(self) -> List[Coordinate]: ...

    @property
    def cluster_rect(self) -> Optional[Rect]: ...

    @property
    def page_rect(self) -> Rect: ...

    @property
    def order_key(self) -> Optional[float]: ...


@dataclass(frozen=True)
class PageRecord:
    """
    Output record of one fitted page.

    This is what gets written to the cluster result file.
    """
    centre_x: float
    centre_y: float
    page_id: str
    orientation: Orientation
    scale: float

    def to_fields(self) -> Tuple[str, ...]:
        """Render the five result file fields."""
        return (
            repr(self.centre_x),
            repr(self.centre_y),
            self.page_id,
            self.orientation.to_flag(),
            repr(self.scale),
        )


@dataclass(frozen=True)
class FitStats:
    """Statistics about a completed fit."""
    coordinate_count: int
    page_count: int
    landscape_count: int
    empty_page_count: int
    outer_iterations: int
    refinement_steps: int

    @staticmethod
    def create(
        pages: Sequence[PageView],
        coordinate_count: int,
        outer_iterations: int,
        refinement_steps: int,
    ) -> "FitStats":
        """
        Factory method computing counts from the fitted pages.

        Args:
            pages: Fitted pages
            coordinate_count: Number of input coordinates
            outer_iterations: Number of pages added by the coverage loop
            refinement_steps: Total assign+refresh passes performed

        Returns:
            New FitStats
        """
        return FitStats(
            coordinate_count=coordinate_count,
            page_count=len(pages),
            landscape_count=sum(1 for p in pages if p.orientation.is_landscape),
            empty_page_count=sum(1 for p in pages if not p.points),
            outer_iterations=outer_iterations,
            refinement_steps=refinement_steps,
        )
