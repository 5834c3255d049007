"""
Raster rendering of fitted pages.

Draws route points, page rectangles, cluster bounding boxes and page
centres onto a Pillow image. Map y grows northwards, so the transform
flips the y axis when converting to image rows.
"""

from dataclasses import dataclass
from typing import Tuple

from PIL import Image, ImageDraw

from .types import Coordinate, PageView, Rect

RGB = Tuple[int, int, int]

BACKGROUND_COLOUR: RGB = (255, 255, 255)
CENTROID_COLOUR: RGB = (255, 0, 0)
PAGE_BOUNDS_COLOUR: RGB = (0, 0, 0)
CLUSTER_BOUNDS_COLOUR: RGB = (255, 0, 0)

POINT_DIAMETER = 4
CENTROID_DIAMETER = 6


@dataclass(frozen=True)
class MapTransform:
    """
    Uniform scale and offset from map coordinates to image pixels.

    The map origin (min_x, max_y) lands on the image's top-left corner.
    """
    origin_x: float
    origin_y: float
    scale: float

    @staticmethod
    def to_bounds(bounds: Rect, image_width: int, image_height: int) -> "MapTransform":
        """
        Fit map bounds into an image, keeping the aspect ratio.

        A zero-extent axis does not constrain the scale; if both axes
        are degenerate the scale is 1 pixel per map unit.

        Args:
            bounds: Map area to show
            image_width: Image width in pixels
            image_height: Image height in pixels

        Returns:
            New MapTransform
        """
        candidates = []
        if bounds.width > 0:
            candidates.append(image_width / bounds.width)
        if bounds.height > 0:
            candidates.append(image_height / bounds.height)
        scale = min(candidates) if candidates else 1.0

        return MapTransform(origin_x=bounds.x, origin_y=bounds.max_y, scale=scale)

    def to_image(self, point: Coordinate) -> Tuple[float, float]:
        """Convert a map coordinate to (column, row) pixel coordinates."""
        return (
            (point.x - self.origin_x) * self.scale,
            (self.origin_y - point.y) * self.scale,
        )

    def rect_to_image(self, rect: Rect) -> Tuple[float, float, float, float]:
        """Convert a map rectangle to a Pillow (left, top, right, bottom) box."""
        left, bottom = self.to_image(Coordinate(rect.x, rect.y))
        right, top = self.to_image(Coordinate(rect.max_x, rect.max_y))
        return (left, top, right, bottom)


class ClusterRenderer:
    """
    Renders pages onto a single frame.

    The frame is cleared to the background colour on construction.
    """

    def __init__(self, size: Tuple[int, int], bounds: Rect):
        """
        Create a blank frame showing the given map area.

        Args:
            size: (width, height) of the frame in pixels
            bounds: Map area the frame covers
        """
        width, height = size
        self._image = Image.new("RGB", (width, height), BACKGROUND_COLOUR)
        self._draw = ImageDraw.Draw(self._image)
        self.transform = MapTransform.to_bounds(bounds, width, height)

    @property
    def image(self) -> Image.Image:
        return self._image

    def render(self, page: PageView, colour: RGB) -> None:
        """
        Draw one page.

        Points are drawn in the page colour, then the page outline, the
        cluster bounding box and finally the page centre on top.

        Args:
            page: Page to draw
            colour: RGB colour for the page's points
        """
        for point in page.points:
            self._draw_dot(point, POINT_DIAMETER, colour)

        self._draw_rect(page.page_rect, PAGE_BOUNDS_COLOUR)

        if page.cluster_rect is not None:
            self._draw_rect(page.cluster_rect, CLUSTER_BOUNDS_COLOUR)

        self._draw_dot(page.centre, CENTROID_DIAMETER, CENTROID_COLOUR)

    def _draw_dot(self, point: Coordinate, diameter: int, colour: RGB) -> None:
        x, y = self.transform.to_image(point)
        r = diameter / 2.0
        self._draw.ellipse((x - r, y - r, x + r, y + r), fill=colour)

    def _draw_rect(self, rect: Rect, colour: RGB) -> None:
        self._draw.rectangle(self.transform.rect_to_image(rect), outline=colour)
