"""
Animated GIF of a fitting run.

ClusterAnimator is a ClusterListener: it renders one palette frame per
update and writes the GIF when the fit finishes.
"""

import logging
import random
from pathlib import Path
from typing import List, Sequence, Union

from PIL import Image

from . import config
from .errors import ErrorKind, PageFitError
from .geometry import bounds
from .render import ClusterRenderer
from .types import Coordinate, PageView

logger = logging.getLogger(__name__)


class ClusterAnimator:
    """
    Listener that records each update as a GIF frame.

    Page colours are drawn from a random generator reseeded with the
    same constant for every frame, so a page keeps its colour while
    pages are only ever appended.
    """

    def __init__(
        self,
        path: Union[str, Path],
        coordinates: Sequence[Coordinate],
        width: int = config.ANIMATION_WIDTH,
        height: int = config.ANIMATION_HEIGHT,
        frame_delay_ms: int = config.FRAME_DELAY_MS,
        colour_seed: int = config.COLOUR_SEED,
    ):
        """
        Initialize the animator.

        Args:
            path: Output GIF file
            coordinates: Route being fitted; its bounds set the frame view
            width: Frame width in pixels
            height: Frame height in pixels
            frame_delay_ms: Delay between frames
            colour_seed: Seed for per-frame page colours

        Raises:
            PageFitError: If the output directory does not exist
        """
        self.path = Path(path)
        if not self.path.parent.is_dir():
            raise PageFitError(
                ErrorKind.IO_FAILURE,
                f"output directory does not exist: {self.path.parent}",
                str(self.path),
            )

        self.bounds = bounds(coordinates)
        self.size = (width, height)
        self.frame_delay_ms = frame_delay_ms
        self.colour_seed = colour_seed
        self.frames: List[Image.Image] = []
        self._finished = False

    def updated(self, pages: Sequence[PageView]) -> None:
        """Render the pages as a new frame."""
        if self._finished:
            raise PageFitError(ErrorKind.IO_FAILURE, "animation already written", str(self.path))

        renderer = ClusterRenderer(self.size, self.bounds)
        rng = random.Random(self.colour_seed)

        for page in pages:
            colour = (rng.randrange(256), rng.randrange(256), rng.randrange(256))
            renderer.render(page, colour)

        # stored in palette mode, as written to the GIF
        self.frames.append(renderer.image.quantize())

    def finished(self) -> None:
        """Write the collected frames to the GIF file."""
        if self._finished:
            return
        self._finished = True

        if not self.frames:
            logger.warning("No frames recorded, %s not written", self.path)
            return

        first, *rest = self.frames
        try:
            first.save(
                self.path,
                format="GIF",
                save_all=True,
                append_images=rest,
                duration=self.frame_delay_ms,
                loop=0,
            )
        except OSError as exc:
            raise PageFitError(ErrorKind.IO_FAILURE, f"cannot write animation: {exc}", str(self.path)) from exc

        logger.info("Wrote %d frames to %s", len(self.frames), self.path)
