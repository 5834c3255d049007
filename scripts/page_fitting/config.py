"""
Defaults for page fitting runs.

File locations can be overridden with environment variables; everything
else is a plain module constant that the CLI exposes as a flag.
"""

import os
from pathlib import Path

ROUTE_PATH = Path(os.getenv("PAGEFIT_ROUTE", "resources/route1.txt"))
CLUSTERS_PATH = Path(os.getenv("PAGEFIT_CLUSTERS", "resources/route1clusters.txt"))
ANIMATION_PATH = Path(os.getenv("PAGEFIT_ANIMATION", "resources/animation1.gif"))

# Paper sizes in metres, portrait canonical form (width <= height)
PAGE_SIZES = {
    "A3": (0.297, 0.420),
    "A4": (0.190, 0.277),
}

DEFAULT_PAGE = "A3"
DEFAULT_SCALE = 25000.0
DEFAULT_REFINEMENT_ITERATIONS = 10
DEFAULT_DELIMITER = ","

ANIMATION_WIDTH = 1200
ANIMATION_HEIGHT = 800
FRAME_DELAY_MS = 150

# Fixed so page colours stay stable from frame to frame
COLOUR_SEED = 999
