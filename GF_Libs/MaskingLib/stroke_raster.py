"""
Stroke rasterization shared by the overlay renderer and the mask compositor.

A stroke is the union of a disc of the brush diameter on every point and a
band of the same width along every segment between consecutive points,
which gives round caps and round joins. A single point therefore renders
as a dot of diameter brush_size.

Stroke points address pixel corners, so a point at (100, 100) sits between
pixels 99 and 100. Discs and bands are both built around pixel centers
with an inclusive extent of exactly brush_size pixels; a brush of 40 at
x = 100 covers columns 80..119.
"""

from typing import Any, Iterable, List, Optional, Tuple
import math

from PIL import Image, ImageDraw

from GF_Libs.MaskingLib.mask_models import Stroke
from GF_Libs.constants import COVERAGE_MODE

FULL_COVERAGE = 255
PIXEL_CENTER = 0.5


def disc_bounds(x: float, y: float, radius: float) -> List[float]:
    """Inclusive ellipse bounding box covering 2 * radius pixels per side."""
    extent = max(2 * radius - 1, 0.0)
    return [x - radius, y - radius, x - radius + extent, y - radius + extent]


def segment_band(
    start: Tuple[float, float],
    end: Tuple[float, float],
    radius: float,
) -> Optional[List[Tuple[float, float]]]:
    """
    Quadrilateral covering a segment with the brush width.

    Args:
        start: Segment start in image coordinates
        end: Segment end in image coordinates
        radius: Half the brush size

    Returns:
        Four polygon vertices in pixel-center coordinates, or None for a
        zero-length segment (its discs already cover it)
    """
    (x0, y0), (x1, y1) = start, end
    length = math.hypot(x1 - x0, y1 - y0)
    if length == 0:
        return None

    half = max(radius - PIXEL_CENTER, 0.0)
    nx = -(y1 - y0) / length * half
    ny = (x1 - x0) / length * half

    cx0, cy0 = x0 - PIXEL_CENTER, y0 - PIXEL_CENTER
    cx1, cy1 = x1 - PIXEL_CENTER, y1 - PIXEL_CENTER
    return [
        (cx0 + nx, cy0 + ny),
        (cx1 + nx, cy1 + ny),
        (cx1 - nx, cy1 - ny),
        (cx0 - nx, cy0 - ny),
    ]


def draw_stroke(draw: Any, stroke: Stroke, fill: Any) -> None:
    """
    Stroke a path through every point with round caps and joins.

    Args:
        draw: ImageDraw.Draw bound to the target image
        stroke: Stroke to draw
        fill: Fill value in the target image's mode
    """
    coords = stroke.coordinates()
    radius = stroke.brush_size / 2.0

    for start, end in zip(coords, coords[1:]):
        band = segment_band(start, end, radius)
        if band is not None:
            draw.polygon(band, fill=fill)

    for x, y in coords:
        draw.ellipse(disc_bounds(x, y, radius), fill=fill)


def stroke_coverage(strokes: Iterable[Stroke], size: Tuple[int, int]) -> Any:
    """
    Rasterize the union of stroke footprints.

    Args:
        strokes: Strokes to rasterize (order is irrelevant)
        size: (width, height) of the output mask

    Returns:
        L mode PIL Image, 255 where any stroke touches a pixel, 0 elsewhere
    """
    coverage = Image.new(COVERAGE_MODE, size, 0)
    draw = ImageDraw.Draw(coverage)
    for stroke in strokes:
        draw_stroke(draw, stroke, FULL_COVERAGE)
    return coverage
