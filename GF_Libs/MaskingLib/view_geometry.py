"""
Geometry and scale mapping between display space and native image space.

Display coordinates are only used for pointer input; every stroke point is
converted to native image space before it is recorded.

Functions:
    viewport_bounds: Maximum display size for a given available width
    compute_scale: Largest scale in (0, 1] that fits an image in the bounds
    to_image_space: Convert a pointer position to an image-space Point
    to_display_space: Convert an image-space Point back to display space
"""

from dataclasses import dataclass
from typing import Tuple

from GF_Libs.MaskingLib.mask_models import Point
from GF_Libs.constants import MAX_DISPLAY_HEIGHT, MAX_DISPLAY_WIDTH, VIEWPORT_PADDING


def viewport_bounds(
    available_width: float,
    padding: float = VIEWPORT_PADDING,
    max_width: float = MAX_DISPLAY_WIDTH,
    max_height: float = MAX_DISPLAY_HEIGHT,
) -> Tuple[float, float]:
    """
    Derive the display bounds from the available viewport width.

    Args:
        available_width: Width of the hosting viewport in display pixels
        padding: Fixed horizontal padding subtracted from the width
        max_width: Upper limit on display width
        max_height: Fixed maximum display height

    Returns:
        (max_width, max_height) tuple to pass to compute_scale
    """
    return (min(available_width - padding, max_width), max_height)


def compute_scale(
    image_width: float,
    image_height: float,
    max_width: float,
    max_height: float,
) -> float:
    """
    Compute the display scale for an image.

    Images already smaller than the bounds are never upscaled.

    Args:
        image_width: Native image width in pixels
        image_height: Native image height in pixels
        max_width: Maximum display width
        max_height: Maximum display height

    Returns:
        min(max_width / image_width, max_height / image_height, 1)

    Raises:
        ValueError: If any dimension or bound is not positive
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {image_width}x{image_height}")

    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Display bounds must be positive, got {max_width}x{max_height}")

    return min(max_width / image_width, max_height / image_height, 1.0)


def to_image_space(
    pointer_x: float,
    pointer_y: float,
    origin_x: float,
    origin_y: float,
    scale: float,
) -> Point:
    """
    Map a pointer position in display space to native image space.

    Args:
        pointer_x, pointer_y: Pointer position in display coordinates
        origin_x, origin_y: Top-left corner of the displayed image
        scale: Display pixels per image pixel

    Returns:
        Point in native image coordinates

    Raises:
        ValueError: If scale is not positive
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    return Point((pointer_x - origin_x) / scale, (pointer_y - origin_y) / scale)


def to_display_space(
    point: Point,
    scale: float,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
) -> Tuple[float, float]:
    """Inverse of to_image_space."""
    return (point.x * scale + origin_x, point.y * scale + origin_y)


@dataclass(frozen=True)
class ViewTransform:
    """Display scale for the current image and viewport.

    Attributes:
        scale: Display pixels per image pixel, in (0, 1]
        origin_x, origin_y: Display position of the image's top-left corner
    """
    scale: float = 1.0
    origin_x: float = 0.0
    origin_y: float = 0.0

    @classmethod
    def fit(
        cls,
        image_width: int,
        image_height: int,
        max_width: float,
        max_height: float,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
    ) -> "ViewTransform":
        scale = compute_scale(image_width, image_height, max_width, max_height)
        return cls(scale=scale, origin_x=origin_x, origin_y=origin_y)

    def to_image(self, pointer_x: float, pointer_y: float) -> Point:
        return to_image_space(pointer_x, pointer_y, self.origin_x, self.origin_y, self.scale)

    def to_display(self, point: Point) -> Tuple[float, float]:
        return to_display_space(point, self.scale, self.origin_x, self.origin_y)

    def display_size(self, image_width: int, image_height: int) -> Tuple[float, float]:
        return (image_width * self.scale, image_height * self.scale)

    def brush_cursor_diameter(self, brush_size: float) -> float:
        """On-screen diameter of the brush preview circle."""
        return brush_size * self.scale
