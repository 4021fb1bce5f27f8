"""
Mask Compositor for the masking engine.

Turns the committed strokes into the exportable mask: a copy of the
source raster at native resolution in which every pixel touched by any
stroke has alpha 0 and unchanged RGB. All other pixels are left exactly
as decoded.

Erasing works like a "destination-out" blend with an opaque brush: only
the coverage of the strokes matters, their color is discarded. Coverage of
all strokes is unioned before the alpha channel is cut, so the result does
not depend on stroke order and adding a stroke can only grow the hole.

Classes:
    MaskCompositor: Builds masks from frames and stroke histories

Functions:
    erase_alpha: Zero the alpha channel wherever coverage is non-zero
    composite_mask: Convenience wrapper around MaskCompositor.composite
    erased_region: Boolean array of fully transparent pixels
"""

from typing import Any, Optional

import numpy as np
from PIL import Image

from GF_Libs.MaskingLib.mask_models import ImageFrame, StrokeHistory, is_ready
from GF_Libs.MaskingLib.stroke_raster import stroke_coverage
from GF_Libs.constants import RASTER_MODE

ALPHA_CHANNEL = 3


def erase_alpha(raster: Any, coverage: Any) -> Any:
    """
    Cut a hole into raster wherever coverage is set.

    Args:
        raster: RGBA PIL Image
        coverage: L mode PIL Image of the same size (non-zero = erase)

    Returns:
        New RGBA PIL Image with alpha 0 on covered pixels, RGB untouched

    Raises:
        ValueError: If sizes differ
    """
    if raster.size != coverage.size:
        raise ValueError(
            f"Coverage size {coverage.size} does not match raster size {raster.size}"
        )

    pixels = np.array(raster.convert(RASTER_MODE), dtype=np.uint8)
    covered = np.array(coverage, dtype=np.uint8) > 0
    pixels[covered, ALPHA_CHANNEL] = 0
    return Image.fromarray(pixels)


def erased_region(mask_raster: Any) -> np.ndarray:
    """
    Find the fully transparent pixels of a mask.

    Args:
        mask_raster: RGBA PIL Image

    Returns:
        (height, width) boolean array, True where alpha == 0
    """
    pixels = np.array(mask_raster.convert(RASTER_MODE), dtype=np.uint8)
    return pixels[:, :, ALPHA_CHANNEL] == 0


class MaskCompositor:
    """
    Builds the alpha mask handed to the fill service.

    The compositor keeps no drawing state between calls, so one instance
    can be reused for every mutation of the history.

    Example:
        >>> compositor = MaskCompositor()
        >>> mask = compositor.composite(frame, recorder.history)
        >>> mask.getpixel((100, 100))[3]
        0
    """

    def composite(self, frame: ImageFrame, history: StrokeHistory) -> Optional[Any]:
        """
        Composite the mask for frame.

        Args:
            frame: Source image frame
            history: Committed strokes (order is irrelevant)

        Returns:
            New RGBA PIL Image at native size, or None when the frame has
            no known positive dimensions. An empty history yields an exact
            copy of the source raster.
        """
        if not is_ready(frame):
            return None

        raster = frame.raster.convert(RASTER_MODE)
        if history.is_empty:
            return raster

        coverage = stroke_coverage(history, raster.size)
        return erase_alpha(raster, coverage)


def composite_mask(frame: ImageFrame, history: StrokeHistory) -> Optional[Any]:
    """Build the mask for frame and history with a fresh compositor."""
    return MaskCompositor().composite(frame, history)
