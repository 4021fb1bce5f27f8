"""
Overlay Renderer for the masking engine.

Produces the visible editing surface: the source image at native
resolution with a translucent highlight along every stroke. Scaling the
result to the viewport is left to the presentation layer.

Each stroke is rasterized on its own layer and alpha-composited onto the
running result, so a stroke never darkens itself where it crosses its own
path, while overlapping strokes stack visually in history order.

The renderer keeps the composite of the committed strokes between calls.
When the history only grew since the last call, just the new strokes are
composited on top of the cached image; any other change (undo, clear, a
new source frame) triggers a full redraw. Both paths apply the same
sequence of alpha composites, so the output is identical to a redraw
from scratch.

Classes:
    OverlayRenderer: Overlay renderer with committed-stroke caching

Functions:
    render_overlay: Stateless full redraw
"""

from typing import Any, Optional, Tuple

from PIL import Image

from GF_Libs.MaskingLib.mask_models import ImageFrame, Stroke, StrokeHistory, is_ready
from GF_Libs.MaskingLib.stroke_raster import stroke_coverage
from GF_Libs.constants import OVERLAY_STROKE_COLOR, RASTER_MODE


class OverlayRenderer:
    """Renders the editing overlay for a frame and its strokes."""

    def __init__(self, color: Tuple[int, int, int, int] = OVERLAY_STROKE_COLOR):
        if len(color) != 4:
            raise ValueError(f"color must be an RGBA tuple, got {color}")

        self.color = tuple(color)
        self._cached_frame: Optional[ImageFrame] = None
        self._cached_strokes: Tuple[Stroke, ...] = ()
        self._cached_image: Optional[Any] = None

    def render(
        self,
        frame: ImageFrame,
        history: StrokeHistory,
        in_progress: Optional[Stroke] = None,
    ) -> Optional[Any]:
        """
        Render the overlay surface.

        Args:
            frame: Source image frame
            history: Committed strokes, drawn in order
            in_progress: Stroke currently being drawn, drawn last

        Returns:
            New RGBA PIL Image at the frame's native size, or None when the
            frame is not loaded
        """
        if not is_ready(frame):
            return None

        result = self._committed_layer(frame, history).copy()
        if in_progress is not None:
            result = self._composite_stroke(result, in_progress)
        return result

    def invalidate(self) -> None:
        """Drop the cached committed-stroke composite."""
        self._cached_frame = None
        self._cached_strokes = ()
        self._cached_image = None

    def _committed_layer(self, frame: ImageFrame, history: StrokeHistory) -> Any:
        strokes = history.strokes

        if self._cached_frame is frame and self._cached_image is not None:
            cached_count = len(self._cached_strokes)
            if strokes == self._cached_strokes:
                return self._cached_image
            if strokes[:cached_count] == self._cached_strokes:
                image = self._cached_image
                for stroke in strokes[cached_count:]:
                    image = self._composite_stroke(image, stroke)
                self._store(frame, strokes, image)
                return image

        image = frame.raster.convert(RASTER_MODE)
        for stroke in strokes:
            image = self._composite_stroke(image, stroke)
        self._store(frame, strokes, image)
        return image

    def _store(self, frame: ImageFrame, strokes: Tuple[Stroke, ...], image: Any) -> None:
        self._cached_frame = frame
        self._cached_strokes = strokes
        self._cached_image = image

    def _composite_stroke(self, base: Any, stroke: Stroke) -> Any:
        """
        Alpha-composite one translucent stroke onto base.

        Args:
            base: RGBA PIL Image
            stroke: Stroke to highlight

        Returns:
            New RGBA PIL Image
        """
        red, green, blue, alpha = self.color
        coverage = stroke_coverage([stroke], base.size)
        stroke_alpha = coverage.point(lambda value: value * alpha // 255)

        layer = Image.new(RASTER_MODE, base.size, (red, green, blue, 0))
        layer.putalpha(stroke_alpha)
        return Image.alpha_composite(base, layer)


def render_overlay(
    frame: ImageFrame,
    history: StrokeHistory,
    in_progress: Optional[Stroke] = None,
    color: Tuple[int, int, int, int] = OVERLAY_STROKE_COLOR,
) -> Optional[Any]:
    """Render the overlay from scratch without any caching."""
    return OverlayRenderer(color).render(frame, history, in_progress)
