"""
Masking session: the host-facing entry point of the masking engine.

A session owns the current source frame, the stroke recorder, the view
transform and the brush size. Hosts forward pointer events in display
coordinates and pull the overlay and mask whenever they need to repaint
or export:

    >>> session = MaskingSession(available_width=1200)
    >>> session.load_image(image)
    >>> session.pointer_down(100, 100)
    True
    >>> session.pointer_up()
    True
    >>> overlay = session.render_overlay()
    >>> mask = session.composite_mask()

All calls run synchronously on the caller's thread, and every mutation is
fully applied before it returns, so a render never observes a partially
updated state. Pointer events while no image is loaded are ignored.

Classes:
    BrushCursor: Display-space brush preview circle
    MaskingSession: Pointer-driven editing session

Functions:
    clamp_brush_size: Clamp a brush size to the allowed range
    adjust_brush_size: Step a brush size up or down within the range
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple
import logging

from GF_Libs.ImageIOLib.image_codec import encode_png, to_data_url
from GF_Libs.MaskingLib.mask_compositor import MaskCompositor
from GF_Libs.MaskingLib.mask_models import UNLOADED, ImageFrame, LoadedFrame, StrokeHistory, is_ready
from GF_Libs.MaskingLib.overlay_renderer import OverlayRenderer
from GF_Libs.MaskingLib.stroke_recorder import StrokeRecorder
from GF_Libs.MaskingLib.view_geometry import ViewTransform, viewport_bounds
from GF_Libs.constants import (
    DEFAULT_BRUSH_SIZE,
    MAX_BRUSH_SIZE,
    MAX_DISPLAY_HEIGHT,
    MAX_DISPLAY_WIDTH,
    MIN_BRUSH_SIZE,
)

logger = logging.getLogger(__name__)


def clamp_brush_size(value: float) -> float:
    return max(MIN_BRUSH_SIZE, min(MAX_BRUSH_SIZE, value))


def adjust_brush_size(current: float, delta: float) -> float:
    return clamp_brush_size(current + delta)


@dataclass(frozen=True)
class BrushCursor:
    x: float
    y: float
    diameter: float


class MaskingSession:
    """
    Interactive masking over one source image at a time.

    Attributes:
        frame: Current ImageFrame (UNLOADED until load_image is called)
        view: ViewTransform mapping display space to image space
        brush_size: Brush size applied to the next stroke
    """

    def __init__(
        self,
        available_width: Optional[float] = None,
        max_width: float = MAX_DISPLAY_WIDTH,
        max_height: float = MAX_DISPLAY_HEIGHT,
        brush_size: float = DEFAULT_BRUSH_SIZE,
    ):
        self.frame: ImageFrame = UNLOADED
        self.view = ViewTransform()
        self.brush_size = clamp_brush_size(brush_size)

        self._recorder = StrokeRecorder()
        self._renderer = OverlayRenderer()
        self._compositor = MaskCompositor()

        self._width_cap = max_width
        self._max_width = max_width
        self._max_height = max_height
        if available_width is not None:
            self._max_width, self._max_height = viewport_bounds(
                available_width, max_width=max_width, max_height=max_height
            )

        self._cursor_position: Optional[Tuple[float, float]] = None
        self._hovering = False

        self._mask_key: Optional[Tuple[ImageFrame, StrokeHistory]] = None
        self._mask_cache: Optional[Any] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return is_ready(self.frame)

    @property
    def history(self) -> StrokeHistory:
        return self._recorder.history

    @property
    def is_drawing(self) -> bool:
        return self._recorder.is_drawing

    @property
    def can_undo(self) -> bool:
        return self._recorder.can_undo

    def display_size(self) -> Tuple[float, float]:
        return self.view.display_size(self.frame.width, self.frame.height)

    # ------------------------------------------------------------------
    # Source image and viewport
    # ------------------------------------------------------------------

    def load_image(self, image: Any) -> None:
        """
        Replace the source image.

        The in-progress stroke and the whole history are discarded before
        the new frame becomes visible, so strokes never carry over.

        Args:
            image: Decoded PIL Image

        Raises:
            TypeError: If image is not a PIL Image
        """
        frame = LoadedFrame.from_image(image)

        self._discard_strokes()
        self.frame = frame
        self._update_view()
        logger.debug(
            f"Loaded {frame.width}x{frame.height} source at scale {self.view.scale:.3f}"
        )

    def unload(self) -> None:
        """Return to the unloaded state (start over)."""
        self._discard_strokes()
        self.frame = UNLOADED
        self.view = ViewTransform()
        logger.debug("Source image unloaded")

    def set_viewport(self, available_width: float) -> None:
        """Recompute bounds and scale for a new viewport width."""
        self._max_width, self._max_height = viewport_bounds(
            available_width, max_width=self._width_cap, max_height=self._max_height
        )
        self._update_view()

    def set_bounds(self, max_width: float, max_height: float) -> None:
        self._width_cap = max_width
        self._max_width = max_width
        self._max_height = max_height
        self._update_view()

    def set_brush_size(self, value: float) -> float:
        """Set the brush for the next stroke; the active stroke keeps its size."""
        self.brush_size = clamp_brush_size(value)
        return self.brush_size

    def adjust_brush_size(self, delta: float) -> float:
        return self.set_brush_size(adjust_brush_size(self.brush_size, delta))

    # ------------------------------------------------------------------
    # Pointer events (display coordinates)
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> bool:
        """Start a stroke. Returns True if a stroke was started."""
        self._cursor_position = (x, y)
        if not self.is_ready:
            return False

        self._recorder.begin_stroke(self.view.to_image(x, y), self.brush_size)
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        """Track the cursor and extend the active stroke. Returns True if a point was added."""
        self._cursor_position = (x, y)
        if not self.is_ready:
            return False

        return self._recorder.extend_stroke(self.view.to_image(x, y))

    def pointer_up(self) -> bool:
        """End the active stroke. Returns True if a stroke was committed."""
        return self._recorder.end_stroke() is not None

    def pointer_enter(self) -> None:
        self._hovering = True

    def pointer_leave(self) -> bool:
        """Hide the brush cursor and commit any active stroke."""
        self._hovering = False
        self._cursor_position = None
        return self.pointer_up()

    def focus_lost(self) -> bool:
        return self.pointer_up()

    def undo(self) -> bool:
        return self._recorder.undo() is not None

    def clear(self) -> bool:
        return self._recorder.clear() > 0

    def brush_cursor(self) -> Optional[BrushCursor]:
        """
        Brush preview circle in display space.

        Returns:
            BrushCursor while hovering over a loaded image, otherwise None
        """
        if not self._hovering or self._cursor_position is None or not self.is_ready:
            return None

        x, y = self._cursor_position
        return BrushCursor(x, y, self.view.brush_cursor_diameter(self.brush_size))

    # ------------------------------------------------------------------
    # Pull-based outputs
    # ------------------------------------------------------------------

    def render_overlay(self) -> Optional[Any]:
        """Overlay surface for the current state, or None when unloaded."""
        return self._renderer.render(self.frame, self.history, self._recorder.in_progress())

    def composite_mask(self) -> Optional[Any]:
        """
        Mask for the committed strokes, or None when unloaded.

        The mask only depends on the frame and the committed history, so
        it is recomputed only after one of them changed.
        """
        if not self.is_ready:
            return None

        key = (self.frame, self.history)
        if self._mask_key is None or self._mask_key[0] is not key[0] or self._mask_key[1] != key[1]:
            self._mask_cache = self._compositor.composite(self.frame, self.history)
            self._mask_key = key
        return self._mask_cache.copy()

    def export_mask_png(self) -> Optional[bytes]:
        mask = self.composite_mask()
        return encode_png(mask) if mask is not None else None

    def export_mask_data_url(self) -> Optional[str]:
        mask = self.composite_mask()
        return to_data_url(mask) if mask is not None else None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _discard_strokes(self) -> None:
        self._recorder.reset()
        self._renderer.invalidate()
        self._mask_key = None
        self._mask_cache = None

    def _update_view(self) -> None:
        if not self.is_ready:
            return

        max_width = max(1.0, self._max_width)
        max_height = max(1.0, self._max_height)
        self.view = ViewTransform.fit(self.frame.width, self.frame.height, max_width, max_height)
        logger.debug(f"View scale set to {self.view.scale:.3f}")
