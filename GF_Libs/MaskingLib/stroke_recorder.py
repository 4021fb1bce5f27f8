"""
Stroke Recorder for the masking engine.

Captures continuous pointer gestures as strokes and maintains the ordered
history of committed strokes. The recorder is a two-state machine:

    IDLE --begin_stroke--> DRAWING --extend_stroke--> DRAWING
    DRAWING --end_stroke--> IDLE   (commits the stroke to the history)

The in-progress stroke lives in a growable point buffer owned by the
recorder. On commit the buffer is frozen into an immutable Stroke, so the
live gesture and the committed history never share mutable state.

Classes:
    RecorderState: IDLE or DRAWING
    StrokeRecorder: Gesture state machine plus undo/clear history
"""

from enum import Enum
from typing import List, Optional
import logging

from GF_Libs.MaskingLib.mask_models import Point, Stroke, StrokeHistory

logger = logging.getLogger(__name__)


class RecorderState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"


class StrokeRecorder:
    """
    Records pointer gestures into a StrokeHistory.

    Example:
        >>> recorder = StrokeRecorder()
        >>> recorder.begin_stroke(Point(10, 10), brush_size=40)
        >>> recorder.extend_stroke(Point(20, 10))
        True
        >>> stroke = recorder.end_stroke()
        >>> len(recorder.history)
        1
    """

    def __init__(self, history: Optional[StrokeHistory] = None):
        self._history = history if history is not None else StrokeHistory()
        self._live_points: List[Point] = []
        self._live_brush_size: Optional[float] = None
        self._state = RecorderState.IDLE

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return self._state is RecorderState.DRAWING

    @property
    def history(self) -> StrokeHistory:
        return self._history

    @property
    def can_undo(self) -> bool:
        return not self._history.is_empty

    def in_progress(self) -> Optional[Stroke]:
        """
        Snapshot of the stroke currently being drawn.

        Returns:
            An immutable Stroke copy of the live buffer, or None when idle
            or when no point has been captured yet
        """
        if not self.is_drawing or not self._live_points:
            return None
        return Stroke(tuple(self._live_points), self._live_brush_size)

    def begin_stroke(self, point: Point, brush_size: float) -> None:
        """
        Start a new gesture at point.

        The brush size is frozen here; later changes to the brush control
        only affect the next stroke. Starting while a gesture is already
        active discards the unfinished gesture.
        """
        if self.is_drawing:
            logger.debug(f"Gesture restarted before end; discarding {len(self._live_points)} points")

        self._live_points = [point]
        self._live_brush_size = brush_size
        self._state = RecorderState.DRAWING

    def extend_stroke(self, point: Point) -> bool:
        """
        Append a point to the in-progress stroke.

        Points are neither deduplicated nor resampled.

        Returns:
            True if the point was recorded, False when no gesture is active
        """
        if not self.is_drawing:
            return False

        self._live_points.append(point)
        return True

    def end_stroke(self) -> Optional[Stroke]:
        """
        Finish the active gesture (pointer up, pointer leave or focus loss).

        Returns:
            The committed Stroke, or None if nothing was committed
        """
        if not self.is_drawing:
            return None

        points = self._live_points
        brush_size = self._live_brush_size
        self._reset_live()

        if not points:
            logger.debug("Discarding empty gesture")
            return None

        stroke = Stroke(tuple(points), brush_size)
        self._history = self._history.append(stroke)
        logger.debug(
            f"Committed stroke #{len(self._history)}: {len(stroke)} points, brush {brush_size}"
        )
        return stroke

    def undo(self) -> Optional[Stroke]:
        """
        Remove the last committed stroke. The active gesture is untouched.

        Returns:
            The removed Stroke, or None if the history was empty
        """
        if self._history.is_empty:
            return None

        removed = self._history[-1]
        self._history = self._history.remove_last()
        logger.debug(f"Undo: {len(self._history)} strokes remain")
        return removed

    def clear(self) -> int:
        """
        Remove every committed stroke. The active gesture is untouched.

        Returns:
            Number of strokes removed
        """
        removed = len(self._history)
        self._history = self._history.cleared()
        if removed:
            logger.debug(f"Cleared {removed} strokes")
        return removed

    def reset(self) -> None:
        """Discard the active gesture and the whole history."""
        self._reset_live()
        self._history = StrokeHistory()

    def _reset_live(self) -> None:
        self._live_points = []
        self._live_brush_size = None
        self._state = RecorderState.IDLE
