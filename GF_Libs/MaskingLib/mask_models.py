"""
Masking data models for Generative Fill.

This module defines the value types shared by the masking engine. All
geometry is stored in native image space so that the same strokes drive
both the scaled-down overlay and the full-resolution mask.

Classes:
    Point: An (x, y) coordinate in native image space
    Stroke: One committed paint gesture (points plus frozen brush size)
    StrokeHistory: Ordered, immutable sequence of committed strokes
    UnloadedFrame: Source image not yet available
    LoadedFrame: Decoded source raster plus its native dimensions

Type Aliases:
    ImageFrame: Either an UnloadedFrame or a LoadedFrame
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Tuple, Union

from GF_Libs.constants import RASTER_MODE


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Stroke:
    """A committed paint gesture.

    Attributes:
        points: Ordered image-space points, never empty
        brush_size: Line width in image pixels, frozen at gesture start.
                    A single-point stroke renders as a dot of this diameter.
    """
    points: Tuple[Point, ...]
    brush_size: float

    def __post_init__(self):
        if not self.points:
            raise ValueError("Stroke must contain at least one point")
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def coordinates(self):
        return [point.as_tuple() for point in self.points]


@dataclass(frozen=True)
class StrokeHistory:
    """Ordered sequence of committed strokes.

    Mutations return a new history; an existing history is never changed.
    Order only matters for overlay layering.
    """
    strokes: Tuple[Stroke, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "strokes", tuple(self.strokes))

    def __len__(self) -> int:
        return len(self.strokes)

    def __iter__(self) -> Iterator[Stroke]:
        return iter(self.strokes)

    def __getitem__(self, index):
        return self.strokes[index]

    @property
    def is_empty(self) -> bool:
        return not self.strokes

    def append(self, stroke: Stroke) -> "StrokeHistory":
        return StrokeHistory(self.strokes + (stroke,))

    def remove_last(self) -> "StrokeHistory":
        if not self.strokes:
            return self
        return StrokeHistory(self.strokes[:-1])

    def cleared(self) -> "StrokeHistory":
        return StrokeHistory()


class UnloadedFrame:
    """Placeholder frame used before a source image has been decoded."""

    is_loaded = False
    width = 0
    height = 0

    def __repr__(self) -> str:
        return "UnloadedFrame()"


UNLOADED = UnloadedFrame()


@dataclass(frozen=True, eq=False)
class LoadedFrame:
    """A decoded source raster and its native pixel dimensions.

    Frames are replaced wholesale when a new source is loaded, never
    mutated in place.
    """
    raster: Any
    width: int
    height: int

    is_loaded = True

    @classmethod
    def from_image(cls, image: Any) -> "LoadedFrame":
        """
        Build a frame from a PIL Image.

        Args:
            image: Decoded PIL Image in any mode

        Returns:
            LoadedFrame holding an RGBA copy of the image

        Raises:
            TypeError: If image is not a PIL Image
        """
        if not hasattr(image, "mode"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")

        raster = image.convert(RASTER_MODE)
        width, height = raster.size
        return cls(raster=raster, width=width, height=height)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


ImageFrame = Union[UnloadedFrame, LoadedFrame]


def is_ready(frame: ImageFrame) -> bool:
    """Return True when the frame is loaded with positive native dimensions."""
    return bool(frame.is_loaded and frame.width > 0 and frame.height > 0)

