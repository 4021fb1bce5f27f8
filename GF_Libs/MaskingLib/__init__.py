"""
MaskingLib - Interactive masking engine

This module provides the stroke model, display/image coordinate mapping,
overlay rendering and alpha mask compositing for Generative Fill.
"""

from GF_Libs.MaskingLib.mask_models import (
    UNLOADED,
    ImageFrame,
    LoadedFrame,
    Point,
    Stroke,
    StrokeHistory,
    UnloadedFrame,
    is_ready,
)
from GF_Libs.MaskingLib.view_geometry import (
    ViewTransform,
    compute_scale,
    to_display_space,
    to_image_space,
    viewport_bounds,
)
from GF_Libs.MaskingLib.stroke_recorder import RecorderState, StrokeRecorder
from GF_Libs.MaskingLib.overlay_renderer import OverlayRenderer, render_overlay
from GF_Libs.MaskingLib.mask_compositor import (
    MaskCompositor,
    composite_mask,
    erase_alpha,
    erased_region,
)
from GF_Libs.MaskingLib.masking_session import (
    BrushCursor,
    MaskingSession,
    adjust_brush_size,
    clamp_brush_size,
)

__all__ = [
    "UNLOADED",
    "ImageFrame",
    "LoadedFrame",
    "Point",
    "Stroke",
    "StrokeHistory",
    "UnloadedFrame",
    "is_ready",
    "ViewTransform",
    "compute_scale",
    "to_display_space",
    "to_image_space",
    "viewport_bounds",
    "RecorderState",
    "StrokeRecorder",
    "OverlayRenderer",
    "render_overlay",
    "MaskCompositor",
    "composite_mask",
    "erase_alpha",
    "erased_region",
    "BrushCursor",
    "MaskingSession",
    "adjust_brush_size",
    "clamp_brush_size",
]
