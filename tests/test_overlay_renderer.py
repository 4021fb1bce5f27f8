"""
Tests for the Overlay Renderer.

Tests cover:
- Translucent highlight along strokes
- Per-stroke compositing (no self-darkening, stacking across strokes)
- In-progress stroke drawn on top
- Incremental rendering matches a full redraw
"""

import pytest

from GF_Libs.MaskingLib.mask_models import UNLOADED, Point, Stroke, StrokeHistory
from GF_Libs.MaskingLib.overlay_renderer import OverlayRenderer, render_overlay


def _green(image, xy):
    return image.getpixel(xy)[1]


class TestHighlight:
    """Tests for stroke highlighting on a white image."""

    def test_stroke_tinted_red(self, white_frame):
        """Should blend translucent red over the source."""
        history = StrokeHistory((Stroke((Point(100, 100),), 40),))

        overlay = render_overlay(white_frame, history)
        red, green, blue, alpha = overlay.getpixel((100, 100))

        assert overlay.size == (800, 600)
        assert red == 255
        assert 115 <= green <= 140
        assert green == blue
        assert alpha == 255

    def test_untouched_pixels_unchanged(self, white_frame):
        history = StrokeHistory((Stroke((Point(100, 100),), 40),))

        overlay = render_overlay(white_frame, history)

        assert overlay.getpixel((300, 300)) == (255, 255, 255, 255)

    def test_empty_history_shows_source(self, gradient_image, gradient_frame):
        overlay = render_overlay(gradient_frame, StrokeHistory())
        assert overlay.tobytes() == gradient_image.tobytes()

    def test_self_crossing_stroke_uniform(self, white_frame):
        """Should not darken a stroke where it crosses its own path."""
        stroke = Stroke(
            (Point(100, 100), Point(300, 300), Point(300, 100), Point(100, 300)), 20
        )

        overlay = render_overlay(white_frame, StrokeHistory((stroke,)))

        assert _green(overlay, (200, 200)) == _green(overlay, (150, 150))
        assert _green(overlay, (300, 200)) == _green(overlay, (150, 150))

    def test_overlapping_strokes_stack(self, white_frame):
        """Should darken where two separate strokes overlap."""
        history = StrokeHistory(
            (
                Stroke((Point(100, 200), Point(300, 200)), 20),
                Stroke((Point(200, 100), Point(200, 300)), 20),
            )
        )

        overlay = render_overlay(white_frame, history)

        single = _green(overlay, (150, 200))
        double = _green(overlay, (200, 200))
        assert double < single
        assert overlay.getpixel((200, 200))[0] == 255

    def test_custom_color(self, white_frame):
        history = StrokeHistory((Stroke((Point(50, 50),), 10),))

        overlay = render_overlay(white_frame, history, color=(0, 0, 255, 255))

        assert overlay.getpixel((50, 50)) == (0, 0, 255, 255)

    def test_rejects_bad_color(self):
        with pytest.raises(ValueError):
            OverlayRenderer(color=(255, 0, 0))


class TestInProgress:
    """Tests for the live stroke."""

    def test_drawn_on_top(self, white_frame):
        live = Stroke((Point(400, 300), Point(450, 300)), 16)

        overlay = render_overlay(white_frame, StrokeHistory(), in_progress=live)

        assert _green(overlay, (425, 300)) < 255

    def test_not_cached_as_committed(self, white_frame):
        """Should forget the live stroke once it is no longer passed in."""
        renderer = OverlayRenderer()
        live = Stroke((Point(400, 300),), 16)

        renderer.render(white_frame, StrokeHistory(), in_progress=live)
        overlay = renderer.render(white_frame, StrokeHistory())

        assert overlay.getpixel((400, 300)) == (255, 255, 255, 255)


class TestIncrementalRendering:
    """Tests for the committed-stroke cache."""

    def test_growth_matches_full_redraw(self, gradient_frame, sample_strokes):
        renderer = OverlayRenderer()
        history = StrokeHistory()

        for stroke in sample_strokes:
            history = history.append(stroke)
            incremental = renderer.render(gradient_frame, history)
            assert incremental.tobytes() == render_overlay(gradient_frame, history).tobytes()

    def test_undo_matches_full_redraw(self, gradient_frame, sample_strokes):
        renderer = OverlayRenderer()
        history = StrokeHistory(sample_strokes)
        renderer.render(gradient_frame, history)

        shorter = history.remove_last()
        overlay = renderer.render(gradient_frame, shorter)

        assert overlay.tobytes() == render_overlay(gradient_frame, shorter).tobytes()

    def test_clear_shows_source(self, gradient_image, gradient_frame, sample_strokes):
        renderer = OverlayRenderer()
        history = StrokeHistory(sample_strokes)
        renderer.render(gradient_frame, history)

        overlay = renderer.render(gradient_frame, history.cleared())

        assert overlay.tobytes() == gradient_image.tobytes()

    def test_new_frame_redraws(self, white_frame, gradient_frame, sample_strokes):
        renderer = OverlayRenderer()
        history = StrokeHistory(sample_strokes)
        renderer.render(white_frame, history)

        overlay = renderer.render(gradient_frame, history)

        assert overlay.size == gradient_frame.size
        assert overlay.tobytes() == render_overlay(gradient_frame, history).tobytes()

    def test_returned_image_is_private(self, white_frame):
        """Should not let callers corrupt the cache."""
        renderer = OverlayRenderer()
        history = StrokeHistory((Stroke((Point(10, 10),), 8),))

        first = renderer.render(white_frame, history)
        first.putpixel((500, 500), (0, 0, 0, 255))
        second = renderer.render(white_frame, history)

        assert second.getpixel((500, 500)) == (255, 255, 255, 255)

    def test_invalidate(self, white_frame, sample_strokes):
        renderer = OverlayRenderer()
        history = StrokeHistory(sample_strokes)
        before = renderer.render(white_frame, history)

        renderer.invalidate()

        assert renderer.render(white_frame, history).tobytes() == before.tobytes()


class TestNotReady:
    def test_unloaded_returns_none(self, sample_strokes):
        assert render_overlay(UNLOADED, StrokeHistory(sample_strokes)) is None
