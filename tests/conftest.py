"""
Pytest configuration and shared fixtures for Generative Fill tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest
from PIL import Image

from GF_Libs.MaskingLib.mask_models import LoadedFrame, Point, Stroke


@pytest.fixture
def white_image():
    """
    Provide an opaque white 800x600 RGBA image.

    Returns:
        PIL Image in RGBA mode
    """
    return Image.new("RGBA", (800, 600), (255, 255, 255, 255))


@pytest.fixture
def gradient_image():
    """
    Provide a 200x150 RGBA image with varying RGB and full alpha.

    Returns:
        PIL Image in RGBA mode
    """
    height, width = 150, 200
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.arange(width, dtype=np.uint8)[None, :]
    pixels[:, :, 1] = np.arange(height, dtype=np.uint8)[:, None]
    pixels[:, :, 2] = 77
    pixels[:, :, 3] = 255
    return Image.fromarray(pixels)


@pytest.fixture
def white_frame(white_image):
    return LoadedFrame.from_image(white_image)


@pytest.fixture
def gradient_frame(gradient_image):
    return LoadedFrame.from_image(gradient_image)


@pytest.fixture
def sample_strokes():
    """
    Provide three strokes inside a 200x150 image, two of them overlapping.

    Returns:
        List of Stroke objects
    """
    return [
        Stroke((Point(20, 20), Point(80, 20), Point(80, 60)), 10),
        Stroke((Point(60, 40),), 30),
        Stroke((Point(150, 100), Point(190, 140)), 6),
    ]
