"""
Image encoding and file operations for Generative Fill.

This module converts rasters to and from the byte formats exchanged with
the fill service and the file system.

Functions:
    is_supported_source: Check a path against the accepted source formats
    load_source_image: Decode a source image from disk as RGBA
    encode_png: Encode a PIL Image as lossless PNG bytes
    encode_base64_png: PNG bytes as a base64 string
    to_data_url: PNG bytes as a data URL
    strip_data_url: Remove a data URL prefix from a base64 payload
    decode_base64_image: Decode a base64 (or data URL) payload to RGBA
    save_result: Save an image to disk as PNG
"""

from io import BytesIO
from pathlib import Path
from typing import Any, Union
import base64
import binascii
import re

from PIL import Image, UnidentifiedImageError

from GF_Libs.constants import (
    DATA_URL_PREFIX,
    DEFAULT_OUTPUT_FORMAT,
    RASTER_MODE,
    SUPPORTED_SOURCE_IMAGES,
)

DATA_URL_PATTERN = re.compile(r"^data:image/(png|jpeg|webp);base64,")


def is_supported_source(file_path: Path) -> bool:
    return Path(file_path).suffix.lower() in SUPPORTED_SOURCE_IMAGES


def load_source_image(file_path: Union[str, Path]) -> Any:
    """
    Decode a source image from disk.

    Args:
        file_path: Path to a PNG, JPEG or WEBP file

    Returns:
        RGBA PIL Image, fully loaded

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the extension is not supported or decoding fails
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not is_supported_source(path):
        supported = ", ".join(sorted(SUPPORTED_SOURCE_IMAGES))
        raise ValueError(f"Unsupported image format '{path.suffix}'. Supported: {supported}")

    try:
        with Image.open(path) as img:
            return img.convert(RASTER_MODE)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Failed to decode image {path}: {str(e)}")


def encode_png(image: Any) -> bytes:
    """Encode a PIL Image as PNG bytes."""
    if not hasattr(image, "save"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    buffer = BytesIO()
    image.save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    return buffer.getvalue()


def encode_base64_png(image: Any) -> str:
    return base64.b64encode(encode_png(image)).decode("ascii")


def to_data_url(image: Any) -> str:
    return f"{DATA_URL_PREFIX}{encode_base64_png(image)}"


def strip_data_url(payload: str) -> str:
    """
    Remove a leading data URL header, if present.

    Args:
        payload: Base64 string, optionally prefixed with data:image/...;base64,

    Returns:
        The bare base64 payload
    """
    return DATA_URL_PATTERN.sub("", payload, count=1)


def decode_base64_image(payload: str) -> Any:
    """
    Decode a base64 image payload.

    Args:
        payload: Base64 string or data URL

    Returns:
        RGBA PIL Image

    Raises:
        ValueError: If the payload is not valid base64 or not an image
    """
    try:
        raw = base64.b64decode(strip_data_url(payload), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image payload: {str(e)}")

    try:
        with Image.open(BytesIO(raw)) as img:
            return img.convert(RASTER_MODE)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Payload is not a decodable image: {str(e)}")


def save_result(image: Any, output_path: Union[str, Path]) -> Path:
    """
    Save an image to disk in PNG format.

    Args:
        image: PIL Image to save
        output_path: Destination file path; its directory must exist

    Returns:
        Path the image was written to

    Raises:
        OSError: If the directory does not exist or the file cannot be written
    """
    path = Path(output_path)
    output_dir = path.parent

    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    image.save(path, format=DEFAULT_OUTPUT_FORMAT)
    return path
