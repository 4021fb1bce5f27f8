"""
ImageIOLib - Image encoding and file operations

Decodes source images and encodes rasters for the fill service and disk.
"""

from GF_Libs.ImageIOLib.image_codec import (
    decode_base64_image,
    encode_base64_png,
    encode_png,
    is_supported_source,
    load_source_image,
    save_result,
    strip_data_url,
    to_data_url,
)

__all__ = [
    "decode_base64_image",
    "encode_base64_png",
    "encode_png",
    "is_supported_source",
    "load_source_image",
    "save_result",
    "strip_data_url",
    "to_data_url",
]
