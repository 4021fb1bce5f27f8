"""
FillServiceLib - Remote fill service adapter

Sends masked images and prompts to the image model and reports results.
"""

from GF_Libs.FillServiceLib.fill_client import (
    FillServiceError,
    GeminiFillClient,
    build_fill_prompt,
    extract_image_payload,
    resolve_api_key,
)
from GF_Libs.FillServiceLib.generation_session import (
    GenerationResult,
    GenerationSession,
    validate_request,
)

__all__ = [
    "FillServiceError",
    "GeminiFillClient",
    "build_fill_prompt",
    "extract_image_payload",
    "resolve_api_key",
    "GenerationResult",
    "GenerationSession",
    "validate_request",
]
