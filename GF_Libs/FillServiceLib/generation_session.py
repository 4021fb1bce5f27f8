"""
Generation requests against the fill service.

Validates a request, keeps at most one call in flight and turns every
outcome into a GenerationResult. Failures are surfaced as a single
message string; nothing is retried, the user has to trigger generation
again.

Classes:
    GenerationResult: Outcome of one generation request
    GenerationSession: Single-flight coordinator around a fill client
"""

from dataclasses import dataclass
from typing import Any, Optional
import logging
import threading

from GF_Libs.FillServiceLib.fill_client import FillServiceError
from GF_Libs.ImageIOLib.image_codec import encode_base64_png
from GF_Libs.constants import (
    MSG_GENERATION_BUSY,
    MSG_GENERATION_FAILED,
    MSG_MISSING_MASK,
    MSG_MISSING_PROMPT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a generation request.

    Attributes:
        success: True if the service returned an image
        image: Filled RGBA PIL Image on success
        error: Human-readable message on failure
    """
    success: bool
    image: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, message: str) -> "GenerationResult":
        return cls(success=False, error=message)


def validate_request(mask: Optional[Any], prompt: Optional[str]) -> Optional[str]:
    """Return the message explaining why a request cannot be sent, or None."""
    if mask is None:
        return MSG_MISSING_MASK
    if not prompt or not prompt.strip():
        return MSG_MISSING_PROMPT
    return None


class GenerationSession:
    """
    Sends masks to a fill client, one request at a time.

    The client only needs a generate_fill(image_base64, prompt) method.
    A request made while another one is running is refused immediately.
    """

    def __init__(self, client: Any):
        if not hasattr(client, "generate_fill"):
            raise TypeError(f"client must provide generate_fill(), got {type(client)}")

        self.client = client
        self._lock = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    def generate(self, mask: Optional[Any], prompt: Optional[str]) -> GenerationResult:
        """
        Request a fill for mask.

        Args:
            mask: RGBA PIL Image from the mask compositor (None if no image)
            prompt: Description of what to generate

        Returns:
            GenerationResult with the image or an error message
        """
        problem = validate_request(mask, prompt)
        if problem is not None:
            logger.warning(f"Generation request rejected: {problem}")
            return GenerationResult.failed(problem)

        if not self._lock.acquire(blocking=False):
            logger.warning("Generation request refused: another request is in flight")
            return GenerationResult.failed(MSG_GENERATION_BUSY)

        try:
            image = self.client.generate_fill(encode_base64_png(mask), prompt)
        except FillServiceError as e:
            logger.error(f"Fill service failed: {e}")
            return GenerationResult.failed(str(e) or MSG_GENERATION_FAILED)
        except Exception:
            logger.exception("Unexpected error during generation")
            return GenerationResult.failed(MSG_GENERATION_FAILED)
        finally:
            self._lock.release()

        return GenerationResult(success=True, image=image)
