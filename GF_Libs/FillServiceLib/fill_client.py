"""
Fill service client for Generative Fill.

Sends a masked image (transparent where the user painted) together with a
text prompt to the image model's generateContent endpoint and returns the
filled image. Every failure is raised as a FillServiceError carrying a
human-readable message; the client never retries.

Classes:
    FillServiceError: Raised for any failure of the remote fill call
    GeminiFillClient: HTTP client for the generateContent endpoint

Functions:
    resolve_api_key: Find the API key in the environment
    build_fill_prompt: Instruction text sent alongside the masked image
    extract_image_payload: Pull the base64 image out of a response body
"""

from typing import Any, Dict, Mapping, Optional
import logging
import os

import requests

from GF_Libs.ImageIOLib.image_codec import decode_base64_image, strip_data_url
from GF_Libs.constants import (
    API_KEY_ENV_VARS,
    FILL_MODEL_NAME,
    FILL_PROMPT_TEMPLATE,
    FILL_REQUEST_TIMEOUT,
    FILL_SERVICE_BASE_URL,
    PNG_MIME_TYPE,
)

logger = logging.getLogger(__name__)

MSG_MISSING_API_KEY = "API Key is missing. Please check your environment configuration."
MSG_NO_RESPONSE = "No response from AI."
MSG_NO_IMAGE = "AI did not return an image."
MSG_MALFORMED_RESPONSE = "Unexpected response from AI"


class FillServiceError(RuntimeError):
    """Failure of the remote fill service, with a user-facing message."""


def resolve_api_key(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Look up the API key.

    Args:
        environ: Mapping to search (defaults to os.environ)

    Returns:
        The first non-empty value among API_KEY_ENV_VARS, or None
    """
    env = os.environ if environ is None else environ
    for name in API_KEY_ENV_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def build_fill_prompt(prompt: str) -> str:
    return FILL_PROMPT_TEMPLATE.format(prompt=prompt)


def extract_image_payload(body: Dict[str, Any]) -> str:
    """
    Find the generated image in a generateContent response.

    Args:
        body: Decoded JSON response

    Returns:
        Base64 image data of the first inline image part

    Raises:
        FillServiceError: If the body is not a JSON object, there is no
                          candidate, the model answered with text only,
                          or no image part exists
    """
    if not isinstance(body, dict):
        raise FillServiceError(
            f"{MSG_MALFORMED_RESPONSE}: expected an object, got {type(body).__name__}"
        )

    candidates = body.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        raise FillServiceError(MSG_NO_RESPONSE)

    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise FillServiceError(MSG_NO_IMAGE)
    parts = [part for part in parts if isinstance(part, dict)]

    for part in parts:
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict) and isinstance(inline.get("data"), str) and inline["data"]:
            return inline["data"]

    for part in parts:
        if part.get("text"):
            raise FillServiceError(f"AI Response (Text only): {part['text']}")

    raise FillServiceError(MSG_NO_IMAGE)


class GeminiFillClient:
    """
    Client for the image model's generateContent REST endpoint.

    Example:
        >>> client = GeminiFillClient()
        >>> filled = client.generate_fill(mask_base64, "a red balloon")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = FILL_MODEL_NAME,
        base_url: str = FILL_SERVICE_BASE_URL,
        timeout: float = FILL_REQUEST_TIMEOUT,
        http_session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http_session

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, image_base64: str, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {
                            "inlineData": {
                                "data": strip_data_url(image_base64),
                                "mimeType": PNG_MIME_TYPE,
                            }
                        },
                        {"text": build_fill_prompt(prompt)},
                    ]
                }
            ]
        }

    def generate_fill(self, image_base64: str, prompt: str) -> Any:
        """
        Ask the model to fill the transparent area of an image.

        Args:
            image_base64: PNG as base64 (a data URL prefix is accepted)
            prompt: What to generate in the transparent area

        Returns:
            The filled image as an RGBA PIL Image

        Raises:
            FillServiceError: On missing credentials, transport or HTTP
                              errors, or a response without an image
        """
        api_key = self.api_key or resolve_api_key()
        if not api_key:
            raise FillServiceError(MSG_MISSING_API_KEY)

        logger.info(f"Requesting fill from {self.model}")
        body = self._post(self.build_payload(image_base64, prompt), api_key)

        try:
            image = decode_base64_image(extract_image_payload(body))
        except ValueError as e:
            raise FillServiceError(f"AI returned an unreadable image: {str(e)}") from e

        logger.info(f"Fill completed: {image.width}x{image.height}")
        return image

    def _post(self, payload: Dict[str, Any], api_key: str) -> Dict[str, Any]:
        http = self._http or requests.Session()
        headers = {"x-goog-api-key": api_key, "Content-Type": "application/json"}

        try:
            response = http.post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise FillServiceError(f"Fill service request failed: {e}") from e
        finally:
            if self._http is None:
                http.close()

        if response.status_code >= 400:
            raise FillServiceError(self._error_message(response))

        try:
            return response.json()
        except ValueError as e:
            raise FillServiceError(f"Unable to parse fill service response: {e}") from e

    @staticmethod
    def _error_message(response: Any) -> str:
        try:
            detail = response.json().get("error", {}).get("message")
        except (ValueError, AttributeError):
            detail = None
        return detail or f"Fill service returned HTTP {response.status_code}"
