"""
Tests for GenerationSession.

Tests cover:
- Request validation
- Success and failure results
- Single-flight behaviour
"""

import threading
import unittest
from unittest.mock import MagicMock

from PIL import Image

from GF_Libs.FillServiceLib.fill_client import FillServiceError, GeminiFillClient
from GF_Libs.FillServiceLib.generation_session import (
    GenerationResult,
    GenerationSession,
    validate_request,
)
from GF_Libs.ImageIOLib.image_codec import encode_base64_png
from GF_Libs.constants import (
    MSG_GENERATION_BUSY,
    MSG_GENERATION_FAILED,
    MSG_MISSING_MASK,
    MSG_MISSING_PROMPT,
)


class TestValidateRequest(unittest.TestCase):
    """Test request validation."""

    def setUp(self):
        self.mask = Image.new("RGBA", (4, 4))

    def test_missing_mask(self):
        self.assertEqual(validate_request(None, "grass"), MSG_MISSING_MASK)

    def test_blank_prompt(self):
        self.assertEqual(validate_request(self.mask, "   "), MSG_MISSING_PROMPT)
        self.assertEqual(validate_request(self.mask, None), MSG_MISSING_PROMPT)

    def test_valid(self):
        self.assertIsNone(validate_request(self.mask, "grass"))


class TestGenerationSession(unittest.TestCase):
    """Test GenerationSession with a mocked client."""

    def setUp(self):
        self.client = MagicMock()
        self.session = GenerationSession(self.client)
        self.mask = Image.new("RGBA", (8, 8), (255, 255, 255, 0))
        self.filled = Image.new("RGBA", (8, 8), (0, 0, 255, 255))

    def test_rejects_client_without_generate_fill(self):
        with self.assertRaises(TypeError):
            GenerationSession(object())

    def test_success(self):
        self.client.generate_fill.return_value = self.filled

        result = self.session.generate(self.mask, "a lake")

        self.assertTrue(result.success)
        self.assertIs(result.image, self.filled)
        self.assertIsNone(result.error)
        self.client.generate_fill.assert_called_once_with(encode_base64_png(self.mask), "a lake")

    def test_invalid_request_not_sent(self):
        result = self.session.generate(self.mask, "")

        self.assertEqual(result, GenerationResult.failed(MSG_MISSING_PROMPT))
        self.client.generate_fill.assert_not_called()

    def test_service_error_becomes_message(self):
        self.client.generate_fill.side_effect = FillServiceError("AI did not return an image.")

        result = self.session.generate(self.mask, "a lake")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "AI did not return an image.")
        self.assertFalse(self.session.is_busy)

    def test_empty_service_error_uses_default(self):
        self.client.generate_fill.side_effect = FillServiceError()

        result = self.session.generate(self.mask, "a lake")

        self.assertEqual(result.error, MSG_GENERATION_FAILED)

    def test_unexpected_error_becomes_default_message(self):
        self.client.generate_fill.side_effect = KeyError("boom")

        with self.assertLogs("GF_Libs.FillServiceLib.generation_session", level="ERROR"):
            result = self.session.generate(self.mask, "a lake")

        self.assertEqual(result, GenerationResult.failed(MSG_GENERATION_FAILED))
        self.assertFalse(self.session.is_busy)

    def test_malformed_service_response_becomes_message(self):
        """Test that a JSON body which is not an object ends as a failed result."""
        http = MagicMock()
        response = MagicMock()
        response.status_code = 200
        response.json.return_value = ["unexpected"]
        http.post.return_value = response
        session = GenerationSession(GeminiFillClient(api_key="secret", http_session=http))

        result = session.generate(self.mask, "a lake")

        self.assertFalse(result.success)
        self.assertIn("Unexpected response from AI", result.error)
        self.assertFalse(session.is_busy)

    def test_no_retry(self):
        self.client.generate_fill.side_effect = FillServiceError("quota exceeded")

        self.session.generate(self.mask, "a lake")

        self.assertEqual(self.client.generate_fill.call_count, 1)

    def test_second_request_refused_while_busy(self):
        started = threading.Event()
        release = threading.Event()

        def slow_fill(image_base64, prompt):
            started.set()
            release.wait(5)
            return self.filled

        self.client.generate_fill.side_effect = slow_fill
        results = []
        worker = threading.Thread(
            target=lambda: results.append(self.session.generate(self.mask, "a lake"))
        )
        worker.start()
        self.assertTrue(started.wait(5))

        try:
            self.assertTrue(self.session.is_busy)
            refused = self.session.generate(self.mask, "a lake")
        finally:
            release.set()
            worker.join(5)

        self.assertEqual(refused.error, MSG_GENERATION_BUSY)
        self.assertTrue(results[0].success)
        self.assertEqual(self.client.generate_fill.call_count, 1)
        self.assertFalse(self.session.is_busy)


if __name__ == "__main__":
    unittest.main()
