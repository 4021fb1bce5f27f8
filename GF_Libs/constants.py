"""
Constants and configuration values for Generative Fill.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Viewport constants
VIEWPORT_PADDING = 32
MAX_DISPLAY_WIDTH = 800
MAX_DISPLAY_HEIGHT = 600

# Brush constants
MIN_BRUSH_SIZE = 5
MAX_BRUSH_SIZE = 150
DEFAULT_BRUSH_SIZE = 40
BRUSH_SIZE_STEP = 5

# Overlay highlight color (RGBA)
OVERLAY_STROKE_COLOR = (255, 0, 0, 128)

# Raster modes
RASTER_MODE = "RGBA"
COVERAGE_MODE = "L"

# File naming
DEFAULT_OUTPUT_FORMAT = "PNG"
DEFAULT_RESULT_FILENAME = "generated-fill.png"
PNG_MIME_TYPE = "image/png"
DATA_URL_PREFIX = "data:image/png;base64,"

# Supported source formats
SUPPORTED_SOURCE_IMAGES = {".png", ".jpg", ".jpeg", ".webp"}
SOURCE_IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.webp)"

# Fill service
FILL_MODEL_NAME = "gemini-2.5-flash-image"
FILL_SERVICE_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
FILL_REQUEST_TIMEOUT = 120
API_KEY_ENV_VARS = ("API_KEY", "GEMINI_API_KEY")
FILL_PROMPT_TEMPLATE = (
    "Edit this image. Fill the transparent/empty areas (or the area described) "
    "with: {prompt}. Ensure the lighting and perspective match the original "
    "image seamlessly."
)

# User-facing messages
MSG_MISSING_MASK = "Please upload an image and paint a mask over the area to change."
MSG_MISSING_PROMPT = "Please describe what you want to add in the prompt box."
MSG_GENERATION_BUSY = "A generation request is already in progress."
MSG_GENERATION_FAILED = "Something went wrong during generation."
