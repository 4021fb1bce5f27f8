"""
GF_Libs - Generative Fill Library Modules

This package contains core functionality for the Generative Fill project,
organized into specialized sub-packages:

- MaskingLib: Stroke capture, overlay rendering and alpha mask compositing
- ImageIOLib: Image decoding, PNG/base64 encoding and result saving
- FillServiceLib: Client and request coordination for the remote fill service
- EditorLib: PyQt5 editor window hosting the masking session
"""

__version__ = "0.1.0"
