"""
Cross-Cutting Concerns

Utilities and services that span across multiple layers.
"""

from .logging import setup_logging, get_logger, FrameLogger
from .validation import validate_image, validate_image_file
from .error_handling import handle_exception, ErrorHandler

__all__ = [
    "setup_logging",
    "get_logger",
    "FrameLogger",
    "validate_image",
    "validate_image_file",
    "handle_exception",
    "ErrorHandler",
]
