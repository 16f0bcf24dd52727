"""
Utility modules for the infrastructure layer.
"""

from .image_processing import (
    bytes_to_cv2,
    cv2_to_rgb,
    resize_to_square,
    to_input_tensor,
    preprocess_frame,
)

__all__ = [
    "bytes_to_cv2",
    "cv2_to_rgb",
    "resize_to_square",
    "to_input_tensor",
    "preprocess_frame",
]
