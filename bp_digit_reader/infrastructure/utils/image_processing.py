"""
OpenCV-based Image Processing Utilities

Turns captured photos into the detector's square input tensor.
"""

import cv2
import numpy as np
from typing import Tuple
import logging

logger = logging.getLogger(__name__)


def bytes_to_cv2(image_bytes: bytes) -> np.ndarray:
    """
    Convert encoded image bytes to OpenCV BGR format.

    Args:
        image_bytes: Raw image bytes (JPEG, PNG, etc.)

    Returns:
        OpenCV image in BGR format (numpy array)
    """
    nparr = np.frombuffer(image_bytes, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

    if img is None:
        raise ValueError("Failed to decode image from bytes")

    return img


def cv2_to_rgb(img: np.ndarray) -> np.ndarray:
    """Convert BGR (OpenCV default) to RGB."""
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def resize_to_square(
    img: np.ndarray,
    width: int,
    height: int,
    interpolation: int = cv2.INTER_NEAREST
) -> np.ndarray:
    """
    Stretch an image to the detector input size.

    The aspect ratio is not preserved and no letterbox padding is added, so
    normalized detector coordinates map straight back onto the original photo.

    Args:
        img: Input image
        width: Target width in pixels
        height: Target height in pixels
        interpolation: OpenCV interpolation method (nearest by default)
    """
    src_height, src_width = img.shape[:2]
    if (src_width, src_height) == (width, height):
        return img

    logger.debug(f"Resizing frame from {src_width}x{src_height} to {width}x{height}")
    return cv2.resize(img, (width, height), interpolation=interpolation)


def to_input_tensor(rgb: np.ndarray) -> np.ndarray:
    """
    Convert an RGB uint8 image to a float32 NCHW batch scaled to [0, 1].

    Args:
        rgb: HxWx3 RGB image

    Returns:
        Array of shape (1, 3, H, W)
    """
    tensor = rgb.astype(np.float32) / 255.0
    tensor = np.transpose(tensor, (2, 0, 1))
    return np.ascontiguousarray(tensor[np.newaxis, ...])


def preprocess_frame(
    img: np.ndarray,
    input_size: Tuple[int, int],
    is_bgr: bool = True
) -> np.ndarray:
    """
    Full preprocessing for one frame.

    Args:
        img: Decoded frame (BGR from OpenCV, or RGB when ``is_bgr`` is False)
        input_size: Detector input (width, height)
        is_bgr: Whether the frame uses OpenCV's BGR channel order

    Returns:
        float32 NCHW input tensor
    """
    if img is None or img.size == 0:
        raise ValueError("Cannot preprocess an empty frame")

    rgb = cv2_to_rgb(img) if is_bgr or img.ndim == 2 else img
    resized = resize_to_square(rgb, input_size[0], input_size[1])
    return to_input_tensor(resized)
