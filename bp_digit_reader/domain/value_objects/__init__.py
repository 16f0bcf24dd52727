"""
Value Objects

Immutable objects that represent domain concepts with no identity.
"""

from .detection_box import DetectionBox
from .image_data import ImageData
from .model_metadata import (
    ModelMetadata,
    DetectionThresholds,
    SUPPORTED_TENSOR_TYPES,
    DEFAULT_MARKER_LABEL,
    GEOMETRY_CHANNELS,
)

__all__ = [
    "DetectionBox",
    "ImageData",
    "ModelMetadata",
    "DetectionThresholds",
    "SUPPORTED_TENSOR_TYPES",
    "DEFAULT_MARKER_LABEL",
    "GEOMETRY_CHANNELS",
]
