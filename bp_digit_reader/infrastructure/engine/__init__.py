"""Inference engine adapters."""

from .yolo_engine import YOLOTensorEngine, StaticTensorEngine
from .factory import InferenceEngineFactory, EngineType
from .labels import parse_labels, load_labels

__all__ = [
    "YOLOTensorEngine",
    "StaticTensorEngine",
    "InferenceEngineFactory",
    "EngineType",
    "parse_labels",
    "load_labels",
]
