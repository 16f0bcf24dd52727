"""
Infrastructure Layer

Concrete implementations of domain ports (adapters).
Contains the inference engine integrations and image preprocessing.
"""

from .engine import (
    YOLOTensorEngine,
    StaticTensorEngine,
    InferenceEngineFactory,
    EngineType,
    load_labels,
)
from .utils import preprocess_frame

__all__ = [
    # Engines
    "YOLOTensorEngine",
    "StaticTensorEngine",
    "InferenceEngineFactory",
    "EngineType",
    # Labels
    "load_labels",
    # Preprocessing
    "preprocess_frame",
]
