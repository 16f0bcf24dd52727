"""
Domain Ports

Abstract interfaces implemented by the infrastructure layer.
"""

from .inference_engine import InferenceEnginePort

__all__ = [
    "InferenceEnginePort",
]
