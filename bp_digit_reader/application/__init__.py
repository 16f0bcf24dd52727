"""
Application Layer

Pipeline orchestration, context management, and the detector service.
"""

from .pipeline import ReadingPipeline, PipelineContext
from .services import DigitDetector

__all__ = [
    "ReadingPipeline",
    "PipelineContext",
    "DigitDetector",
]
