"""
Application Services

High-level services for external consumers.
"""

from .digit_detector import DigitDetector

__all__ = ["DigitDetector"]
