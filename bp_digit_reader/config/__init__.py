"""
Configuration Module

Application settings and configuration management.
"""

from .settings import (
    AppConfig,
    ModelConfig,
    DetectionConfig,
    LoggingConfig,
)

__all__ = [
    "AppConfig",
    "ModelConfig",
    "DetectionConfig",
    "LoggingConfig",
]
