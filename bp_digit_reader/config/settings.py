"""
Application Configuration

Settings and configuration management for the display reader.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import os

from dotenv import load_dotenv

from ..domain.value_objects.model_metadata import DetectionThresholds, DEFAULT_MARKER_LABEL


ENV_PREFIX = "BP_READER_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class ModelConfig:
    """Inference engine configuration."""

    type: str = "yolo"  # yolo, static
    model_path: Optional[str] = None
    labels_path: Optional[str] = None
    device: str = "cpu"  # cpu, cuda, mps
    input_size: int = 640  # used when the exported model does not record imgsz


@dataclass
class DetectionConfig:
    """Reading pipeline configuration."""

    confidence_threshold: float = 0.4
    iou_threshold: float = 0.5
    containment_threshold: float = 0.75
    max_digits_per_value: int = 3
    marker_label: str = DEFAULT_MARKER_LABEL
    exclusive_assignment: bool = False
    quant_scale: float = 1.0 / 255.0
    quant_zero_point: int = 0

    def to_thresholds(self) -> DetectionThresholds:
        """Freeze the pipeline constants for use by the stages."""
        return DetectionThresholds(
            confidence_threshold=self.confidence_threshold,
            iou_threshold=self.iou_threshold,
            containment_threshold=self.containment_threshold,
            max_digits_per_value=self.max_digits_per_value,
            marker_label=self.marker_label,
            exclusive_assignment=self.exclusive_assignment,
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[str] = None
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all component configurations.
    """

    model: ModelConfig = field(default_factory=ModelConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AppConfig":
        """
        Create configuration from environment variables.

        Variables from ``env_file`` (or a discovered ``.env``) are loaded
        first without overriding the process environment.

        Environment variables:
            BP_READER_MODEL_TYPE: Engine type (yolo/static)
            BP_READER_MODEL_PATH: Path to the exported detection model
            BP_READER_LABELS_PATH: Path to the label file
            BP_READER_DEVICE: Inference device (cpu/cuda/mps)
            BP_READER_CONFIDENCE_THRESHOLD: Minimum box confidence
            BP_READER_IOU_THRESHOLD: Suppression overlap threshold
            BP_READER_EXCLUSIVE_DIGITS: Assign each digit to one marker only
            BP_READER_LOG_LEVEL: Logging level
            BP_READER_LOG_FILE: Optional log file path
        """
        if env_file:
            load_dotenv(dotenv_path=env_file)
        else:
            load_dotenv()

        config = cls()

        def env(name: str) -> Optional[str]:
            return os.getenv(f"{ENV_PREFIX}{name}")

        # Model
        if model_type := env("MODEL_TYPE"):
            config.model.type = model_type
        if model_path := env("MODEL_PATH"):
            config.model.model_path = model_path
        if labels_path := env("LABELS_PATH"):
            config.model.labels_path = labels_path
        if device := env("DEVICE"):
            config.model.device = device

        # Detection
        if confidence := env("CONFIDENCE_THRESHOLD"):
            config.detection.confidence_threshold = float(confidence)
        if iou := env("IOU_THRESHOLD"):
            config.detection.iou_threshold = float(iou)
        if exclusive := env("EXCLUSIVE_DIGITS"):
            config.detection.exclusive_assignment = exclusive.strip().lower() in _TRUE_VALUES

        # Logging
        if log_level := env("LOG_LEVEL"):
            config.logging.level = log_level
        if log_file := env("LOG_FILE"):
            config.logging.log_file = log_file

        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        config = cls()

        for section in ("model", "detection", "logging"):
            if section not in data:
                continue
            target = getattr(config, section)
            for key, value in data[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "model": {
                "type": self.model.type,
                "model_path": self.model.model_path,
                "labels_path": self.model.labels_path,
                "device": self.model.device,
                "input_size": self.model.input_size,
            },
            "detection": {
                "confidence_threshold": self.detection.confidence_threshold,
                "iou_threshold": self.detection.iou_threshold,
                "containment_threshold": self.detection.containment_threshold,
                "max_digits_per_value": self.detection.max_digits_per_value,
                "marker_label": self.detection.marker_label,
                "exclusive_assignment": self.detection.exclusive_assignment,
                "quant_scale": self.detection.quant_scale,
                "quant_zero_point": self.detection.quant_zero_point,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
            },
        }
