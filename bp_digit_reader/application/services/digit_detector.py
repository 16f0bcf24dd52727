"""
Digit Detector Service

High-level application service that reads a blood-pressure monitor display.
"""

from dataclasses import replace
from typing import Optional, Sequence
from pathlib import Path
import logging
import time
import uuid

import numpy as np

from ..pipeline.orchestrator import ReadingPipeline, PipelineConfig
from ...config.settings import AppConfig
from ...cross_cutting.error_handling import handle_exception, ErrorHandler
from ...cross_cutting.logging import FrameLogger, setup_logging
from ...cross_cutting.validation import validate_image, validate_image_file
from ...domain.ports.inference_engine import InferenceEnginePort
from ...domain.value_objects.image_data import ImageData
from ...domain.value_objects.model_metadata import ModelMetadata, DetectionThresholds
from ...domain.entities.detection_result import DetectionResult
from ...domain.services.tensor_decoder import check_tensor_type, dequantize
from ...domain.exceptions import (
    InvalidImageError,
    InvalidInputError,
    LabelCountMismatchError,
)
from ...infrastructure.engine.factory import InferenceEngineFactory
from ...infrastructure.engine.labels import load_labels
from ...infrastructure.utils.image_processing import bytes_to_cv2, preprocess_frame


logger = logging.getLogger(__name__)


class DigitDetector:
    """
    Application service for reading systolic, diastolic and pulse values.

    This is the main entry point for external consumers. Lifecycle:
    ``setup()`` loads labels and the model, ``detect*()`` processes frames,
    ``clear()`` releases the model. Detection before ``setup()`` or after
    ``clear()`` returns an UNAVAILABLE result instead of raising.

    Usage:
        detector = DigitDetector.from_config(AppConfig.from_env())
        detector.setup()

        result = detector.detect_file("photos/monitor.jpg")
        if result.has_detections:
            systolic, diastolic, pulse = result.values

        detector.clear()
    """

    def __init__(
        self,
        engine: InferenceEnginePort,
        labels_path: Optional[str] = None,
        labels: Optional[Sequence[str]] = None,
        thresholds: Optional[DetectionThresholds] = None,
        quant_scale: float = 1.0 / 255.0,
        quant_zero_point: int = 0
    ):
        """
        Initialize the detector.

        Args:
            engine: Inference engine running the digit model
            labels_path: Label file, read at setup (takes precedence over ``labels``)
            labels: Label table given directly
            thresholds: Pipeline constants
            quant_scale: Dequantization scale for integer outputs
            quant_zero_point: Dequantization zero point for integer outputs
        """
        self.engine = engine
        self.labels_path = labels_path
        self._labels = tuple(labels) if labels else ()
        self.pipeline = ReadingPipeline(PipelineConfig(thresholds=thresholds or DetectionThresholds()))
        self.quant_scale = quant_scale
        self.quant_zero_point = quant_zero_point
        self._metadata = ModelMetadata.unavailable()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @classmethod
    def from_config(cls, config: AppConfig) -> "DigitDetector":
        """Configure logging, then build the engine and detector described by an AppConfig."""
        setup_logging(
            level=config.logging.level,
            log_file=config.logging.log_file,
            format_string=config.logging.format
        )
        engine = InferenceEngineFactory.create_from_config({
            "type": config.model.type,
            "model_path": config.model.model_path,
            "device": config.model.device,
            "input_size": config.model.input_size,
        })
        return cls(
            engine=engine,
            labels_path=config.model.labels_path,
            thresholds=config.detection.to_thresholds(),
            quant_scale=config.detection.quant_scale,
            quant_zero_point=config.detection.quant_zero_point,
        )

    @property
    def metadata(self) -> ModelMetadata:
        return self._metadata

    @property
    def is_ready(self) -> bool:
        return self._metadata.is_available and self.engine.is_ready

    def setup(self) -> ModelMetadata:
        """
        Load labels and the model.

        Returns:
            Metadata of the loaded model

        Raises:
            LabelFileError: If the label file cannot be read
            ModelLoadError: If the model cannot be loaded
            UnsupportedTensorTypeError: If the output tensor type is not decodable
            LabelCountMismatchError: If labels and class channels disagree
        """
        labels = load_labels(self.labels_path) if self.labels_path else self._labels

        engine_metadata = self.engine.setup()
        output_dtype = check_tensor_type(engine_metadata.output_dtype)

        if labels and len(labels) != engine_metadata.num_classes:
            raise LabelCountMismatchError(len(labels), engine_metadata.num_classes)
        if not labels:
            self.logger.warning("No labels loaded, class indices are used as names")

        self._labels = tuple(labels)
        self._metadata = replace(
            engine_metadata,
            labels=self._labels,
            output_dtype=output_dtype,
            quant_scale=self.quant_scale,
            quant_zero_point=self.quant_zero_point,
        )
        self.logger.info(f"Detector ready using {self.engine.model_name}: {self._metadata}")
        return self._metadata

    def _detect(self, pixels: np.ndarray, is_bgr: bool) -> DetectionResult:
        if not self.is_ready:
            self.logger.debug("Detector not set up, frame ignored")
            return DetectionResult.unavailable()

        if not isinstance(pixels, np.ndarray) or pixels.ndim not in (2, 3) or pixels.size == 0:
            raise InvalidInputError("pixels", "expected a non-empty HxW or HxWxC image array")

        frame = FrameLogger(str(uuid.uuid4()))
        metadata = self._metadata

        input_tensor = preprocess_frame(
            pixels,
            (metadata.input_width, metadata.input_height),
            is_bgr=is_bgr
        )

        inference_start = time.perf_counter()
        raw_output = self.engine.run(input_tensor)
        inference_time_ms = (time.perf_counter() - inference_start) * 1000
        frame.metric("inference", inference_time_ms, "ms")

        output = dequantize(
            raw_output,
            dtype=metadata.output_dtype,
            scale=metadata.quant_scale,
            zero_point=metadata.quant_zero_point
        )
        result = self.pipeline.run(output, metadata)
        result = result.with_timing(inference_time_ms, frame.elapsed_ms())
        frame.result(str(result))
        return result

    @handle_exception(default_factory=DetectionResult.unavailable)
    def detect_array(self, pixels: np.ndarray, is_bgr: bool = True) -> DetectionResult:
        """
        Read the display from a decoded frame.

        Args:
            pixels: HxWx3 (or HxW grayscale) uint8 image
            is_bgr: Whether the frame uses OpenCV's BGR channel order

        Returns:
            DetectionResult; UNAVAILABLE on any per-frame failure
        """
        return self._detect(pixels, is_bgr)

    @handle_exception(default_factory=DetectionResult.unavailable)
    def detect(self, image: ImageData) -> DetectionResult:
        """
        Read the display from an encoded photo.

        Args:
            image: Encoded image data

        Returns:
            DetectionResult; UNAVAILABLE on any per-frame failure
        """
        if not self.is_ready:
            return DetectionResult.unavailable()

        is_valid, error = validate_image(image)
        if not is_valid:
            raise InvalidImageError(error)

        return self._detect(bytes_to_cv2(image.data), is_bgr=True)

    def detect_file(self, file_path: str) -> DetectionResult:
        """
        Read the display from a photo on disk.

        Raises:
            InvalidImageError: If the file is missing or not a supported image
        """
        is_valid, error = validate_image_file(file_path)
        if not is_valid:
            raise InvalidImageError(error)

        self.logger.info(f"Reading display from {Path(file_path).name}")
        return self.detect(ImageData.from_file(file_path))

    def clear(self) -> None:
        """Release the model; later detections return UNAVAILABLE."""
        with ErrorHandler(self.logger, context="release", suppress=True):
            self.engine.clear()
        self._metadata = ModelMetadata.unavailable()
