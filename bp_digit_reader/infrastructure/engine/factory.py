"""
Inference Engine Factory

Factory for creating inference engine instances.
"""

from typing import Dict, Any
from enum import Enum

from ...domain.ports.inference_engine import InferenceEnginePort
from ...domain.value_objects.model_metadata import ModelMetadata
from .yolo_engine import YOLOTensorEngine, StaticTensorEngine


class EngineType(Enum):
    """Available inference engine implementations."""

    YOLO = "yolo"
    STATIC = "static"


class InferenceEngineFactory:
    """
    Factory for creating inference engine instances.

    Usage:
        # Exported YOLOv8 digit model
        engine = InferenceEngineFactory.create(
            EngineType.YOLO,
            model_path="models/bp_digits.tflite"
        )

        # Replay a recorded output tensor
        engine = InferenceEngineFactory.create(
            EngineType.STATIC,
            tensor_path="frames/frame_001.npy",
            metadata=metadata
        )
    """

    @staticmethod
    def create(
        engine_type: EngineType,
        **kwargs
    ) -> InferenceEnginePort:
        """
        Create an inference engine instance.

        Args:
            engine_type: Type of engine to create
            **kwargs: Additional configuration options
                For YOLO:
                - model_path: Path to the exported model (required)
                - device: Inference device ('cpu', 'cuda')
                - input_size: Fallback square input size
                For STATIC:
                - output or tensor_path: Tensor to replay
                - metadata: ModelMetadata describing the tensor

        Returns:
            InferenceEnginePort implementation
        """
        if engine_type == EngineType.YOLO:
            model_path = kwargs.get("model_path")
            if not model_path:
                raise ValueError("model_path required for YOLO engine")

            return YOLOTensorEngine(
                model_path=model_path,
                device=kwargs.get("device", "cpu"),
                input_size=kwargs.get("input_size", 640)
            )

        elif engine_type == EngineType.STATIC:
            metadata = kwargs.get("metadata")
            if not isinstance(metadata, ModelMetadata):
                raise ValueError("metadata required for STATIC engine")

            if kwargs.get("tensor_path"):
                return StaticTensorEngine.from_file(kwargs["tensor_path"], metadata)
            if kwargs.get("output") is None:
                raise ValueError("output or tensor_path required for STATIC engine")
            return StaticTensorEngine(kwargs["output"], metadata)

        else:
            raise ValueError(f"Unknown engine type: {engine_type}")

    @staticmethod
    def create_from_config(config: Dict[str, Any]) -> InferenceEnginePort:
        """
        Create engine from configuration dictionary.

        Args:
            config: Configuration dictionary with 'type' and other options

        Returns:
            InferenceEnginePort implementation
        """
        options = dict(config)
        engine_type = EngineType(options.pop("type", "yolo"))
        return InferenceEngineFactory.create(engine_type, **options)
