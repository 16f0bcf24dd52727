"""
Inference Engine Port

Abstract interface for the object-detection runtime that feeds the pipeline.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..value_objects.model_metadata import ModelMetadata


class InferenceEnginePort(ABC):
    """
    Port (interface) for detection-model runtimes.

    The engine owns model weights and native buffers. Callers must call
    ``setup()`` before ``run()`` and ``clear()`` exactly once when done.
    Implementations are not thread-safe; one engine serves one worker.
    """

    @abstractmethod
    def setup(self) -> ModelMetadata:
        """
        Load the model and report its tensor shapes.

        Returns:
            ModelMetadata with input size, output channels/elements and the
            output tensor type (labels are attached by the caller)

        Raises:
            ModelLoadError: If the model cannot be loaded
            UnsupportedTensorTypeError: If the output type cannot be decoded
        """
        pass

    @abstractmethod
    def run(self, input_tensor: np.ndarray) -> np.ndarray:
        """
        Run one inference.

        Args:
            input_tensor: float32 NCHW batch of one image scaled to [0, 1]

        Returns:
            Raw output tensor, (1, channels, elements) or flattened, with
            geometry normalized to the input frame

        Raises:
            InferenceError: If the runtime fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Release the model and its buffers."""
        pass

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """Whether ``setup()`` has completed and ``clear()`` has not been called."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the name/identifier of the underlying model."""
        pass
