"""
YOLO Tensor Engine

Inference engine built on ultralytics' AutoBackend, which runs YOLOv8
detection exports (.pt, .onnx, .tflite, ...) and returns the raw
(1, 4 + classes, candidates) output tensor without post-processing.
"""

from typing import Any, Union, Sequence
from pathlib import Path
import logging

import numpy as np

from ...domain.ports.inference_engine import InferenceEnginePort
from ...domain.value_objects.model_metadata import ModelMetadata
from ...domain.services.tensor_decoder import check_tensor_type
from ...domain.exceptions import ModelLoadError, InferenceError


logger = logging.getLogger(__name__)


class YOLOTensorEngine(InferenceEnginePort):
    """
    Inference engine for an exported YOLOv8 digit model.

    AutoBackend reports box geometry in input-frame pixels for every export
    format and dequantizes integer exports itself; ``run`` divides the
    geometry by the input size and always returns float32, so the recorded
    output type is float32 whatever the export stores.

    Attributes:
        model_path: Path to the exported model
        device: Device to run inference on ('cpu', 'cuda', 'mps')
        input_size: Square input size used when the export records none
    """

    def __init__(
        self,
        model_path: str,
        device: str = "cpu",
        input_size: int = 640
    ):
        self._model_path = model_path
        self._device = device
        self._input_size = input_size
        self._backend = None
        self._torch_device = None
        self._metadata = ModelMetadata.unavailable()

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _resolve_input_size(self, backend: Any) -> Sequence[int]:
        """Return (height, width) recorded by the export, or the configured size."""
        imgsz = getattr(backend, "imgsz", None)
        if isinstance(imgsz, int):
            return (imgsz, imgsz)
        if isinstance(imgsz, (list, tuple)) and len(imgsz) == 2:
            return (int(imgsz[0]), int(imgsz[1]))
        return (self._input_size, self._input_size)

    @staticmethod
    def _first_output(raw: Any) -> Any:
        """AutoBackend may return a list/tuple; the detection head comes first."""
        while isinstance(raw, (list, tuple)):
            if not raw:
                raise InferenceError("Model returned no output tensors")
            raw = raw[0]
        return raw

    @staticmethod
    def _to_numpy(output: Any) -> np.ndarray:
        if hasattr(output, "detach"):
            output = output.detach().cpu().numpy()
        return np.asarray(output)

    def setup(self) -> ModelMetadata:
        """Load the model and learn its output shape from a warm-up pass."""
        if self._backend is not None:
            return self._metadata

        if not self._model_path:
            raise ModelLoadError("No model path provided")
        if not Path(self._model_path).exists():
            raise ModelLoadError(
                f"Model file not found: {self._model_path}",
                model_path=self._model_path
            )

        try:
            import torch
            from ultralytics.nn.autobackend import AutoBackend
        except ImportError:
            raise ModelLoadError(
                "ultralytics package not installed. Install with: pip install ultralytics"
            )

        try:
            self.logger.info(f"Loading detection model from {self._model_path}")
            self._torch_device = torch.device(self._device)
            backend = AutoBackend(self._model_path, device=self._torch_device, verbose=False)
            backend.eval()
        except Exception as e:
            raise ModelLoadError(
                f"Failed to load detection model: {e}",
                model_path=self._model_path
            )

        height, width = self._resolve_input_size(backend)
        dummy = torch.zeros((1, 3, height, width), dtype=torch.float32, device=self._torch_device)
        try:
            with torch.no_grad():
                output = self._to_numpy(self._first_output(backend(dummy)))
        except Exception as e:
            raise ModelLoadError(
                f"Warm-up inference failed: {e}",
                model_path=self._model_path
            )

        raw_dtype = check_tensor_type(output.dtype)
        if output.ndim < 2:
            raise ModelLoadError(
                f"Unexpected output shape {output.shape}",
                model_path=self._model_path
            )

        self._backend = backend
        self._metadata = ModelMetadata(
            input_width=width,
            input_height=height,
            num_channels=int(output.shape[-2]),
            num_elements=int(output.shape[-1]),
            output_dtype="float32",
        )
        self.logger.info(
            f"Detection model ready on {self._device} (raw output {raw_dtype}): {self._metadata}"
        )
        return self._metadata

    def run(self, input_tensor: np.ndarray) -> np.ndarray:
        """Run inference on a float32 NCHW batch and normalize its geometry."""
        if self._backend is None:
            raise InferenceError("Engine used before setup()")

        import torch

        try:
            tensor = torch.from_numpy(np.ascontiguousarray(input_tensor)).to(self._torch_device)
            with torch.no_grad():
                output = self._to_numpy(self._first_output(self._backend(tensor)))
        except Exception as e:
            raise InferenceError(f"Inference failed: {e}")

        output = output.astype(np.float32, copy=True)
        output = output.reshape(self._metadata.num_channels, self._metadata.num_elements)
        output[0] /= self._metadata.input_width
        output[1] /= self._metadata.input_height
        output[2] /= self._metadata.input_width
        output[3] /= self._metadata.input_height
        return output

    def clear(self) -> None:
        """Release the model."""
        if self._backend is not None:
            self.logger.info(f"Releasing detection model {self._model_path}")
        self._backend = None
        self._metadata = ModelMetadata.unavailable()

    @property
    def is_ready(self) -> bool:
        return self._backend is not None

    @property
    def model_name(self) -> str:
        return f"YOLO:{Path(self._model_path).name}" if self._model_path else "YOLO:unset"


class StaticTensorEngine(InferenceEnginePort):
    """
    Engine that replays a prepared output tensor.

    Used for tests and for re-running the pipeline over tensors recorded from
    a device, without loading any model.
    """

    def __init__(
        self,
        output: Union[np.ndarray, Sequence[float]],
        metadata: ModelMetadata,
        name: str = "static"
    ):
        self._output = np.asarray(output)
        self._declared = metadata
        self._metadata = ModelMetadata.unavailable()
        self._name = name
        self.run_count = 0

    def setup(self) -> ModelMetadata:
        check_tensor_type(self._declared.output_dtype)
        self._metadata = self._declared
        return self._metadata

    def run(self, input_tensor: np.ndarray) -> np.ndarray:
        if not self.is_ready:
            raise InferenceError("Engine used before setup()")
        self.run_count += 1
        return self._output.copy()

    def clear(self) -> None:
        self._metadata = ModelMetadata.unavailable()

    @property
    def is_ready(self) -> bool:
        return self._metadata.is_available

    @property
    def model_name(self) -> str:
        return f"StaticTensorEngine:{self._name}"

    @classmethod
    def from_file(cls, tensor_path: str, metadata: ModelMetadata) -> "StaticTensorEngine":
        """Load a recorded tensor saved with ``numpy.save``."""
        path = Path(tensor_path)
        if not path.exists():
            raise ModelLoadError(f"Tensor file not found: {tensor_path}", model_path=tensor_path)
        return cls(np.load(path), metadata, name=path.stem)
