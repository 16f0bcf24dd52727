"""
Domain Exceptions

Custom exceptions for the blood-pressure display reading domain.

Only setup-time misconfiguration is fatal. Per-frame conditions (unavailable
metadata, nothing detected, unparsable digits) are reported as data by the
pipeline and never raised.
"""

from typing import Optional, Dict, Any


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details
        is_recoverable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        is_recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.is_recoverable = is_recoverable

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "is_recoverable": self.is_recoverable,
        }


# =============================================================================
# Detector Setup Exceptions
# =============================================================================

class DetectorSetupError(DomainException):
    """Base exception for errors raised while preparing the detector."""

    def __init__(self, message: str = "Detector setup failed", **kwargs):
        kwargs.setdefault("is_recoverable", False)
        super().__init__(message, **kwargs)


class ModelLoadError(DetectorSetupError):
    """Failed to load the detection model."""

    def __init__(
        self,
        message: str = "Failed to load detection model",
        model_path: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if model_path:
            self.details["model_path"] = model_path


class LabelFileError(DetectorSetupError):
    """The label table could not be read."""

    def __init__(
        self,
        path: str,
        reason: str,
        **kwargs
    ):
        message = f"Cannot read labels from '{path}': {reason}"
        super().__init__(message, **kwargs)
        self.details["path"] = path
        self.details["reason"] = reason


class UnsupportedTensorTypeError(DetectorSetupError):
    """The model's output tensor uses a numeric type the decoder cannot read."""

    def __init__(
        self,
        dtype: str,
        supported: Optional[list] = None,
        **kwargs
    ):
        message = f"Unsupported tensor data type: {dtype}"
        super().__init__(message, **kwargs)
        self.details["dtype"] = dtype
        if supported:
            self.details["supported"] = supported


class LabelCountMismatchError(DetectorSetupError):
    """Label table size does not match the number of class channels."""

    def __init__(
        self,
        label_count: int,
        class_channels: int,
        **kwargs
    ):
        message = (
            f"Label table has {label_count} entries but the model "
            f"outputs {class_channels} class channels"
        )
        super().__init__(message, **kwargs)
        self.details["label_count"] = label_count
        self.details["class_channels"] = class_channels


# =============================================================================
# Decoding Exceptions
# =============================================================================

class DecodingError(DomainException):
    """Base exception for tensor decoding errors."""
    pass


class TensorShapeError(DecodingError):
    """Output buffer size does not agree with the model metadata."""

    def __init__(
        self,
        expected: int,
        actual: int,
        **kwargs
    ):
        message = f"Output tensor has {actual} values, expected {expected}"
        super().__init__(message, is_recoverable=False, **kwargs)
        self.details["expected"] = expected
        self.details["actual"] = actual


# =============================================================================
# Inference Exceptions
# =============================================================================

class InferenceError(DomainException):
    """The inference engine failed to produce an output tensor."""

    def __init__(self, message: str = "Inference failed", **kwargs):
        super().__init__(message, **kwargs)


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(DomainException):
    """Base exception for validation errors."""
    pass


class InvalidImageError(ValidationError):
    """Input image is invalid or corrupted."""

    def __init__(
        self,
        message: str = "Invalid or corrupted image",
        **kwargs
    ):
        super().__init__(message, is_recoverable=False, **kwargs)


class InvalidInputError(ValidationError):
    """Invalid input provided to a function or method."""

    def __init__(
        self,
        field: str,
        reason: str,
        **kwargs
    ):
        message = f"Invalid input for '{field}': {reason}"
        super().__init__(message, is_recoverable=False, **kwargs)
        self.details["field"] = field
        self.details["reason"] = reason
