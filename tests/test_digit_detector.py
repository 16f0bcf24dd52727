import cv2
import numpy as np
import pytest
from PIL import Image

from bp_digit_reader.application.services import DigitDetector
from bp_digit_reader.config.settings import AppConfig
from bp_digit_reader.domain.entities.detection_result import DetectionStatus
from bp_digit_reader.domain.value_objects.image_data import ImageData
from bp_digit_reader.domain.value_objects.model_metadata import ModelMetadata
from bp_digit_reader.domain.exceptions import (
    InvalidImageError,
    LabelCountMismatchError,
    LabelFileError,
    ModelLoadError,
    UnsupportedTensorTypeError,
)
from bp_digit_reader.infrastructure.engine import StaticTensorEngine, YOLOTensorEngine

from conftest import LABELS, MARKER


@pytest.fixture
def engine_metadata(metadata):
    return ModelMetadata(**{**metadata.__dict__, "labels": ()})


@pytest.fixture
def detector(display_tensor, engine_metadata):
    engine = StaticTensorEngine(display_tensor, engine_metadata)
    return DigitDetector(engine, labels=LABELS)


@pytest.fixture
def frame():
    return np.full((120, 90, 3), 200, dtype=np.uint8)


def test_detect_before_setup_is_unavailable(detector, frame):
    result = detector.detect_array(frame)

    assert result.status == DetectionStatus.UNAVAILABLE
    assert result.values == (0, 0, 0)
    assert detector.engine.run_count == 0


def test_setup_attaches_labels(detector):
    metadata = detector.setup()

    assert detector.is_ready
    assert metadata.labels == LABELS
    assert metadata.num_classes == len(LABELS)


def test_detect_array_reads_display(detector, frame):
    detector.setup()

    result = detector.detect_array(frame)

    assert result.status == DetectionStatus.DETECTED
    assert result.values == (90, 65, 72)
    assert result.inference_time_ms >= 0.0
    assert result.total_time_ms >= result.inference_time_ms


def test_repeated_detection_is_idempotent(detector, frame):
    detector.setup()

    first = detector.detect_array(frame)
    second = detector.detect_array(frame)

    assert first.boxes == second.boxes
    assert first.reading == second.reading


def test_detect_encoded_image(detector, frame):
    detector.setup()
    ok, encoded = cv2.imencode(".png", frame)
    assert ok

    result = detector.detect(ImageData.from_bytes(encoded.tobytes(), format="png"))

    assert result.values == (90, 65, 72)


def test_undecodable_bytes_are_unavailable(detector):
    detector.setup()

    result = detector.detect(ImageData.from_bytes(b"not an image"))

    assert result.status == DetectionStatus.UNAVAILABLE


def test_invalid_pixels_are_unavailable(detector):
    detector.setup()

    result = detector.detect_array(np.zeros((0, 0, 3), dtype=np.uint8))

    assert result.status == DetectionStatus.UNAVAILABLE


def test_detect_file(detector, tmp_path):
    detector.setup()
    path = tmp_path / "monitor.png"
    Image.new("RGB", (80, 120), color=(30, 30, 30)).save(path)

    result = detector.detect_file(str(path))

    assert result.values == (90, 65, 72)


def test_detect_missing_file_raises(detector, tmp_path):
    detector.setup()

    with pytest.raises(InvalidImageError):
        detector.detect_file(str(tmp_path / "missing.jpg"))


def test_clear_makes_detector_unavailable(detector, frame):
    detector.setup()
    detector.clear()

    assert not detector.is_ready
    assert detector.detect_array(frame).status == DetectionStatus.UNAVAILABLE


def test_empty_frame_result(tensor_builder, engine_metadata, frame):
    engine = StaticTensorEngine(tensor_builder([]), engine_metadata)
    detector = DigitDetector(engine, labels=LABELS)
    detector.setup()

    result = detector.detect_array(frame)

    assert result.status == DetectionStatus.EMPTY
    assert result.boxes == ()


def test_uint8_output_is_dequantized(tensor_builder, engine_metadata, frame):
    quantized = np.zeros_like(tensor_builder([]), dtype=np.uint8)
    quantized[0:4, 0] = (128, 64, 102, 51)
    quantized[4 + MARKER, 0] = 204
    uint8_metadata = ModelMetadata(**{**engine_metadata.__dict__, "output_dtype": "uint8"})
    detector = DigitDetector(StaticTensorEngine(quantized, uint8_metadata), labels=LABELS)
    detector.setup()

    result = detector.detect_array(frame)

    assert result.status == DetectionStatus.DETECTED
    assert len(result.boxes) == 1
    assert result.boxes[0].class_name == "10"
    assert result.boxes[0].confidence == pytest.approx(0.8)
    assert result.boxes[0].cx == pytest.approx(128 / 255.0)
    assert result.values == (0, 0, 0)


def test_unsupported_output_type_fails_setup(display_tensor, engine_metadata):
    int32_metadata = ModelMetadata(**{**engine_metadata.__dict__, "output_dtype": "int32"})
    detector = DigitDetector(StaticTensorEngine(display_tensor, int32_metadata), labels=LABELS)

    with pytest.raises(UnsupportedTensorTypeError):
        detector.setup()


def test_label_count_mismatch_fails_setup(display_tensor, engine_metadata):
    detector = DigitDetector(StaticTensorEngine(display_tensor, engine_metadata), labels=LABELS[:10])

    with pytest.raises(LabelCountMismatchError):
        detector.setup()


def test_labels_loaded_from_file(display_tensor, engine_metadata, tmp_path, frame):
    labels_file = tmp_path / "labels.txt"
    labels_file.write_text("\n".join(LABELS) + "\n\n", encoding="utf-8")
    detector = DigitDetector(
        StaticTensorEngine(display_tensor, engine_metadata),
        labels_path=str(labels_file)
    )

    assert detector.setup().labels == LABELS
    assert detector.detect_array(frame).values == (90, 65, 72)


def test_missing_label_file_fails_setup(display_tensor, engine_metadata, tmp_path):
    detector = DigitDetector(
        StaticTensorEngine(display_tensor, engine_metadata),
        labels_path=str(tmp_path / "labels.txt")
    )

    with pytest.raises(LabelFileError):
        detector.setup()


def test_from_config_builds_yolo_engine(tmp_path):
    config = AppConfig.from_dict({
        "model": {"model_path": str(tmp_path / "digits.onnx"), "device": "cpu"},
        "detection": {"exclusive_assignment": True},
    })

    detector = DigitDetector.from_config(config)

    assert isinstance(detector.engine, YOLOTensorEngine)
    assert detector.pipeline.thresholds.exclusive_assignment
    assert not detector.is_ready
    with pytest.raises(ModelLoadError):
        detector.setup()
