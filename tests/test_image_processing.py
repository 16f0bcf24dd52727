import numpy as np
import pytest

from bp_digit_reader.infrastructure.utils.image_processing import (
    bytes_to_cv2,
    preprocess_frame,
    resize_to_square,
    to_input_tensor,
)


def test_preprocess_produces_nchw_batch():
    frame = np.random.default_rng(0).integers(0, 256, (480, 360, 3), dtype=np.uint8)

    tensor = preprocess_frame(frame, (64, 64))

    assert tensor.shape == (1, 3, 64, 64)
    assert tensor.dtype == np.float32
    assert 0.0 <= tensor.min() <= tensor.max() <= 1.0


def test_bgr_frames_are_converted_to_rgb():
    blue_bgr = np.zeros((8, 8, 3), dtype=np.uint8)
    blue_bgr[..., 0] = 255

    tensor = preprocess_frame(blue_bgr, (8, 8))

    assert np.all(tensor[0, 2] == 1.0)
    assert np.all(tensor[0, 0] == 0.0)


def test_rgb_frames_are_kept():
    red_rgb = np.zeros((8, 8, 3), dtype=np.uint8)
    red_rgb[..., 0] = 255

    tensor = preprocess_frame(red_rgb, (8, 8), is_bgr=False)

    assert np.all(tensor[0, 0] == 1.0)


def test_grayscale_frames_are_expanded():
    gray = np.full((20, 10), 51, dtype=np.uint8)

    tensor = preprocess_frame(gray, (16, 16), is_bgr=False)

    assert tensor.shape == (1, 3, 16, 16)
    assert np.allclose(tensor, 0.2)


def test_resize_uses_nearest_neighbour():
    checker = np.array([[0, 255], [255, 0]], dtype=np.uint8)

    resized = resize_to_square(checker, 4, 4)

    assert resized.shape == (4, 4)
    assert set(np.unique(resized)) <= {0, 255}


def test_resize_skips_matching_size():
    frame = np.zeros((32, 32, 3), dtype=np.uint8)

    assert resize_to_square(frame, 32, 32) is frame


def test_to_input_tensor_scales_to_unit_range():
    rgb = np.full((2, 2, 3), 255, dtype=np.uint8)

    assert np.all(to_input_tensor(rgb) == 1.0)


def test_empty_frame_is_rejected():
    with pytest.raises(ValueError):
        preprocess_frame(np.zeros((0, 0, 3), dtype=np.uint8), (64, 64))


def test_undecodable_bytes_are_rejected():
    with pytest.raises(ValueError):
        bytes_to_cv2(b"\x00\x01\x02")
