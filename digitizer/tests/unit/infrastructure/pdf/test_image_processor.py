"""Unit tests for the pixel filter chain."""
import base64

import cv2
import numpy as np
import pytest

from digitizer.domain.value_objects.image_settings import ImageProcessingSettings
from digitizer.infrastructure.pdf.image_processor import (
    ImageProcessingError,
    apply_filters,
    contrast_factor,
    decode_image,
    image_to_data_url,
    transform_pixels,
)


def _png(image: np.ndarray) -> bytes:
    ok, encoded = cv2.imencode(".png", image)
    assert ok
    return encoded.tobytes()


@pytest.fixture
def sample_image():
    # 2 rows x 3 columns, BGR
    image = np.zeros((2, 3, 3), dtype=np.uint8)
    image[0, 0] = (0, 0, 255)
    image[1, 2] = (200, 200, 200)
    return image


def test_contrast_factor_identity():
    assert contrast_factor(0) == pytest.approx(1.0)
    assert contrast_factor(100) > 1.0
    assert contrast_factor(-100) < 1.0


def test_identity_settings_preserve_pixels(sample_image):
    result = transform_pixels(sample_image, ImageProcessingSettings())
    assert np.array_equal(result, sample_image)


def test_rotation_swaps_dimensions(sample_image):
    result = transform_pixels(sample_image, ImageProcessingSettings(rotation=90))
    assert result.shape == (3, 2, 3)


def test_grayscale_equalizes_channels(sample_image):
    result = transform_pixels(sample_image, ImageProcessingSettings(grayscale=True))
    assert np.all(result[:, :, 0] == result[:, :, 1])
    assert np.all(result[:, :, 1] == result[:, :, 2])
    # pure red maps to its luma weight
    assert abs(int(result[0, 0, 0]) - round(255 * 0.299)) <= 1


def test_brightness_is_clipped(sample_image):
    result = transform_pixels(sample_image, ImageProcessingSettings(brightness=255))
    assert result.max() == 255
    assert result.min() == 255


def test_threshold_produces_black_and_white(sample_image):
    result = transform_pixels(sample_image, ImageProcessingSettings(threshold=128))
    assert set(np.unique(result)) <= {0, 255}
    assert result[1, 2, 0] == 255
    assert result[0, 1, 0] == 0


def test_apply_filters_round_trips_through_png(sample_image):
    output = apply_filters(_png(sample_image), ImageProcessingSettings(rotation=180))
    decoded = decode_image(output)
    assert decoded.shape == sample_image.shape
    assert tuple(decoded[1, 2]) == (0, 0, 255)


def test_decode_rejects_garbage():
    with pytest.raises(ImageProcessingError):
        decode_image(b"definitely not an image")
    with pytest.raises(ImageProcessingError):
        decode_image(b"")


def test_image_to_data_url():
    url = image_to_data_url(b"abc", "image/jpeg")
    assert url == "data:image/jpeg;base64," + base64.b64encode(b"abc").decode()
    assert image_to_data_url(b"abc").startswith("data:image/png;base64,")
