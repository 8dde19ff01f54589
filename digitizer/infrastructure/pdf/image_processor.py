"""Image processing helpers used by the infrastructure layer."""
from __future__ import annotations

import base64
import logging

import cv2  # type: ignore
import numpy as np

from digitizer.constants import PNG_MEDIA_TYPE
from digitizer.domain.value_objects.image_settings import ImageProcessingSettings

logger = logging.getLogger(__name__)

_ROTATE_CODES = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}

# ITU-R BT.601 luma weights, applied to B, G, R channel order.
_GRAY_WEIGHTS_BGR = np.array([0.114, 0.587, 0.299], dtype=np.float32)


class ImageProcessingError(ValueError):
    """Raised when an image payload cannot be decoded or encoded."""


def contrast_factor(contrast: float) -> float:
    """Classic contrast correction factor; 0 maps to 1.0."""
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def decode_image(data: bytes) -> np.ndarray:
    if not data:
        raise ImageProcessingError("Image payload is empty")
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageProcessingError("Unable to decode image payload")
    return image


def encode_png(image: np.ndarray) -> bytes:
    ok, encoded = cv2.imencode(".png", image)
    if not ok:
        raise ImageProcessingError("Failed to encode image as PNG")
    return encoded.tobytes()


def transform_pixels(image: np.ndarray, settings: ImageProcessingSettings) -> np.ndarray:
    """Apply the filter chain to a decoded BGR image.

    Order: rotate, grayscale, brightness, contrast, threshold. Thresholding
    collapses the final value to pure black or white.
    """
    if settings.rotation:
        image = cv2.rotate(image, _ROTATE_CODES[settings.rotation])

    pixels = image.astype(np.float32)
    if settings.needs_grayscale:
        gray = pixels @ _GRAY_WEIGHTS_BGR
        pixels = np.repeat(gray[:, :, np.newaxis], 3, axis=2)

    pixels = pixels + float(settings.brightness)
    pixels = contrast_factor(settings.contrast) * (pixels - 128.0) + 128.0

    if settings.binarize:
        value = pixels.mean(axis=2, keepdims=True)
        binary = np.where(value >= settings.threshold, 255.0, 0.0)
        pixels = np.repeat(binary, 3, axis=2)

    return np.clip(pixels, 0, 255).astype(np.uint8)


def apply_filters(data: bytes, settings: ImageProcessingSettings) -> bytes:
    """Decode, filter and re-encode an image payload as PNG."""

    image = decode_image(data)
    processed = transform_pixels(image, settings)
    logger.debug("Applied filters %s to %sx%s image", settings.to_dict(), image.shape[1], image.shape[0])
    return encode_png(processed)


def image_to_data_url(data: bytes, mime_type: str | None = None) -> str:
    """Convert an image payload to a data URL suitable for OpenAI Vision."""

    mime_type = mime_type or PNG_MEDIA_TYPE
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"
