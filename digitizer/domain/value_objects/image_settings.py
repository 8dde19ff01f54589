"""
ImageProcessingSettings value object

Parameters for the pre-processing filters applied to a page image before
extraction. The defaults describe the identity transform.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from digitizer.constants import ADJUSTMENT_LIMIT, MAX_THRESHOLD, VALID_ROTATIONS
from digitizer.domain.exceptions import DomainValidationError


@dataclass(frozen=True)
class ImageProcessingSettings:
    """
    Filter parameters, applied in the order rotate, grayscale, brightness,
    contrast, threshold.

    Attributes:
        brightness: Signed offset added to every channel
        contrast: Signed contrast adjustment; 0 leaves contrast unchanged
        threshold: 0 disables binarization, 1-255 is the black/white cutoff
        grayscale: Convert to weighted grayscale
        rotation: Clockwise rotation in degrees
    """
    brightness: int = 0
    contrast: int = 0
    threshold: int = 0
    grayscale: bool = False
    rotation: int = 0

    def __post_init__(self):
        for name in ("brightness", "contrast"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise DomainValidationError(f"{name} must be a number")
            if not -ADJUSTMENT_LIMIT <= value <= ADJUSTMENT_LIMIT:
                raise DomainValidationError(
                    f"{name} must be between {-ADJUSTMENT_LIMIT} and {ADJUSTMENT_LIMIT}, got {value}"
                )

        if not isinstance(self.threshold, int) or isinstance(self.threshold, bool):
            raise DomainValidationError("threshold must be an integer")
        if not 0 <= self.threshold <= MAX_THRESHOLD:
            raise DomainValidationError(f"threshold must be between 0 and {MAX_THRESHOLD}, got {self.threshold}")

        rotation = self.rotation % 360 if isinstance(self.rotation, int) else self.rotation
        if rotation not in VALID_ROTATIONS:
            raise DomainValidationError(f"rotation must be one of {VALID_ROTATIONS}, got {self.rotation}")
        object.__setattr__(self, "rotation", rotation)

    @property
    def binarize(self) -> bool:
        return self.threshold > 0

    @property
    def needs_grayscale(self) -> bool:
        """Thresholding always works on the grayscale value."""
        return self.grayscale or self.binarize

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
