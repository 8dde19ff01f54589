"""Vision infrastructure adapters."""

from .azure_vision_client import AzureVisionClient, VisionExtractionError
from .vision_prompt_builder import build_prompt_attempts, DEFAULT_PROMPT_TEMPLATE
from .vision_response_parser import VisionResponseParser

__all__ = [
    "AzureVisionClient",
    "VisionExtractionError",
    "VisionResponseParser",
    "build_prompt_attempts",
    "DEFAULT_PROMPT_TEMPLATE",
]
