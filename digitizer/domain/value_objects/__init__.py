"""
Domain Value Objects

Immutable value objects that encapsulate domain concepts with validation.
"""
from .global_status import GlobalStatus
from .image_settings import ImageProcessingSettings
from .page_status import PageState, PageStatus

__all__ = [
    'GlobalStatus',
    'ImageProcessingSettings',
    'PageState',
    'PageStatus',
]
