"""Translate domain and adapter errors into HTTP errors."""
from __future__ import annotations

from fastapi import HTTPException

from digitizer.domain.exceptions import (
    DomainException,
    DomainValidationError,
    EntityNotFoundError,
    EntityValidationError,
    NothingToExportError,
)
from digitizer.infrastructure.pdf.image_processor import ImageProcessingError


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, NothingToExportError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, EntityValidationError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, DomainValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, ImageProcessingError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, DomainException):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail="Internal server error")


HANDLED_ERRORS = (DomainException, ImageProcessingError)
