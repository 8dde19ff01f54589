"""
Schemas for session, page and extraction endpoints
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from digitizer.application.dto.page_dto import PageDTO, SessionDTO

CellValue = Union[str, int, float, bool, None]


class PageSummarySchema(BaseModel):
    id: str
    name: str
    status: str
    rowCount: int = 0
    errorMessage: Optional[str] = None
    consistencyWarning: Optional[str] = None
    hasProcessedImage: bool = False
    createdAt: datetime


class PageSchema(PageSummarySchema):
    extractedData: Optional[List[Dict[str, CellValue]]] = None
    originalImageUrl: str
    processedImageUrl: str


class SessionSchema(BaseModel):
    pages: List[PageSummarySchema] = Field(default_factory=list)
    selectedPageId: Optional[str] = None
    globalStatus: str = "idle"


class IngestionResponseSchema(BaseModel):
    pages: List[PageSummarySchema] = Field(default_factory=list)
    skippedFiles: List[str] = Field(default_factory=list)
    selectedPageId: Optional[str] = None


class ImageSettingsSchema(BaseModel):
    brightness: int = Field(default=0, ge=-255, le=255)
    contrast: int = Field(default=0, ge=-255, le=255)
    threshold: int = Field(default=0, ge=0, le=255)
    grayscale: bool = False
    rotation: int = 0


class CellEditSchema(BaseModel):
    rowIndex: int = Field(ge=0)
    column: str = Field(min_length=1)
    value: CellValue = None


class SaveEditsRequestSchema(BaseModel):
    edits: List[CellEditSchema] = Field(default_factory=list)


class SelectPageRequestSchema(BaseModel):
    pageId: Optional[str] = None


class BatchStartedSchema(BaseModel):
    launchedPageIds: List[str] = Field(default_factory=list)
    globalStatus: str


class DeleteResponseSchema(BaseModel):
    deleted: int


def page_summary_to_schema(dto: PageDTO) -> PageSummarySchema:
    return PageSummarySchema(
        id=dto.page_id,
        name=dto.name,
        status=dto.status,
        rowCount=dto.row_count,
        errorMessage=dto.error_message,
        consistencyWarning=dto.consistency_warning,
        hasProcessedImage=dto.has_processed_image,
        createdAt=dto.created_at,
    )


def page_to_schema(dto: PageDTO) -> PageSchema:
    summary = page_summary_to_schema(dto)
    return PageSchema(
        **summary.model_dump(),
        extractedData=dto.extracted_data,
        originalImageUrl=f"/api/pages/{dto.page_id}/image?variant=original",
        processedImageUrl=f"/api/pages/{dto.page_id}/image?variant=processed",
    )


def session_to_schema(dto: SessionDTO) -> SessionSchema:
    return SessionSchema(
        pages=[page_summary_to_schema(page) for page in dto.pages],
        selectedPageId=dto.selected_page_id,
        globalStatus=dto.global_status,
    )
