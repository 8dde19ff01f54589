"""
API Schemas
"""
from .page_schemas import (
    BatchStartedSchema,
    CellEditSchema,
    DeleteResponseSchema,
    ImageSettingsSchema,
    IngestionResponseSchema,
    PageSchema,
    PageSummarySchema,
    SaveEditsRequestSchema,
    SelectPageRequestSchema,
    SessionSchema,
    page_summary_to_schema,
    page_to_schema,
    session_to_schema,
)

__all__ = [
    "BatchStartedSchema",
    "CellEditSchema",
    "DeleteResponseSchema",
    "ImageSettingsSchema",
    "IngestionResponseSchema",
    "PageSchema",
    "PageSummarySchema",
    "SaveEditsRequestSchema",
    "SelectPageRequestSchema",
    "SessionSchema",
    "page_summary_to_schema",
    "page_to_schema",
    "session_to_schema",
]
