"""Upload endpoints for v1 API."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from digitizer.api.schemas import IngestionResponseSchema, page_summary_to_schema
from digitizer.api.v1.dependencies import get_ingest_files_handler, get_session_repository
from digitizer.application.commands.ingest_files import (
    IngestFilesCommand,
    IngestFilesHandler,
    UploadedFile,
)
from digitizer.application.dto.page_dto import PageDTO
from digitizer.domain.repositories.session_repository import SessionRepository

router = APIRouter(tags=["uploads"])


@router.post("/upload", response_model=IngestionResponseSchema, status_code=201)
async def upload_files(
    files: List[UploadFile] = File(...),
    handler: IngestFilesHandler = Depends(get_ingest_files_handler),
    session: SessionRepository = Depends(get_session_repository),
) -> IngestionResponseSchema:
    if not files:
        raise HTTPException(status_code=400, detail="At least one file is required")

    uploaded: List[UploadedFile] = []
    for file in files:
        data = await file.read()
        uploaded.append(
            UploadedFile(
                name=file.filename or "upload",
                media_type=file.content_type or "",
                data=data,
            )
        )

    result = await handler.handle(IngestFilesCommand(files=uploaded))
    return IngestionResponseSchema(
        pages=[page_summary_to_schema(PageDTO.from_record(page)) for page in result.pages],
        skippedFiles=result.skipped_files,
        selectedPageId=session.selected_page_id(),
    )
