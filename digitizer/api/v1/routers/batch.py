"""Batch extraction endpoint for v1 API."""
from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends

from digitizer.api.schemas import BatchStartedSchema
from digitizer.api.v1.dependencies import get_extract_all_handler, get_session_repository
from digitizer.application.commands.extract_all import ExtractAllHandler
from digitizer.domain.repositories.session_repository import SessionRepository

router = APIRouter(tags=["extraction"])


@router.post("/extract-all", response_model=BatchStartedSchema, status_code=202)
def extract_all(
    background_tasks: BackgroundTasks,
    handler: ExtractAllHandler = Depends(get_extract_all_handler),
    session: SessionRepository = Depends(get_session_repository),
) -> BatchStartedSchema:
    launched = handler.begin()
    # The batch (and the reconciliation after it) settles after the response is sent.
    background_tasks.add_task(handler.run, launched)
    return BatchStartedSchema(
        launchedPageIds=[pending.page_id for pending in launched],
        globalStatus=session.global_status().value,
    )
