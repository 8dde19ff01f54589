"""Page-related API routes for v1 endpoints."""
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response

from digitizer.api.schemas import (
    DeleteResponseSchema,
    ImageSettingsSchema,
    PageSchema,
    SaveEditsRequestSchema,
    SelectPageRequestSchema,
    SessionSchema,
    page_to_schema,
    session_to_schema,
)
from digitizer.api.v1.dependencies import (
    get_apply_preprocessing_handler,
    get_clear_session_handler,
    get_delete_page_handler,
    get_extract_page_handler,
    get_reset_page_handler,
    get_save_edits_handler,
    get_select_page_handler,
    get_session_handler,
)
from digitizer.api.v1.errors import HANDLED_ERRORS, to_http_exception
from digitizer.application.commands.apply_preprocessing import (
    ApplyPreprocessingCommand,
    ApplyPreprocessingHandler,
)
from digitizer.application.commands.delete_page import (
    ClearSessionCommand,
    ClearSessionHandler,
    DeletePageCommand,
    DeletePageHandler,
)
from digitizer.application.commands.extract_page import ExtractPageHandler
from digitizer.application.commands.reset_page import ResetPageCommand, ResetPageHandler
from digitizer.application.commands.save_edits import CellEdit, SaveEditsCommand, SaveEditsHandler
from digitizer.application.commands.select_page import SelectPageCommand, SelectPageHandler
from digitizer.application.dto.page_dto import PageDTO
from digitizer.application.queries.get_session import GetPageQuery, GetSessionHandler, GetSessionQuery
from digitizer.constants import PNG_MEDIA_TYPE
from digitizer.domain.value_objects.image_settings import ImageProcessingSettings

router = APIRouter(tags=["pages"])


@router.get("/session", response_model=SessionSchema)
def get_session(handler: GetSessionHandler = Depends(get_session_handler)) -> SessionSchema:
    return session_to_schema(handler.handle(GetSessionQuery()))


@router.delete("/session", response_model=DeleteResponseSchema)
def clear_session(handler: ClearSessionHandler = Depends(get_clear_session_handler)) -> DeleteResponseSchema:
    result = handler.handle(ClearSessionCommand())
    return DeleteResponseSchema(deleted=result["deleted"])


@router.get("/pages/{page_id}", response_model=PageSchema)
def get_page(page_id: str, handler: GetSessionHandler = Depends(get_session_handler)) -> PageSchema:
    try:
        dto = handler.get_page(GetPageQuery(page_id=page_id))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return page_to_schema(dto)


@router.get("/pages/{page_id}/image")
def get_page_image(
    page_id: str,
    variant: Literal["original", "processed"] = "processed",
    handler: GetSessionHandler = Depends(get_session_handler),
) -> Response:
    try:
        page = handler.get_record(page_id)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc

    if variant == "original" or not page.processed_image:
        return Response(content=page.original_image, media_type=page.original_mime)
    return Response(content=page.processed_image, media_type=page.processed_mime or page.original_mime)


@router.post("/pages/{page_id}/select", response_model=SessionSchema)
def select_page(
    page_id: str,
    handler: SelectPageHandler = Depends(get_select_page_handler),
    session_handler: GetSessionHandler = Depends(get_session_handler),
) -> SessionSchema:
    try:
        handler.handle(SelectPageCommand(page_id=page_id))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return session_to_schema(session_handler.handle(GetSessionQuery()))


@router.put("/session/selection", response_model=SessionSchema)
def set_selection(
    payload: SelectPageRequestSchema,
    handler: SelectPageHandler = Depends(get_select_page_handler),
    session_handler: GetSessionHandler = Depends(get_session_handler),
) -> SessionSchema:
    try:
        handler.handle(SelectPageCommand(page_id=payload.pageId))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return session_to_schema(session_handler.handle(GetSessionQuery()))


@router.post("/pages/{page_id}/extract", response_model=PageSchema, status_code=202)
def extract_page(
    page_id: str,
    background_tasks: BackgroundTasks,
    handler: ExtractPageHandler = Depends(get_extract_page_handler),
    session_handler: GetSessionHandler = Depends(get_session_handler),
) -> PageSchema:
    try:
        pending = handler.begin(page_id)
        page = session_handler.get_page(GetPageQuery(page_id=page_id))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc

    if pending is not None:
        background_tasks.add_task(handler.finish, pending)
    return page_to_schema(page)


@router.post("/pages/{page_id}/reset", response_model=PageSchema)
def reset_page(
    page_id: str,
    handler: ResetPageHandler = Depends(get_reset_page_handler),
) -> PageSchema:
    try:
        page = handler.handle(ResetPageCommand(page_id=page_id))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return page_to_schema(PageDTO.from_record(page))


@router.post("/pages/{page_id}/preprocess", response_model=PageSchema, status_code=202)
async def preprocess_page(
    page_id: str,
    settings: ImageSettingsSchema,
    background_tasks: BackgroundTasks,
    handler: ApplyPreprocessingHandler = Depends(get_apply_preprocessing_handler),
    extract_handler: ExtractPageHandler = Depends(get_extract_page_handler),
    session_handler: GetSessionHandler = Depends(get_session_handler),
) -> PageSchema:
    try:
        command = ApplyPreprocessingCommand(
            page_id=page_id,
            settings=ImageProcessingSettings(**settings.model_dump()),
        )
        pending = await handler.begin(command)
        page = session_handler.get_page(GetPageQuery(page_id=page_id))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc

    if pending is not None:
        background_tasks.add_task(extract_handler.finish, pending)
    return page_to_schema(page)


@router.post("/pages/{page_id}/preprocess/preview")
async def preview_preprocessing(
    page_id: str,
    settings: ImageSettingsSchema,
    handler: ApplyPreprocessingHandler = Depends(get_apply_preprocessing_handler),
) -> Response:
    try:
        image = await handler.render(page_id, ImageProcessingSettings(**settings.model_dump()))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return Response(content=image, media_type=PNG_MEDIA_TYPE)


@router.patch("/pages/{page_id}/rows", response_model=PageSchema)
def save_edits(
    page_id: str,
    payload: SaveEditsRequestSchema,
    handler: SaveEditsHandler = Depends(get_save_edits_handler),
) -> PageSchema:
    if not payload.edits:
        raise HTTPException(status_code=400, detail="No edits supplied")

    command = SaveEditsCommand(
        page_id=page_id,
        edits=[CellEdit(row_index=edit.rowIndex, column=edit.column, value=edit.value) for edit in payload.edits],
    )
    try:
        page = handler.handle(command)
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return page_to_schema(PageDTO.from_record(page))


@router.delete("/pages/{page_id}", response_model=DeleteResponseSchema)
def delete_page(
    page_id: str,
    handler: DeletePageHandler = Depends(get_delete_page_handler),
) -> DeleteResponseSchema:
    try:
        handler.handle(DeletePageCommand(page_id=page_id))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return DeleteResponseSchema(deleted=1)
