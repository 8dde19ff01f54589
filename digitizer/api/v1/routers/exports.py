"""Download endpoints for v1 API."""
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Response

from digitizer.api.v1.dependencies import get_export_data_handler
from digitizer.api.v1.errors import HANDLED_ERRORS, to_http_exception
from digitizer.application.queries.export_data import (
    ExportDataHandler,
    ExportDataQuery,
    ExportFile,
    ExportFormat,
)

router = APIRouter(prefix="/export", tags=["export"])


def _download(export: ExportFile) -> Response:
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/csv")
def export_all_csv(
    filename: Optional[str] = None,
    handler: ExportDataHandler = Depends(get_export_data_handler),
) -> Response:
    try:
        export = handler.handle(ExportDataQuery(export_format=ExportFormat.CSV, filename=filename))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _download(export)


@router.get("/csv/{page_id}")
def export_page_csv(
    page_id: str,
    filename: Optional[str] = None,
    handler: ExportDataHandler = Depends(get_export_data_handler),
) -> Response:
    try:
        export = handler.handle(
            ExportDataQuery(export_format=ExportFormat.CSV, page_id=page_id, filename=filename)
        )
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _download(export)


@router.get("/xlsx")
def export_workbook(
    mode: Literal["multi", "master"] = "multi",
    filename: Optional[str] = None,
    handler: ExportDataHandler = Depends(get_export_data_handler),
) -> Response:
    try:
        export = handler.handle(ExportDataQuery(export_format=ExportFormat(mode), filename=filename))
    except HANDLED_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _download(export)
