"""Shared FastAPI dependencies for v1 API routers.

These factories centralize construction of the session store, adapters and
handlers so routers can depend on simple callables. Tests swap any of them
through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache

from digitizer.application.commands.apply_preprocessing import ApplyPreprocessingHandler
from digitizer.application.commands.delete_page import ClearSessionHandler, DeletePageHandler
from digitizer.application.commands.extract_all import ExtractAllHandler
from digitizer.application.commands.extract_page import ExtractPageHandler
from digitizer.application.commands.ingest_files import IngestFilesHandler
from digitizer.application.commands.reset_page import ResetPageHandler
from digitizer.application.commands.save_edits import SaveEditsHandler
from digitizer.application.commands.select_page import SelectPageHandler
from digitizer.application.queries.export_data import ExportDataHandler
from digitizer.application.queries.get_session import GetSessionHandler
from digitizer.config import get_settings
from digitizer.domain.repositories.session_repository import SessionRepository
from digitizer.domain.services.consistency_reconciler import ConsistencyReconciler
from digitizer.infrastructure.export.spreadsheet_exporter import SpreadsheetExporter
from digitizer.infrastructure.pdf.image_processor import apply_filters
from digitizer.infrastructure.pdf.pdf_renderer import PdfRenderer
from digitizer.infrastructure.persistence.in_memory_session_repository import InMemorySessionRepository
from digitizer.infrastructure.vision.azure_vision_client import AzureVisionClient


@lru_cache()
def _session_repository() -> SessionRepository:
    return InMemorySessionRepository()


def get_session_repository() -> SessionRepository:
    """Provide the process-wide session store."""
    return _session_repository()


@lru_cache()
def _vision_client() -> AzureVisionClient:
    return AzureVisionClient()


@lru_cache()
def _pdf_renderer() -> PdfRenderer:
    return PdfRenderer(zoom=get_settings().pdf_render_zoom)


@lru_cache()
def _extract_page_handler() -> ExtractPageHandler:
    return ExtractPageHandler(_session_repository(), _vision_client())


def get_extract_page_handler() -> ExtractPageHandler:
    """Provide a cached ExtractPage handler."""
    return _extract_page_handler()


@lru_cache()
def _extract_all_handler() -> ExtractAllHandler:
    return ExtractAllHandler(_session_repository(), _extract_page_handler(), ConsistencyReconciler())


def get_extract_all_handler() -> ExtractAllHandler:
    """Provide a cached ExtractAll handler."""
    return _extract_all_handler()


@lru_cache()
def _ingest_files_handler() -> IngestFilesHandler:
    return IngestFilesHandler(
        _session_repository(),
        _pdf_renderer(),
        max_file_bytes=get_settings().max_upload_bytes(),
    )


def get_ingest_files_handler() -> IngestFilesHandler:
    """Provide a cached IngestFiles handler."""
    return _ingest_files_handler()


@lru_cache()
def _apply_preprocessing_handler() -> ApplyPreprocessingHandler:
    return ApplyPreprocessingHandler(_session_repository(), _extract_page_handler(), apply_filters)


def get_apply_preprocessing_handler() -> ApplyPreprocessingHandler:
    """Provide a cached ApplyPreprocessing handler."""
    return _apply_preprocessing_handler()


def get_reset_page_handler() -> ResetPageHandler:
    return ResetPageHandler(_session_repository())


def get_delete_page_handler() -> DeletePageHandler:
    return DeletePageHandler(_session_repository())


def get_clear_session_handler() -> ClearSessionHandler:
    return ClearSessionHandler(_session_repository())


def get_select_page_handler() -> SelectPageHandler:
    return SelectPageHandler(_session_repository())


def get_save_edits_handler() -> SaveEditsHandler:
    return SaveEditsHandler(_session_repository())


def get_session_handler() -> GetSessionHandler:
    return GetSessionHandler(_session_repository())


@lru_cache()
def _export_data_handler() -> ExportDataHandler:
    return ExportDataHandler(_session_repository(), SpreadsheetExporter())


def get_export_data_handler() -> ExportDataHandler:
    """Provide a cached ExportData handler."""
    return _export_data_handler()


async def close_adapters() -> None:
    """Release network clients opened by the cached adapters."""
    if _vision_client.cache_info().currsize:
        await _vision_client().close()
