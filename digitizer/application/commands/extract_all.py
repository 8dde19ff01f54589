"""ExtractAll Command - batch extraction followed by reconciliation.

Every idle or failed page is launched at once; the batch is a join over all
launched extractions, and the reconciler runs only after every one of them
has settled.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from digitizer.application.commands.extract_page import ExtractPageHandler, PendingExtraction
from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.exceptions import DomainException
from digitizer.domain.repositories.session_repository import SessionRepository
from digitizer.domain.services.consistency_reconciler import ConsistencyReconciler, ReconciliationReport
from digitizer.domain.value_objects.global_status import GlobalStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractAllCommand:
    pass


@dataclass(frozen=True)
class BatchResult:
    launched_page_ids: List[str] = field(default_factory=list)
    completed: int = 0
    failed: int = 0
    dropped: int = 0
    flagged_page_ids: List[str] = field(default_factory=list)


class ExtractAllHandler:
    """Handles ExtractAll commands."""

    def __init__(
        self,
        session_repository: SessionRepository,
        extract_page_handler: ExtractPageHandler,
        reconciler: Optional[ConsistencyReconciler] = None,
    ):
        self._session = session_repository
        self._extract = extract_page_handler
        self._reconciler = reconciler or ConsistencyReconciler()

    def begin(self) -> List[PendingExtraction]:
        """Commit every idle or failed page as extracting.

        Pages already complete or in flight are left alone. The global status
        stays ``extracting`` until :meth:`run` settles this batch.
        """
        launched: List[PendingExtraction] = []
        self._session.begin_activity(GlobalStatus.EXTRACTING)
        try:
            for page in self._session.list_pages():
                if not page.status.is_pending():
                    continue
                try:
                    pending = self._extract.begin(page.id)
                except DomainException as exc:
                    # Deleted or picked up by another request since the listing.
                    logger.info("Skipping page in batch: %s", exc, extra={"page_id": page.id})
                    continue
                if pending is not None:
                    launched.append(pending)
        except BaseException:
            self._session.end_activity(GlobalStatus.EXTRACTING)
            raise

        logger.info("Batch extraction launched", extra={"batch_size": len(launched)})
        return launched

    async def run(self, launched: List[PendingExtraction]) -> BatchResult:
        """Join all launched extractions, then reconcile the whole session."""
        try:
            results: List[Optional[PageRecord]] = list(
                await asyncio.gather(*(self._extract.finish(pending) for pending in launched))
            )

            reports: List[ReconciliationReport] = []

            def _reconcile(pages: List[PageRecord]) -> List[PageRecord]:
                report = self._reconciler.analyze(pages)
                reports.append(report)
                return self._reconciler.reconcile(pages, report)

            # One atomic swap of the whole sequence: no partially reconciled state is visible.
            self._session.apply(_reconcile)
            report = reports[0] if reports else None
        finally:
            self._session.end_activity(GlobalStatus.EXTRACTING)

        completed = sum(1 for page in results if page is not None and page.status.is_complete())
        failed = sum(1 for page in results if page is not None and page.status.is_failed())
        result = BatchResult(
            launched_page_ids=[pending.page_id for pending in launched],
            completed=completed,
            failed=failed,
            dropped=sum(1 for page in results if page is None),
            flagged_page_ids=list(report.flagged_page_ids) if report and report.applied else [],
        )
        logger.info(
            "Batch extraction settled",
            extra={
                "batch_size": len(launched),
                "completed": result.completed,
                "failed": result.failed,
                "flagged": len(result.flagged_page_ids),
            },
        )
        return result

    async def handle(self, command: ExtractAllCommand) -> BatchResult:
        return await self.run(self.begin())
