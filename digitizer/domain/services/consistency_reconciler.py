"""
Consistency Reconciler - unifies a finished batch of page extractions.

Pages digitized from the same multi-page form are expected to line up when
exported side by side. After a batch settles the reconciler rewrites every
eligible page over one canonical column set and flags pages whose row count
differs from the batch majority.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from digitizer.constants import MISSING_CELL_VALUE
from digitizer.domain.entities.page_record import PageRecord, Row

logger = logging.getLogger(__name__)

MIN_ELIGIBLE_PAGES = 2


@dataclass(frozen=True)
class ReconciliationReport:
    """Outcome of analysing a page sequence."""

    eligible_page_ids: List[str] = field(default_factory=list)
    canonical_columns: List[str] = field(default_factory=list)
    mode_row_count: Optional[int] = None
    flagged_page_ids: List[str] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        return len(self.eligible_page_ids) >= MIN_ELIGIBLE_PAGES


def canonical_columns(pages: Sequence[PageRecord]) -> List[str]:
    """Union of column names over all rows of the given pages, first-seen order."""
    seen: Dict[str, None] = {}
    for page in pages:
        for row in page.extracted_data or []:
            for column in row:
                seen.setdefault(column, None)
    return list(seen)


def mode_row_count(row_counts: Sequence[int]) -> Optional[int]:
    """Most frequent row count; ties go to the value encountered first."""
    frequencies: Dict[int, int] = {}
    for count in row_counts:
        frequencies[count] = frequencies.get(count, 0) + 1

    mode: Optional[int] = None
    best = 0
    # dicts keep first-insertion order, so a strict ">" keeps the earliest value on ties
    for count, frequency in frequencies.items():
        if frequency > best:
            mode, best = count, frequency
    return mode


def normalize_rows(rows: Sequence[Row], columns: Sequence[str]) -> List[Row]:
    normalized: List[Row] = []
    for row in rows:
        rebuilt: Row = {column: row.get(column, MISSING_CELL_VALUE) for column in columns}
        for column, value in row.items():
            if column not in rebuilt:
                rebuilt[column] = value
        normalized.append(rebuilt)
    return normalized


def row_count_warning(expected: int, found: int) -> str:
    return f"Expected {expected} rows (batch majority) but found {found}."


class ConsistencyReconciler:
    """Schema union, schema normalization and row-count anomaly flagging."""

    def analyze(self, pages: Sequence[PageRecord]) -> ReconciliationReport:
        eligible = [page for page in pages if page.is_eligible()]
        if len(eligible) < MIN_ELIGIBLE_PAGES:
            return ReconciliationReport(eligible_page_ids=[page.id for page in eligible])

        mode = mode_row_count([page.row_count for page in eligible])
        return ReconciliationReport(
            eligible_page_ids=[page.id for page in eligible],
            canonical_columns=canonical_columns(eligible),
            mode_row_count=mode,
            flagged_page_ids=[page.id for page in eligible if page.row_count != mode],
        )

    def reconcile(
        self,
        pages: Sequence[PageRecord],
        report: Optional[ReconciliationReport] = None,
    ) -> List[PageRecord]:
        """Return the page sequence with every eligible page reconciled.

        Non-eligible pages are returned as they are. With fewer than two
        eligible pages the input is returned unchanged. ``report`` must come
        from :meth:`analyze` over the same pages; it is computed when omitted.
        """
        if report is None:
            report = self.analyze(pages)
        if not report.applied:
            return list(pages)

        flagged = set(report.flagged_page_ids)
        reconciled: List[PageRecord] = []
        for page in pages:
            if not page.is_eligible():
                reconciled.append(page)
                continue
            rows = normalize_rows(page.extracted_data or [], report.canonical_columns)
            warning = row_count_warning(report.mode_row_count, page.row_count) if page.id in flagged else None
            reconciled.append(page.with_rows(rows).with_warning(warning))

        logger.info(
            "Reconciled %s pages over %s columns (mode=%s, flagged=%s)",
            len(report.eligible_page_ids),
            len(report.canonical_columns),
            report.mode_row_count,
            len(flagged),
        )
        return reconciled
