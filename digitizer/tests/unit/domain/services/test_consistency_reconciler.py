"""Unit tests for batch reconciliation."""
from unittest.mock import patch

from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.services.consistency_reconciler import (
    ConsistencyReconciler,
    canonical_columns,
    mode_row_count,
    row_count_warning,
)


def _complete(page_id, rows, *, warning=None):
    page = PageRecord(id=page_id, name=f"{page_id}.png", original_image=b"x", original_mime="image/png")
    done = page.start_extraction().complete_extraction(rows)
    return done.with_warning(warning) if warning else done


def _rows(count, **extra):
    return [{"Name": f"row-{index}", **extra} for index in range(count)]


def test_mode_prefers_most_frequent():
    assert mode_row_count([5, 5, 3]) == 5


def test_mode_tie_goes_to_first_seen():
    assert mode_row_count([2, 3, 2, 3]) == 2


def test_mode_tie_breaks_on_first_encountered_value():
    # 3 and 2 both occur twice; 3 is seen first
    assert mode_row_count([3, 2, 2, 3]) == 3


def test_mode_of_empty_is_none():
    assert mode_row_count([]) is None


def test_canonical_columns_union_first_seen_order():
    pages = [
        _complete("a", [{"Name": "x", "Age": 1}]),
        _complete("b", [{"Name": "y", "City": "Oslo"}]),
    ]
    assert canonical_columns(pages) == ["Name", "Age", "City"]


def test_schema_union_fills_missing_cells():
    reconciler = ConsistencyReconciler()
    pages = [
        _complete("a", [{"Name": "x", "Age": 1}]),
        _complete("b", [{"Name": "y", "City": "Oslo"}]),
    ]

    result = reconciler.reconcile(pages)

    assert result[0].extracted_data == [{"Name": "x", "Age": 1, "City": ""}]
    assert result[1].extracted_data == [{"Name": "y", "Age": "", "City": "Oslo"}]
    assert list(result[1].extracted_data[0]) == ["Name", "Age", "City"]


def test_row_count_outlier_is_flagged():
    reconciler = ConsistencyReconciler()
    pages = [_complete("a", _rows(5)), _complete("b", _rows(5)), _complete("c", _rows(3))]

    result = reconciler.reconcile(pages)

    assert result[0].consistency_warning is None
    assert result[1].consistency_warning is None
    assert result[2].consistency_warning == "Expected 5 rows (batch majority) but found 3."
    assert result[2].consistency_warning == row_count_warning(5, 3)


def test_tie_flags_pages_off_the_first_count():
    reconciler = ConsistencyReconciler()
    pages = [_complete("a", _rows(2)), _complete("b", _rows(3)), _complete("c", _rows(2)), _complete("d", _rows(3))]

    report = reconciler.analyze(pages)

    assert report.mode_row_count == 2
    assert report.flagged_page_ids == ["b", "d"]


def test_reconcile_uses_given_report():
    reconciler = ConsistencyReconciler()
    pages = [_complete("a", _rows(2)), _complete("b", _rows(2)), _complete("c", _rows(1))]
    report = reconciler.analyze(pages)

    with patch.object(reconciler, "analyze") as analyze:
        result = reconciler.reconcile(pages, report)

    analyze.assert_not_called()
    assert [page.consistency_warning for page in result] == [None, None, row_count_warning(2, 1)]


def test_stale_warning_cleared_on_mode_pages():
    reconciler = ConsistencyReconciler()
    pages = [_complete("a", _rows(4), warning="Expected 9 rows (batch majority) but found 4."), _complete("b", _rows(4))]

    result = reconciler.reconcile(pages)

    assert result[0].consistency_warning is None


def test_fewer_than_two_eligible_pages_is_noop():
    reconciler = ConsistencyReconciler()
    idle = PageRecord(id="idle", name="n", original_image=b"x", original_mime="image/png")
    only = _complete("a", [{"Name": "x"}], warning="old warning")
    pages = [idle, only]

    result = reconciler.reconcile(pages)

    assert result == pages
    assert result[1].consistency_warning == "old warning"
    assert not reconciler.analyze(pages).applied


def test_non_eligible_pages_pass_through_untouched():
    reconciler = ConsistencyReconciler()
    failed = PageRecord(id="f", name="n", original_image=b"x", original_mime="image/png")
    failed = failed.start_extraction().fail_extraction("boom")
    pages = [_complete("a", _rows(2)), failed, _complete("b", _rows(1, Extra="e"))]

    result = reconciler.reconcile(pages)

    assert result[1] is failed
    assert result[0].extracted_data[0] == {"Name": "row-0", "Extra": ""}
    assert result[2].consistency_warning == row_count_warning(2, 1)


def test_reconcile_is_idempotent():
    reconciler = ConsistencyReconciler()
    pages = [_complete("a", _rows(5)), _complete("b", _rows(3, Age=1))]

    once = reconciler.reconcile(pages)
    twice = reconciler.reconcile(once)

    assert [page.extracted_data for page in once] == [page.extracted_data for page in twice]
    assert [page.consistency_warning for page in once] == [page.consistency_warning for page in twice]
