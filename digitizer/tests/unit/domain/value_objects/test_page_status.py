"""Unit tests for the PageStatus value object."""
import pytest

from digitizer.domain.value_objects.page_status import PageState, PageStatus


def test_factories_create_expected_states():
    assert PageStatus.idle().state == PageState.IDLE
    assert PageStatus.extracting().state == PageState.EXTRACTING
    assert PageStatus.complete().state == PageState.COMPLETE
    assert PageStatus.error("boom").state == PageState.ERROR


def test_error_state_defaults_message():
    status = PageStatus(state=PageState.ERROR)
    assert status.error_message == "Extraction failed"


def test_error_message_rejected_outside_error_state():
    with pytest.raises(ValueError):
        PageStatus(state=PageState.COMPLETE, error_message="nope")


def test_string_state_is_coerced():
    status = PageStatus(state="extracting")
    assert status.state is PageState.EXTRACTING


@pytest.mark.parametrize(
    "start,target,allowed",
    [
        (PageStatus.idle(), PageState.EXTRACTING, True),
        (PageStatus.idle(), PageState.COMPLETE, False),
        (PageStatus.extracting(), PageState.COMPLETE, True),
        (PageStatus.extracting(), PageState.ERROR, True),
        (PageStatus.extracting(), PageState.EXTRACTING, False),
        (PageStatus.extracting(), PageState.IDLE, False),
        (PageStatus.complete(), PageState.EXTRACTING, True),
        (PageStatus.complete(), PageState.IDLE, True),
        (PageStatus.error("x"), PageState.EXTRACTING, True),
        (PageStatus.error("x"), PageState.IDLE, True),
    ],
)
def test_transition_table(start, target, allowed):
    assert start.can_transition_to(target) is allowed


def test_invalid_transition_raises():
    with pytest.raises(ValueError, match="Invalid state transition"):
        PageStatus.idle().transition_to(PageState.COMPLETE)


def test_transition_to_error_carries_message():
    status = PageStatus.extracting().transition_to(PageState.ERROR, error_message="timeout")
    assert status.is_failed()
    assert status.error_message == "timeout"
    assert str(status) == "error: timeout"


def test_equality_with_strings_and_enums():
    status = PageStatus.complete()
    assert status == "complete"
    assert status == "COMPLETE"
    assert status == PageState.COMPLETE
    assert status == PageStatus.complete()
    assert status != PageStatus.idle()


def test_pending_covers_idle_and_error_only():
    assert PageStatus.idle().is_pending()
    assert PageStatus.error("x").is_pending()
    assert not PageStatus.extracting().is_pending()
    assert not PageStatus.complete().is_pending()
