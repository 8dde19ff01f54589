"""Unit tests for the ExtractPage command handler."""
import asyncio
import threading
import time
from unittest.mock import AsyncMock, Mock

import pytest

from digitizer.application.commands.extract_page import (
    DEFAULT_FAILURE_MESSAGE,
    ExtractPageCommand,
    ExtractPageHandler,
)
from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.exceptions import EntityNotFoundError, InvalidPageTransitionError
from digitizer.infrastructure.persistence.in_memory_session_repository import InMemorySessionRepository


@pytest.fixture
def repository():
    return InMemorySessionRepository()


@pytest.fixture
def vision_client():
    client = Mock()
    client.extract_rows = AsyncMock(return_value=[{"Name": "Ada", "Age": 36}])
    return client


@pytest.fixture
def page(repository):
    record = PageRecord.create(name="scan.png", image=b"png", mime="image/png")
    repository.add_pages([record])
    return record


def test_successful_extraction_completes_page(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)

    result = asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    assert result.status.is_complete()
    assert repository.find_page(page.id).extracted_data == [{"Name": "Ada", "Age": 36}]
    vision_client.extract_rows.assert_awaited_once_with(b"png", "image/png")


def test_begin_commits_extracting_before_the_call(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)

    pending = handler.begin(page.id)

    assert pending.page_id == page.id
    assert repository.find_page(page.id).status.is_extracting()
    vision_client.extract_rows.assert_not_called()


def test_begin_rejects_page_already_in_flight(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)
    handler.begin(page.id)

    with pytest.raises(InvalidPageTransitionError):
        handler.begin(page.id)


def test_unknown_page_raises(repository, vision_client):
    handler = ExtractPageHandler(repository, vision_client)
    with pytest.raises(EntityNotFoundError):
        handler.begin("missing")


def test_page_without_payload_is_noop(repository, vision_client):
    blank = PageRecord(id="blank", name="blank", original_image=b"", original_mime="image/png")
    repository.add_pages([blank])
    handler = ExtractPageHandler(repository, vision_client)

    assert handler.begin("blank") is None
    assert repository.find_page("blank").status.is_idle()


def test_failure_is_recorded_and_not_raised(repository, vision_client, page):
    vision_client.extract_rows.side_effect = RuntimeError("service unavailable")
    handler = ExtractPageHandler(repository, vision_client)

    result = asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    assert result.status.is_failed()
    assert result.error_message == "service unavailable"
    assert result.extracted_data is None


def test_failure_without_message_uses_default(repository, vision_client, page):
    vision_client.extract_rows.side_effect = RuntimeError()
    handler = ExtractPageHandler(repository, vision_client)

    result = asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    assert result.error_message == DEFAULT_FAILURE_MESSAGE


def test_failed_rerun_keeps_prior_rows(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)
    asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    vision_client.extract_rows.side_effect = RuntimeError("timeout")
    asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    stored = repository.find_page(page.id)
    assert stored.status.is_failed()
    assert stored.retained_rows == [{"Name": "Ada", "Age": 36}]


def test_retry_clears_error_and_warning(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)
    asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))
    repository.update_page(page.id, lambda current: current.with_warning("Expected 3 rows (batch majority) but found 1."))

    result = asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    assert result.consistency_warning is None
    assert result.error_message is None


def test_malformed_rows_become_error(repository, vision_client, page):
    vision_client.extract_rows.return_value = [{"a": {"nested": True}}]
    handler = ExtractPageHandler(repository, vision_client)

    result = asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    assert result.status.is_failed()
    assert "Malformed" in result.error_message


def test_deleted_page_is_not_resurrected(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)
    pending = handler.begin(page.id)
    repository.delete_page(page.id)

    result = asyncio.run(handler.finish(pending))

    assert result is None
    assert repository.find_page(page.id) is None
    assert repository.list_pages() == []


def test_extraction_uses_processed_image(repository, vision_client, page):
    repository.update_page(page.id, lambda current: current.with_processed_image(b"filtered", "image/png"))
    handler = ExtractPageHandler(repository, vision_client)

    asyncio.run(handler.handle(ExtractPageCommand(page_id=page.id)))

    vision_client.extract_rows.assert_awaited_once_with(b"filtered", "image/png")


def test_concurrent_begin_launches_page_once(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)
    barrier = threading.Barrier(2)
    launched, rejected = [], []

    def _slow_prepare(current):
        time.sleep(0.05)
        return current

    def _worker():
        barrier.wait()
        try:
            launched.append(handler.begin(page.id, prepare=_slow_prepare))
        except InvalidPageTransitionError as exc:
            rejected.append(exc)

    threads = [threading.Thread(target=_worker) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(launched) == 1
    assert launched[0].page_id == page.id
    assert len(rejected) == 1
    assert repository.find_page(page.id).status.is_extracting()


def test_result_for_reset_page_is_discarded(repository, vision_client, page):
    handler = ExtractPageHandler(repository, vision_client)
    pending = handler.begin(page.id)
    repository.update_page(page.id, lambda current: current.fail_extraction("cancelled").reset())

    result = asyncio.run(handler.finish(pending))

    assert result is None
    assert repository.find_page(page.id).status.is_idle()
    assert repository.find_page(page.id).extracted_data is None
