"""Extraction handlers wired to the real Azure vision adapter.

Only the OpenAI SDK client is mocked, so prompt building, the image data
URL, response parsing and the page state machine run end to end.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from digitizer.application.commands.extract_all import ExtractAllCommand, ExtractAllHandler
from digitizer.application.commands.extract_page import ExtractPageCommand, ExtractPageHandler
from digitizer.config import Settings
from digitizer.domain.entities.page_record import PageRecord
from digitizer.infrastructure.persistence.in_memory_session_repository import InMemorySessionRepository
from digitizer.infrastructure.vision.azure_vision_client import AzureVisionClient


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_response('{"rows": [{"a": "1"}]}'))
    return client


@pytest.fixture
def vision(openai_client):
    settings = Settings(
        AZURE_OPENAI_ENDPOINT="https://example.openai.azure.com",
        AZURE_OPENAI_VISION_MODEL="gpt-vision",
    )
    return AzureVisionClient(client=openai_client, settings=settings)


@pytest.fixture
def repository():
    return InMemorySessionRepository()


def _add(repository, *images):
    pages = [PageRecord.create(name=f"page-{index}.png", image=image, mime="image/png") for index, image in enumerate(images)]
    repository.add_pages(pages)
    return pages


def test_extract_page_completes_with_model_rows(repository, vision, openai_client):
    (page,) = _add(repository, b"img")

    result = asyncio.run(ExtractPageHandler(repository, vision).handle(ExtractPageCommand(page_id=page.id)))

    assert result.status.is_complete()
    assert result.extracted_data == [{"a": "1"}]
    messages = openai_client.chat.completions.create.await_args.kwargs["messages"]
    assert messages[1]["content"][1]["image_url"]["url"] == "data:image/png;base64,aW1n"


def test_extract_page_records_unusable_model_output(repository, vision, openai_client):
    openai_client.chat.completions.create.return_value = _response("I cannot read this image.")
    (page,) = _add(repository, b"img")

    result = asyncio.run(ExtractPageHandler(repository, vision).handle(ExtractPageCommand(page_id=page.id)))

    assert result.status.is_failed()
    assert "no usable data" in result.error_message
    assert openai_client.chat.completions.create.await_count == 3


def test_extract_all_settles_every_page(repository, vision, openai_client):
    pages = _add(repository, b"one", b"two")
    handler = ExtractAllHandler(repository, ExtractPageHandler(repository, vision))

    result = asyncio.run(handler.handle(ExtractAllCommand()))

    assert result.launched_page_ids == [page.id for page in pages]
    assert result.completed == 2
    assert all(page.extracted_data == [{"a": "1"}] for page in repository.list_pages())
