"""Azure OpenAI vision client adapter for the extraction service boundary."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional

from azure.identity.aio import DefaultAzureCredential, get_bearer_token_provider
from openai import AsyncAzureOpenAI

from digitizer.config import Settings, get_settings
from digitizer.domain.entities.page_record import Row
from digitizer.infrastructure.pdf.image_processor import image_to_data_url

from .vision_prompt_builder import VisionPromptAttempt, build_prompt_attempts
from .vision_response_parser import VisionResponseParser

logger = logging.getLogger(__name__)


class VisionExtractionError(RuntimeError):
    """Raised when the vision model fails to produce a usable payload."""


class AzureVisionClient:
    """Sends one page image to Azure OpenAI and returns the extracted rows."""

    def __init__(
        self,
        *,
        client: Optional[AsyncAzureOpenAI] = None,
        parser: Optional[VisionResponseParser] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client
        self._credential: Optional[DefaultAzureCredential] = None
        self._model = self._settings.vision_model()
        self._parser = parser or VisionResponseParser()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def extract_rows(self, image: bytes, mime_type: str) -> List[Row]:
        """Extract rows from a single page image.

        Raises:
            VisionExtractionError: configuration is missing or the model
                returned nothing usable.
        """

        if not image:
            raise VisionExtractionError("No image payload to extract from")

        attempts = build_prompt_attempts(image_to_data_url(image, mime_type))
        payload = await self._run_attempts(attempts)
        if payload is None:
            raise VisionExtractionError("The vision model returned no usable data. Please try a clearer image.")

        rows = self._parser.parse_rows(payload)
        if rows is None:
            raise VisionExtractionError("The vision model response did not contain any rows.")
        return rows

    async def close(self) -> None:
        """Release the HTTP client and, when one was created, the Entra ID credential."""
        if self._client is not None:
            await self._client.close()
            self._client = None
        if self._credential is not None:
            await self._credential.close()
            self._credential = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_client(self) -> AsyncAzureOpenAI:
        if self._client is not None:
            return self._client

        endpoint = self._settings.ensure_endpoint()
        if not endpoint:
            raise VisionExtractionError("AZURE_OPENAI_ENDPOINT must be configured before using the vision client")
        if not self._model:
            raise VisionExtractionError("AZURE_OPENAI_VISION_MODEL or AZURE_OPENAI_DEPLOYMENT_NAME must be configured")

        api_key = self._settings.azure_openai_api_key
        if api_key:
            self._client = AsyncAzureOpenAI(
                api_key=api_key,
                api_version=self._settings.azure_openai_api_version,
                azure_endpoint=endpoint,
            )
        else:
            self._credential = DefaultAzureCredential()
            token_provider = get_bearer_token_provider(
                self._credential,
                "https://cognitiveservices.azure.com/.default",
            )
            self._client = AsyncAzureOpenAI(
                api_version=self._settings.azure_openai_api_version,
                azure_endpoint=endpoint,
                azure_ad_token_provider=token_provider,
            )
        return self._client

    async def _run_attempts(self, attempts: Iterable[VisionPromptAttempt]) -> Optional[Any]:
        content: Optional[str] = None
        last_attempt_forced_json = False

        for attempt in attempts:
            content, last_attempt_forced_json = await self._invoke_model(attempt)
            if content:
                payload = self._extract_json_payload(content)
                if payload is not None:
                    return payload
                logger.debug(
                    "Vision attempt yielded invalid JSON (force_json=%s): %.200s",
                    attempt.force_json,
                    content,
                )

        if content:
            logger.warning(
                "Failed to parse vision payload after retries (force_json=%s).", last_attempt_forced_json
            )
        return None

    async def _invoke_model(self, attempt: VisionPromptAttempt) -> tuple[Optional[str], bool]:
        client = self._get_client()
        kwargs = {
            "model": self._model,
            "messages": attempt.messages,
            "max_completion_tokens": self._settings.vision_max_completion_tokens,
        }
        if attempt.force_json:
            kwargs["response_format"] = {"type": "json_object"}

        response = await client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content if response.choices else None
        return content or None, attempt.force_json

    @staticmethod
    def _extract_json_payload(content: str) -> Optional[Any]:
        text = content.strip()
        if not text:
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        # Handle fenced code blocks
        if text.startswith("```") and text.endswith("```"):
            body = "\n".join(text.splitlines()[1:-1]).strip()
            if body:
                try:
                    return json.loads(body)
                except json.JSONDecodeError:
                    pass

        # Fallback: attempt to locate the outermost JSON object or array within the text
        for opener, closer in (("{", "}"), ("[", "]")):
            start_index = text.find(opener)
            end_index = text.rfind(closer)
            if start_index != -1 and end_index != -1 and end_index > start_index:
                try:
                    return json.loads(text[start_index : end_index + 1])
                except json.JSONDecodeError:
                    continue

        return None
