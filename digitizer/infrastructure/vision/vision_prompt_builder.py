"""Chat payloads sent to the vision model for one page image."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

DEFAULT_PROMPT_TEMPLATE = (
    "You are an expert document digitization system. Analyze the text, handwriting, or tables in the image"
    " and return structured JSON only."
    " If it is a table, preserve the headers as keys."
    " If it is a form, use field names as keys."
    " If it is unstructured notes, organize them logically into rows."
    " Parse numbers as JSON numbers where appropriate; every value must be a string, number, boolean or null."
    " Use this exact JSON schema for your response: {\"rows\": [{\"<column name>\": value, ...}]}."
    " Do not add commentary. If nothing is found return {\"rows\": []}."
)

EXTRACT_INSTRUCTION = "Extract the data from this image into a list of rows. Identify headers automatically."
CLARIFYING_INSTRUCTION = (
    "Extract the data from this image into a JSON object with a \"rows\" list."
    " If no structured data can be extracted, reply with an empty rows array."
)

Message = Dict[str, Any]


@dataclass(frozen=True)
class VisionPromptAttempt:
    messages: List[Message]
    force_json: bool


def _system_message() -> Message:
    return {"role": "system", "content": DEFAULT_PROMPT_TEMPLATE}


def _image_message(instruction: str, image_data_url: str) -> Message:
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": instruction},
            {"type": "image_url", "image_url": {"url": image_data_url}},
        ],
    }


def build_prompt_attempts(image_data_url: str) -> List[VisionPromptAttempt]:
    """Attempts tried in order until one yields parseable JSON.

    The first asks the service for JSON mode; models without JSON mode
    support get the same prompt unforced, then a stricter rewording.
    """
    system = _system_message()
    primary = [system, _image_message(EXTRACT_INSTRUCTION, image_data_url)]
    clarified = [system, _image_message(CLARIFYING_INSTRUCTION, image_data_url)]

    return [
        VisionPromptAttempt(messages=primary, force_json=True),
        VisionPromptAttempt(messages=primary, force_json=False),
        VisionPromptAttempt(messages=clarified, force_json=False),
    ]
