"""Inference backends for reminder extraction, transcription and tips.

``InferenceBackend`` is the narrow capability the intake adapter depends on.
``GeminiBackend`` implements it with Google Gemini; tests substitute a fake.
Backends raise on any failure; fallbacks are the adapter's job.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime

import google.generativeai as genai

from lifesync.models.reminder import Category, Priority, ReminderDraft

logger = logging.getLogger(__name__)

TRANSCRIBE_PROMPT = "Transcribe the spoken audio into clear, natural text."

# Optional response fields where an empty string means "not given"
OPTIONAL_DRAFT_KEYS = frozenset({"description", "suggestedTime"})


class InferenceBackend(ABC):
    """Remote generative-AI capability."""

    @abstractmethod
    async def extract(self, text: str, now: datetime) -> ReminderDraft:
        """Extract a reminder draft from free text.

        Raises:
            Exception: On transport errors or a malformed response.
        """
        pass

    @abstractmethod
    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """Transcribe raw audio to text."""
        pass

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Free-form text completion."""
        pass


def build_extraction_prompt(text: str, now: datetime) -> str:
    """Prompt asking the model to structure ``text`` relative to ``now``."""
    categories = ", ".join(c.value for c in Category)
    priorities = ", ".join(p.value for p in Priority)
    return (
        f'Extract structured reminder data from this user input: "{text}".\n'
        f"Infer the category ({categories}) and Priority ({priorities}) based on context.\n"
        'If a time/date is mentioned (e.g. "tomorrow at 5pm"), convert it to an '
        f"approximate ISO string based on the current time: {now.isoformat()}.\n"
    )


def build_tip_prompt(category: Category) -> str:
    return (
        "Give me a very short (1 sentence), witty, and motivating tip for a task "
        f"related to: {category.value}."
    )


def _build_extraction_schema() -> "genai.protos.Schema":
    """JSON schema the extraction response is constrained to."""
    string = genai.protos.Type.STRING
    return genai.protos.Schema(
        type=genai.protos.Type.OBJECT,
        properties={
            "title": genai.protos.Schema(
                type=string,
                description="A concise title for the reminder",
            ),
            "category": genai.protos.Schema(
                type=string,
                format="enum",
                enum=[c.value for c in Category],
            ),
            "priority": genai.protos.Schema(
                type=string,
                format="enum",
                enum=[p.value for p in Priority],
            ),
            "description": genai.protos.Schema(
                type=string,
                description="Any extra details mentioned",
            ),
            "suggestedTime": genai.protos.Schema(
                type=string,
                description="ISO 8601 date string if a time is mentioned, otherwise null",
                nullable=True,
            ),
        },
        required=["title", "category", "priority"],
    )


def draft_from_json(payload: str) -> ReminderDraft:
    """Validate a raw extraction payload.

    Any deviation from the schema raises; partial data is not recovered.
    ``null`` fields and empty optional strings count as absent.

    Raises:
        ValueError: If the payload is empty, not a JSON object, or violates
            the schema (pydantic's ValidationError is a ValueError).
    """
    if not payload or not payload.strip():
        raise ValueError("No response from AI")

    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    return ReminderDraft.model_validate(
        {
            k: v
            for k, v in data.items()
            if v is not None and not (k in OPTIONAL_DRAFT_KEYS and v == "")
        }
    )


class GeminiBackend(InferenceBackend):
    """Gemini implementation of the inference capability."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash") -> None:
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name=model_name)
        self._extraction_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=_build_extraction_schema(),
        )

    async def extract(self, text: str, now: datetime) -> ReminderDraft:
        response = await self._model.generate_content_async(
            build_extraction_prompt(text, now),
            generation_config=self._extraction_config,
        )
        return draft_from_json(response.text)

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        response = await self._model.generate_content_async(
            [{"mime_type": mime_type, "data": audio}, TRANSCRIBE_PROMPT]
        )
        return response.text or ""

    async def generate_text(self, prompt: str) -> str:
        response = await self._model.generate_content_async(prompt)
        return response.text or ""
