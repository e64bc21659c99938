"""Interface for hosted LLM calls."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class LlmOptions:
    """Model selection shared by every LLM-backed service."""

    model: str
    reasoning_effort: str | None = None
    store: bool = False


class LlmClient(Protocol):
    """Interface for structured and free-text LLM generation."""

    async def generate_json(
        self,
        *,
        options: LlmOptions,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> str:
        """Return the raw JSON text produced for the given schema."""

    async def generate_text(
        self,
        *,
        options: LlmOptions,
        instructions: str,
        message: str,
    ) -> str:
        """Return a free-text reply to the message under the instructions."""
