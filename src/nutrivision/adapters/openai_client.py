"""OpenAI Responses API client for analysis, insights and chat."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from nutrivision.errors import AnalysisProviderError
from nutrivision.services.llm import LlmClient, LlmOptions


@dataclass
class OpenAIResponsesClient(LlmClient):
    """LLM client backed by the OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float = 30.0) -> "OpenAIResponsesClient":
        """Create an OpenAI client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def generate_json(
        self,
        *,
        options: LlmOptions,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> str:
        """Call the Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        request_payload = _base_payload(options)
        request_payload["input"] = [{"role": "user", "content": content}]
        request_payload["text"] = {
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "strict": True,
                "schema": schema,
            }
        }
        return await self._create(request_payload)

    async def generate_text(
        self,
        *,
        options: LlmOptions,
        instructions: str,
        message: str,
    ) -> str:
        """Call the Responses API for a plain-text reply."""
        request_payload = _base_payload(options)
        request_payload["instructions"] = instructions
        request_payload["input"] = message
        return await self._create(request_payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()

    async def _create(self, request_payload: dict[str, object]) -> str:
        try:
            response = await self.client.responses.create(**request_payload)
        except openai.OpenAIError as exc:
            raise AnalysisProviderError(
                "OpenAI request failed", details=f"{type(exc).__name__}: {exc}"
            ) from exc
        output_text = response.output_text
        if not output_text:
            raise AnalysisProviderError("OpenAI returned an empty response")
        return output_text


def _base_payload(options: LlmOptions) -> dict[str, object]:
    payload: dict[str, object] = {"model": options.model, "store": options.store}
    if options.reasoning_effort:
        payload["reasoning"] = {"effort": options.reasoning_effort}
    return payload
