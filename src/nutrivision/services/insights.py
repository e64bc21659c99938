"""Daily insight generation via an LLM."""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import pydantic

from nutrivision.domain.analysis import InsightReport
from nutrivision.errors import ParseError
from nutrivision.services.llm import LlmClient, LlmOptions
from nutrivision.services.normalizer import parse_json_payload

INSIGHT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "score": {"type": "integer", "minimum": 0, "maximum": 100},
        "summary": {"type": "string"},
        "macroAnalysis": {"type": "array", "items": {"type": "string"}},
        "recommendations": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["score", "summary", "macroAnalysis", "recommendations"],
    "additionalProperties": False,
}

INSIGHT_PROMPT = """You are an expert nutritionist. Analyze the user's daily intake \
data against their goals.

User Goals: {goals}
Today's Nutrition: {daily}
Food Logs: {logs}

Return a JSON object with:
- score: 0-100 based on healthiness
- summary: one concise sentence summarizing the day
- macroAnalysis: short bullet points about the macro balance
- recommendations: actionable advice"""


@dataclass
class InsightService:
    """Builds the insight prompt and validates the model's answer."""

    client: LlmClient
    options: LlmOptions

    async def generate(
        self,
        daily_nutrition: Mapping[str, object],
        food_logs: Sequence[Mapping[str, object]],
        goals: Mapping[str, object],
    ) -> InsightReport:
        """Return a scored summary of the day."""
        prompt = INSIGHT_PROMPT.format(
            goals=json.dumps(goals, default=str),
            daily=json.dumps(daily_nutrition, default=str),
            logs=json.dumps([describe_log(log) for log in food_logs]),
        )
        raw = await self.client.generate_json(
            options=self.options,
            prompt=prompt,
            schema=INSIGHT_SCHEMA,
            schema_name="daily_insight",
        )
        try:
            return InsightReport.model_validate(parse_json_payload(raw))
        except pydantic.ValidationError as exc:
            raise ParseError(
                "Insight has an unexpected shape", details=str(exc)
            ) from exc


def describe_log(log: Mapping[str, object]) -> str:
    """Render a food log as `description (N kcal)`."""
    description = log.get("description") or "item"
    calories = log.get("calories")
    if isinstance(calories, int | float):
        return f"{description} ({calories:.0f} kcal)"
    return f"{description} ({calories or 0} kcal)"
