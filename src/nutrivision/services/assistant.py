"""Conversational nutrition assistant."""

import json
from collections.abc import Mapping
from dataclasses import dataclass

from nutrivision.errors import ValidationError
from nutrivision.services.insights import describe_log
from nutrivision.services.llm import LlmClient, LlmOptions

SYSTEM_PROMPT = """You are a specialized Nutrition Assistant.

USER CONTEXT:
- Name: {name}
- Calories Eaten Today: {calories}
- Calorie Goal: {calorie_goal}
- Today's Logs: {logs}

INSTRUCTIONS:
- Answer the user's question directly based on the data above.
- Keep it short (max 2 sentences) because this will be spoken out loud.
- Do not use markdown (no bold, no italics).
- If asked what the user ate, list the items clearly."""


@dataclass
class AssistantService:
    """Answers questions about the user's day in a speakable form."""

    client: LlmClient
    options: LlmOptions
    default_calorie_goal: int = 2500

    async def reply(self, message: str, context: Mapping[str, object]) -> str:
        """Return a short, markdown-free reply."""
        if not message.strip():
            raise ValidationError("Message is required")
        response = await self.client.generate_text(
            options=self.options,
            instructions=self.build_system_prompt(context),
            message=message.strip(),
        )
        return response.replace("*", "").strip()

    def build_system_prompt(self, context: Mapping[str, object]) -> str:
        stats = _mapping(context.get("stats"))
        goals = _mapping(context.get("goals"))
        logs = context.get("logs")
        if not isinstance(logs, list):
            logs = []
        rendered_logs = [
            log if isinstance(log, str) else describe_log(_mapping(log))
            for log in logs
            if isinstance(log, str | Mapping)
        ]
        return SYSTEM_PROMPT.format(
            name=context.get("userName") or "User",
            calories=stats.get("total_calories") or 0,
            calorie_goal=goals.get("calories") or self.default_calorie_goal,
            logs=json.dumps(rendered_logs),
        )


def _mapping(value: object) -> Mapping[str, object]:
    return value if isinstance(value, Mapping) else {}
