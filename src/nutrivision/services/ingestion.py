"""Food log ingestion service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID

from nutrivision.domain.food_logs import (
    FoodInput,
    FoodLogEntry,
    ImageInput,
    IngestionResult,
    LogType,
    NewFoodLogEntry,
    TextInput,
    VoiceInput,
)
from nutrivision.domain.models import RequestContext
from nutrivision.domain.nutrition import FoodAnalysisResult, FoodItem
from nutrivision.errors import ValidationError
from nutrivision.services.analysis import FoodAnalysisService
from nutrivision.services.daily import DailyAggregator

_logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for food log rows."""

    def insert_entries(self, entries: list[NewFoodLogEntry]) -> list[FoodLogEntry]:
        """Insert all entries as one write and return the stored rows."""

    def list_entries(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[FoodLogEntry]:
        """Return entries in `[start, end)`, most recent first."""


@dataclass
class FoodLogIngestionService:
    """Turns a raw meal input into stored food logs and updated daily totals."""

    analysis_service: FoodAnalysisService
    repository: FoodLogRepository
    aggregator: DailyAggregator

    async def ingest(
        self, context: RequestContext, food_input: FoodInput
    ) -> IngestionResult:
        """Analyze, persist and aggregate a meal for the calling user."""
        log_type = _validate(food_input)
        analysis = await self._analyze(food_input)
        logged_at = datetime.now(tz=UTC)
        new_entries = [
            _build_entry(context.user_id, item, log_type, logged_at)
            for item in analysis.items
        ]
        entries = self.repository.insert_entries(new_entries) if new_entries else []
        summary = self.aggregator.merge(
            context.user_id, logged_at.date(), analysis.totals
        )
        _logger.info(
            "Logged %s food item(s)",
            len(entries),
            extra={"user_id": str(context.user_id), "log_type": log_type.value},
        )
        return IngestionResult(entries=entries, analysis=analysis, summary=summary)

    def list_logs(
        self, context: RequestContext, day: date | None = None
    ) -> list[FoodLogEntry]:
        """Return the caller's food logs, optionally for one UTC day."""
        if day is None:
            return self.repository.list_entries(context.user_id)
        start = datetime.combine(day, time.min, tzinfo=UTC)
        return self.repository.list_entries(
            context.user_id, start, start + timedelta(days=1)
        )

    async def _analyze(self, food_input: FoodInput) -> FoodAnalysisResult:
        if isinstance(food_input, ImageInput):
            return await self.analysis_service.analyze_image(food_input)
        if isinstance(food_input, VoiceInput):
            return await self.analysis_service.analyze_text(
                food_input.transcript.strip()
            )
        return await self.analysis_service.analyze_text(food_input.text.strip())


def _validate(food_input: FoodInput) -> LogType:
    if isinstance(food_input, TextInput):
        if not food_input.text.strip():
            raise ValidationError("No text provided")
        return LogType.TEXT
    if isinstance(food_input, VoiceInput):
        if not food_input.transcript.strip():
            raise ValidationError("No text provided")
        return LogType.VOICE
    if isinstance(food_input, ImageInput):
        if not food_input.content:
            raise ValidationError("No image file provided")
        return LogType.IMAGE
    raise ValidationError(f"Unsupported input: {type(food_input).__name__}")


def _build_entry(
    user_id: UUID, item: FoodItem, log_type: LogType, logged_at: datetime
) -> NewFoodLogEntry:
    return NewFoodLogEntry(
        user_id=user_id,
        description=f"{_format_quantity(item.quantity)} {item.unit} {item.name}",
        logged_at=logged_at,
        log_type=log_type,
        calories=item.macros.calories,
        protein_g=item.macros.protein,
        carbs_g=item.macros.carbs,
        fat_g=item.macros.fats,
        fiber_g=item.macros.fiber,
        sugar_g=item.macros.sugar,
        confidence=item.confidence,
        source=item.source,
        usda_food_id=item.external_ids.get("usda_food_id"),
        logmeal_food_id=item.external_ids.get("logmeal_food_id"),
        raw_response=item.raw or item.as_dict(),
    )


def _format_quantity(quantity: float) -> str:
    if quantity.is_integer():
        return str(int(quantity))
    return f"{quantity:g}"
