"""Domain models for food logging."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from nutrivision.domain.daily import DailyNutritionSummary
from nutrivision.domain.nutrition import FoodAnalysisResult


class LogType(str, Enum):
    """How a meal was captured."""

    TEXT = "text"
    VOICE = "voice"
    IMAGE = "image"


@dataclass(frozen=True)
class TextInput:
    """Meal described as typed text."""

    text: str


@dataclass(frozen=True)
class VoiceInput:
    """Meal described as a speech transcript."""

    transcript: str


@dataclass(frozen=True)
class ImageInput:
    """Meal captured as an uploaded photo."""

    content: bytes
    filename: str = "meal.jpg"
    content_type: str | None = None


FoodInput = TextInput | VoiceInput | ImageInput


@dataclass(frozen=True)
class NewFoodLogEntry:
    """Food log row prepared for insertion."""

    user_id: UUID
    description: str
    logged_at: datetime
    log_type: LogType
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float
    sugar_g: float
    confidence: float | None
    source: str
    usda_food_id: str | None = None
    logmeal_food_id: str | None = None
    raw_response: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class FoodLogEntry:
    """Persisted food log row."""

    id: UUID
    user_id: UUID
    description: str
    logged_at: datetime
    log_type: LogType
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float
    sugar_g: float
    confidence: float | None
    source: str
    usda_food_id: str | None = None
    logmeal_food_id: str | None = None
    raw_response: dict[str, object] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "description": self.description,
            "logged_at": self.logged_at.isoformat(),
            "log_type": self.log_type.value,
            "calories": self.calories,
            "protein": self.protein_g,
            "carbs": self.carbs_g,
            "fat": self.fat_g,
            "fiber": self.fiber_g,
            "sugar": self.sugar_g,
            "confidence": self.confidence,
            "source": self.source,
            "usda_food_id": self.usda_food_id,
            "logmeal_food_id": self.logmeal_food_id,
            "raw_response": self.raw_response,
        }


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of a successful ingestion."""

    entries: list[FoodLogEntry]
    analysis: FoodAnalysisResult
    summary: DailyNutritionSummary
