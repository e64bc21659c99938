"""Request bodies accepted by the HTTP API."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class FoodLogTextRequest(BaseModel):
    """JSON body for text and voice meal logs."""

    text: str = ""
    type: Literal["text", "voice"] = "text"


class WaterIntakeRequest(BaseModel):
    """Absolute water intake for a day."""

    date: date
    glasses: int = Field(ge=0)


class InsightRequest(BaseModel):
    """Snapshot of the day sent by the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    daily_nutrition: dict[str, object] = Field(
        default_factory=dict, alias="dailyNutrition"
    )
    food_logs: list[dict[str, object]] = Field(default_factory=list, alias="foodLogs")
    goals: dict[str, object] = Field(default_factory=dict)


class VoiceChatRequest(BaseModel):
    message: str = ""
    context: dict[str, object] = Field(default_factory=dict)


class ProfileRequest(BaseModel):
    """Profile fields; omitted fields are left untouched."""

    age: int | None = None
    gender: str | None = None
    activity_level: str | None = None
    calorie_goal: int | None = None
    water_goal_glasses: int | None = None
    medical_conditions: list[str] | None = None
    dietary_restrictions: list[str] | None = None
    allergies: list[str] | None = None
