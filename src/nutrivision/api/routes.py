"""NutriVision API endpoints for signed-in users."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from nutrivision.api.auth import require_user
from nutrivision.api.models import (
    FoodLogTextRequest,
    InsightRequest,
    ProfileRequest,
    VoiceChatRequest,
    WaterIntakeRequest,
)
from nutrivision.domain.food_logs import (
    FoodInput,
    ImageInput,
    TextInput,
    VoiceInput,
)
from nutrivision.domain.models import RequestContext  # noqa: TC001
from nutrivision.errors import ValidationError
from nutrivision.services.events import FoodLogUpdated
from nutrivision.services.profiles import ProfileUpdate, is_onboarded

if TYPE_CHECKING:
    from nutrivision.containers import AppContainer

router = APIRouter(prefix="/api", tags=["api"])
_logger = logging.getLogger(__name__)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/food-logs")
async def create_food_log(
    request: Request, context: RequestContext = Depends(require_user)
) -> dict[str, object]:
    """Analyze a text, voice or image meal and store one log per food item."""
    container = _container(request)
    food_input = await _read_food_input(request)
    result = await container.ingestion_service.ingest(context, food_input)
    count = len(result.entries)
    await container.log_events.publish(
        FoodLogUpdated(user_id=context.user_id, entry_count=count)
    )
    return {
        "success": True,
        "logs": [entry.as_dict() for entry in result.entries],
        "analysis": result.analysis.as_dict(),
        "message": f"Successfully logged {count} food item(s)",
    }


@router.get("/food-logs")
async def list_food_logs(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    context: RequestContext = Depends(require_user),
) -> list[dict[str, object]]:
    """Return the caller's food logs, most recent first."""
    entries = _container(request).ingestion_service.list_logs(context, day)
    return [entry.as_dict() for entry in entries]


@router.get("/daily-nutrition")
async def daily_nutrition(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    context: RequestContext = Depends(require_user),
) -> dict[str, object]:
    summary = _container(request).daily_aggregator.get_summary(
        context.user_id, day or _today()
    )
    return summary.as_dict()


@router.get("/water-intake")
async def get_water_intake(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    context: RequestContext = Depends(require_user),
) -> dict[str, object]:
    day = day or _today()
    container = _container(request)
    summary = container.daily_aggregator.get_summary(context.user_id, day)
    return {
        "water_intake_glasses": summary.water_intake_glasses,
        "water_goal_glasses": container.profile_service.water_goal(context.user_id),
        "date": day.isoformat(),
    }


@router.post("/water-intake")
async def save_water_intake(
    body: WaterIntakeRequest,
    request: Request,
    context: RequestContext = Depends(require_user),
) -> dict[str, object]:
    """Store the absolute number of glasses for a day."""
    summary = _container(request).daily_aggregator.set_water_glasses(
        context.user_id, body.date, body.glasses
    )
    return {
        "success": True,
        "data": summary.as_dict(),
        "message": "Water intake updated successfully",
    }


@router.post("/generate-insights")
async def generate_insights(
    body: InsightRequest,
    request: Request,
    context: RequestContext = Depends(require_user),
) -> dict[str, object]:
    report = await _container(request).insight_service.generate(
        body.daily_nutrition, body.food_logs, body.goals
    )
    _logger.info("Generated insight", extra={"user_id": str(context.user_id)})
    return report.model_dump(by_alias=True)


@router.post("/voice-chat")
async def voice_chat(
    body: VoiceChatRequest,
    request: Request,
    context: RequestContext = Depends(require_user),
) -> dict[str, str]:
    """Answer a spoken question about the user's day."""
    reply = await _container(request).assistant_service.reply(
        body.message, body.context
    )
    return {"reply": reply}


@router.get("/user-profile", response_model=None)
async def get_user_profile(
    request: Request, context: RequestContext = Depends(require_user)
) -> dict[str, object] | JSONResponse:
    profile = _container(request).profile_service.get_profile(context.user_id)
    if profile is None:
        return JSONResponse(status_code=404, content={"error": "Profile not found"})
    return {**profile.as_dict(), "onboarded": is_onboarded(profile)}


@router.api_route("/user-profile", methods=["POST", "PUT"])
async def save_user_profile(
    body: ProfileRequest,
    request: Request,
    context: RequestContext = Depends(require_user),
) -> dict[str, object]:
    """Create or update the caller's health profile."""
    profile = _container(request).profile_service.save_profile(
        context.user_id, ProfileUpdate(**body.model_dump())
    )
    return {**profile.as_dict(), "onboarded": is_onboarded(profile)}


async def _read_food_input(request: Request) -> FoodInput:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("image")
        if upload is None or isinstance(upload, str):
            raise ValidationError("No image file provided")
        return ImageInput(
            content=await upload.read(),
            filename=upload.filename or "meal.jpg",
            content_type=upload.content_type,
        )
    try:
        body = FoodLogTextRequest.model_validate(await request.json())
    except ValueError as exc:
        raise ValidationError("Invalid request body", details=str(exc)) from exc
    if body.type == "voice":
        return VoiceInput(transcript=body.text)
    return TextInput(text=body.text)


def _today() -> date:
    return datetime.now(tz=UTC).date()
