"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from nutrivision.adapters.food_image_client import HttpxFoodImageClient
from nutrivision.adapters.local_store import JsonFileStore
from nutrivision.adapters.openai_client import OpenAIResponsesClient
from nutrivision.adapters.supabase_authenticator import SupabaseAuthenticator
from nutrivision.adapters.supabase_daily_nutrition_repository import (
    SupabaseDailyNutritionRepository,
)
from nutrivision.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from nutrivision.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrivision.adapters.water_intake_client import HttpxWaterIntakeClient
from nutrivision.config import Settings
from nutrivision.services.analysis import (
    FoodAnalysisService,
    FoodImageStrategy,
    LlmVisionStrategy,
)
from nutrivision.services.assistant import AssistantService
from nutrivision.services.auth import Authenticator
from nutrivision.services.daily import DailyAggregator
from nutrivision.services.events import LogUpdateBroadcaster
from nutrivision.services.ingestion import FoodLogIngestionService
from nutrivision.services.insights import InsightService
from nutrivision.services.llm import LlmOptions
from nutrivision.services.profiles import ProfileService
from nutrivision.services.scheduling import AsyncioScheduler
from nutrivision.services.streak import HydrationStreakTracker
from nutrivision.services.water import LoggingNotifier, WaterIntakeController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    authenticator: Authenticator
    analysis_service: FoodAnalysisService
    ingestion_service: FoodLogIngestionService
    daily_aggregator: DailyAggregator
    insight_service: InsightService
    assistant_service: AssistantService
    profile_service: ProfileService
    log_events: LogUpdateBroadcaster
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    llm_client = OpenAIResponsesClient.create(
        resolved_settings.openai_api_key,
        timeout=resolved_settings.provider_timeout_seconds,
    )
    llm_options = LlmOptions(
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    food_image_client = HttpxFoodImageClient.create(
        resolved_settings.food_image_api_url,
        timeout=resolved_settings.provider_timeout_seconds,
    )
    analysis_service = FoodAnalysisService(
        llm_client=llm_client,
        options=llm_options,
        image_strategies=[
            FoodImageStrategy(food_image_client),
            LlmVisionStrategy(llm_client, llm_options),
        ],
    )
    daily_aggregator = DailyAggregator(
        SupabaseDailyNutritionRepository(supabase_client)
    )
    ingestion_service = FoodLogIngestionService(
        analysis_service=analysis_service,
        repository=SupabaseFoodLogRepository(supabase_client),
        aggregator=daily_aggregator,
    )
    profile_service = ProfileService(
        SupabaseProfileRepository(supabase_client),
        default_calorie_goal=resolved_settings.default_calorie_goal,
        default_water_goal_glasses=resolved_settings.default_water_goal_glasses,
    )

    async def close_resources() -> None:
        await food_image_client.close()
        await llm_client.close()

    return AppContainer(
        settings=resolved_settings,
        authenticator=SupabaseAuthenticator(supabase_client),
        analysis_service=analysis_service,
        ingestion_service=ingestion_service,
        daily_aggregator=daily_aggregator,
        insight_service=InsightService(llm_client, llm_options),
        assistant_service=AssistantService(
            llm_client,
            llm_options,
            default_calorie_goal=resolved_settings.default_calorie_goal,
        ),
        profile_service=profile_service,
        log_events=LogUpdateBroadcaster(),
        close_resources=close_resources,
    )


def build_water_controller(
    base_url: str,
    access_token: str,
    store_path: Path,
    goal: int = 8,
    timeout: float = 30.0,
) -> tuple[WaterIntakeController, Callable[[], Awaitable[None]]]:
    """Wire a water controller against a running API for one signed-in user.

    Must be called inside a running event loop. `goal` applies until `load()`
    adopts the goal stored in the user's profile. Returns the controller and
    a coroutine function that flushes pending work and closes the session.
    """
    gateway = HttpxWaterIntakeClient.create(
        base_url, access_token, timeout=timeout
    )
    scheduler = AsyncioScheduler()
    controller = WaterIntakeController(
        gateway=gateway,
        scheduler=scheduler,
        notifier=LoggingNotifier(),
        streak=HydrationStreakTracker(JsonFileStore(store_path)),
        goal=goal,
    )

    async def close() -> None:
        await controller.close()
        await scheduler.drain()
        await gateway.close()

    return controller, close
