"""Tests for food log ingestion."""

import asyncio
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from nutrivision.domain.food_logs import (
    FoodLogEntry,
    ImageInput,
    LogType,
    TextInput,
    VoiceInput,
)
from nutrivision.domain.models import RequestContext
from nutrivision.domain.nutrition import Macros
from nutrivision.errors import AnalysisProviderError, PersistenceError, ValidationError
from nutrivision.services.analysis import FoodAnalysisService
from nutrivision.services.daily import DailyAggregator
from nutrivision.services.ingestion import FoodLogIngestionService
from nutrivision.services.llm import LlmOptions
from tests.conftest import (
    CountingStrategy,
    FakeFoodImageClient,
    FakeLlmClient,
    InMemoryDailyNutritionRepository,
    InMemoryFoodLogRepository,
)


def _service(
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
) -> FoodLogIngestionService:
    return FoodLogIngestionService(
        analysis_service=analysis_service,
        repository=food_log_repository,
        aggregator=DailyAggregator(daily_repository),
    )


def test_text_log_raises_daily_calories_by_provider_total(
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    request_context: RequestContext,
) -> None:
    service = _service(analysis_service, food_log_repository, daily_repository)
    today = datetime.now(tz=UTC).date()
    aggregator = DailyAggregator(daily_repository)
    aggregator.merge(request_context.user_id, today, Macros(calories=500))

    result = asyncio.run(
        service.ingest(request_context, TextInput(text="2 eggs and toast"))
    )

    assert result.summary.total_calories == 720
    assert daily_repository.rows[(request_context.user_id, today)].total_calories == 720
    assert [entry.description for entry in result.entries] == [
        "2 large eggs",
        "1 slice toast",
    ]
    assert {entry.log_type for entry in result.entries} == {LogType.TEXT}
    assert len({entry.logged_at for entry in result.entries}) == 1
    assert result.entries[0].usda_food_id == "173424"
    assert food_log_repository.insert_calls == 1


def test_voice_log_is_tagged_voice(
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    request_context: RequestContext,
) -> None:
    service = _service(analysis_service, food_log_repository, daily_repository)

    result = asyncio.run(
        service.ingest(request_context, VoiceInput(transcript=" two eggs "))
    )

    assert {entry.log_type for entry in result.entries} == {LogType.VOICE}


def test_image_log_uses_food_image_result(
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    request_context: RequestContext,
) -> None:
    service = _service(analysis_service, food_log_repository, daily_repository)

    result = asyncio.run(
        service.ingest(request_context, ImageInput(content=b"\xff\xd8\xffdata"))
    )

    assert len(result.entries) == 1
    entry = result.entries[0]
    assert entry.description == "1 serving pizza"
    assert entry.log_type is LogType.IMAGE
    assert entry.calories == 285
    assert result.summary.total_calories == 285


@pytest.mark.parametrize(
    "food_input",
    [TextInput(text="   "), VoiceInput(transcript=""), ImageInput(content=b"")],
)
def test_empty_input_is_rejected_without_side_effects(
    food_input,
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    llm_client: FakeLlmClient,
    food_image_client: FakeFoodImageClient,
    request_context: RequestContext,
) -> None:
    service = _service(analysis_service, food_log_repository, daily_repository)

    with pytest.raises(ValidationError):
        asyncio.run(service.ingest(request_context, food_input))

    assert llm_client.json_calls == []
    assert food_image_client.calls == 0
    assert food_log_repository.insert_calls == 0
    assert daily_repository.rows == {}


def test_all_image_providers_failing_creates_no_rows(
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    request_context: RequestContext,
) -> None:
    primary = CountingStrategy(name="food_image_api")
    fallback = CountingStrategy(name="llm_vision")
    analysis_service = FoodAnalysisService(
        llm_client=FakeLlmClient(),
        options=LlmOptions(model="gpt-5.2"),
        image_strategies=[primary, fallback],
    )
    service = _service(analysis_service, food_log_repository, daily_repository)

    with pytest.raises(AnalysisProviderError):
        asyncio.run(service.ingest(request_context, ImageInput(content=b"data")))

    assert primary.calls == 1
    assert fallback.calls == 1
    assert food_log_repository.entries == []
    assert daily_repository.rows == {}


def test_zero_items_skip_insert_but_touch_summary(
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    llm_client: FakeLlmClient,
    request_context: RequestContext,
) -> None:
    llm_client.json_payloads = ['{"items": []}']
    service = _service(analysis_service, food_log_repository, daily_repository)

    result = asyncio.run(service.ingest(request_context, TextInput(text="water")))

    assert result.entries == []
    assert food_log_repository.insert_calls == 0
    assert result.summary.total_calories == 0


def test_insert_failure_leaves_totals_untouched(
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    request_context: RequestContext,
) -> None:
    food_log_repository.fail_insert = True
    service = _service(analysis_service, food_log_repository, daily_repository)

    with pytest.raises(PersistenceError):
        asyncio.run(service.ingest(request_context, TextInput(text="eggs")))

    assert daily_repository.rows == {}


def test_list_logs_filters_by_day(
    analysis_service: FoodAnalysisService,
    food_log_repository: InMemoryFoodLogRepository,
    daily_repository: InMemoryDailyNutritionRepository,
    request_context: RequestContext,
) -> None:
    service = _service(analysis_service, food_log_repository, daily_repository)
    asyncio.run(service.ingest(request_context, TextInput(text="2 eggs and toast")))
    yesterday = datetime.now(tz=UTC) - timedelta(days=1)
    food_log_repository.entries.append(
        FoodLogEntry(
            id=uuid4(),
            user_id=request_context.user_id,
            description="1 bowl soup",
            logged_at=yesterday,
            log_type=LogType.TEXT,
            calories=150,
            protein_g=5,
            carbs_g=20,
            fat_g=4,
            fiber_g=2,
            sugar_g=3,
            confidence=0.7,
            source="nutrivision_text",
        )
    )

    today_logs = service.list_logs(request_context, datetime.now(tz=UTC).date())
    all_logs = service.list_logs(request_context)

    assert len(today_logs) == 2
    assert len(all_logs) == 3
    assert all_logs[-1].description == "1 bowl soup"
