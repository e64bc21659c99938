"""Normalize provider payloads into a canonical analysis result."""

import json
import math
import re
from collections.abc import Mapping

import pydantic

from nutrivision.domain.analysis import (
    FoodImagePrediction,
    ProviderAnalysis,
    ProviderFoodItem,
    ProviderMacros,
)
from nutrivision.domain.nutrition import FoodAnalysisResult, FoodItem, Macros
from nutrivision.errors import ParseError

TEXT_SOURCE = "nutrivision_text"
VISION_SOURCE = "nutrivision_vision"
FOOD_IMAGE_SOURCE = "food_image_api"

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
_EXTERNAL_ID_FIELDS = ("usda_food_id", "logmeal_food_id")


def parse_json_payload(payload: str | Mapping[str, object]) -> dict[str, object]:
    """Decode a provider payload, tolerating Markdown code fences."""
    if isinstance(payload, Mapping):
        return dict(payload)
    cleaned = _FENCE_PATTERN.sub("", payload).strip()
    if not cleaned:
        raise ParseError("Provider returned an empty response")
    try:
        decoded = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ParseError("Provider returned invalid JSON", details=str(exc)) from exc
    if not isinstance(decoded, dict):
        raise ParseError("Provider returned a non-object JSON payload")
    return decoded


def normalize_text_analysis(
    payload: str | Mapping[str, object], source: str = TEXT_SOURCE
) -> FoodAnalysisResult:
    """Normalize an `{items: [...]}` payload from text or vision analysis."""
    data = parse_json_payload(payload)
    try:
        parsed = ProviderAnalysis.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ParseError(
            "Provider analysis has an unexpected shape", details=str(exc)
        ) from exc
    raw_items = data.get("items")
    items = [
        _normalize_item(item, raw, source)
        for item, raw in zip(parsed.items, _as_dicts(raw_items), strict=True)
    ]
    return FoodAnalysisResult(items=items, totals=sum_macros(items))


def normalize_vision_analysis(
    payload: str | Mapping[str, object],
) -> FoodAnalysisResult:
    """Normalize LLM vision output, which shares the text analysis shape."""
    return normalize_text_analysis(payload, source=VISION_SOURCE)


def normalize_food_image_prediction(
    payload: str | Mapping[str, object],
) -> FoodAnalysisResult:
    """Normalize the single-prediction response of the food image service."""
    data = parse_json_payload(payload)
    try:
        prediction = FoodImagePrediction.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ParseError(
            "Food image prediction has an unexpected shape", details=str(exc)
        ) from exc
    nutrition = prediction.nutrition.model_copy(update={"sugar": 0.0})
    item = FoodItem(
        name=prediction.food.strip() or "item",
        quantity=1.0,
        unit="serving",
        confidence=_clamp_confidence(prediction.confidence),
        macros=normalize_macros(nutrition),
        source=FOOD_IMAGE_SOURCE,
        raw=data,
    )
    return FoodAnalysisResult(items=[item], totals=item.macros)


def normalize_macros(raw: ProviderMacros) -> Macros:
    """Coerce provider macros to finite, non-negative values.

    Calories omitted by the provider are estimated from the Atwater factors.
    """
    protein = _amount(raw.protein)
    carbs = _amount(raw.carbs)
    fats = _amount(raw.fats)
    if raw.calories is None:
        calories = 4 * protein + 4 * carbs + 9 * fats
    else:
        calories = _amount(raw.calories)
    return Macros(
        calories=calories,
        protein=protein,
        carbs=carbs,
        fats=fats,
        fiber=_amount(raw.fiber),
        sugar=_amount(raw.sugar),
    )


def sum_macros(items: list[FoodItem]) -> Macros:
    total = Macros()
    for item in items:
        total = total.plus(item.macros)
    return total


def _normalize_item(
    item: ProviderFoodItem, raw: dict[str, object], source: str
) -> FoodItem:
    name = (item.name or "").strip() or "item"
    quantity = _amount(item.quantity) if item.quantity is not None else 1.0
    external_ids = {
        key: str(value)
        for key in _EXTERNAL_ID_FIELDS
        if (value := getattr(item, key)) is not None
    }
    return FoodItem(
        name=name,
        quantity=quantity or 1.0,
        unit=(item.unit or "").strip() or "serving",
        confidence=_clamp_confidence(item.confidence),
        macros=normalize_macros(item.macros),
        source=source,
        external_ids=external_ids,
        raw=raw,
    )


def _as_dicts(raw_items: object) -> list[dict[str, object]]:
    if not isinstance(raw_items, list):
        return []
    return [dict(raw) if isinstance(raw, Mapping) else {} for raw in raw_items]


def _amount(value: float | None) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return max(float(value), 0.0)


def _clamp_confidence(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return min(max(float(value), 0.0), 1.0)
