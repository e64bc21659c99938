"""Food analysis through hosted AI providers."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from nutrivision.domain.food_logs import ImageInput
from nutrivision.domain.nutrition import FoodAnalysisResult
from nutrivision.errors import AnalysisProviderError
from nutrivision.services.llm import LlmClient, LlmOptions
from nutrivision.services.normalizer import (
    normalize_food_image_prediction,
    normalize_text_analysis,
    normalize_vision_analysis,
)

_logger = logging.getLogger(__name__)

_NULLABLE_NUMBER = {"anyOf": [{"type": "number", "minimum": 0}, {"type": "null"}]}
_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}

FOOD_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "number", "minimum": 0},
                    "unit": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                    "macros": {
                        "type": "object",
                        "properties": {
                            "calories": _NULLABLE_NUMBER,
                            "protein": _NULLABLE_NUMBER,
                            "carbs": _NULLABLE_NUMBER,
                            "fats": _NULLABLE_NUMBER,
                            "fiber": _NULLABLE_NUMBER,
                            "sugar": _NULLABLE_NUMBER,
                        },
                        "required": [
                            "calories",
                            "protein",
                            "carbs",
                            "fats",
                            "fiber",
                            "sugar",
                        ],
                        "additionalProperties": False,
                    },
                    "usda_food_id": _NULLABLE_STRING,
                },
                "required": [
                    "name",
                    "quantity",
                    "unit",
                    "confidence",
                    "macros",
                    "usda_food_id",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

TEXT_PROMPT = (
    'Analyze this food log: "{text}". '
    "List every distinct food item with its quantity and unit, "
    "your confidence (0-1), and estimated calories, protein, carbs, fats, "
    "fiber and sugar in grams for the stated portion."
)

IMAGE_PROMPT = (
    "Identify the food items in the image. "
    "For each item return a short name, a portion quantity and unit, "
    "your confidence (0-1), and estimated calories, protein, carbs, fats, "
    "fiber and sugar in grams for the visible portion."
)


class FoodImageClient(Protocol):
    """Interface for the dedicated food image prediction service."""

    async def predict(self, image: ImageInput) -> dict[str, object]:
        """Return the raw prediction payload for an image."""


class ImageAnalysisStrategy(Protocol):
    """One provider in the ordered image analysis chain."""

    name: str

    async def analyze(self, image: ImageInput) -> FoodAnalysisResult:
        """Analyze an image or raise AnalysisProviderError."""


@dataclass
class FoodImageStrategy:
    """Primary image path backed by the food image prediction service."""

    client: FoodImageClient
    name: str = "food_image_api"

    async def analyze(self, image: ImageInput) -> FoodAnalysisResult:
        raw = await self.client.predict(image)
        return normalize_food_image_prediction(raw)


@dataclass
class LlmVisionStrategy:
    """Fallback image path backed by an LLM with vision input."""

    client: LlmClient
    options: LlmOptions
    name: str = "llm_vision"

    async def analyze(self, image: ImageInput) -> FoodAnalysisResult:
        raw = await self.client.generate_json(
            options=self.options,
            prompt=IMAGE_PROMPT,
            schema=FOOD_ANALYSIS_SCHEMA,
            schema_name="food_analysis",
            image_data_url=to_data_url(image.content, image.content_type),
        )
        return normalize_vision_analysis(raw)


@dataclass
class FoodAnalysisService:
    """Dispatches text and image analysis to the configured providers."""

    llm_client: LlmClient
    options: LlmOptions
    image_strategies: list[ImageAnalysisStrategy]

    async def analyze_text(self, text: str) -> FoodAnalysisResult:
        """Analyze a typed or transcribed meal description."""
        raw = await self.llm_client.generate_json(
            options=self.options,
            prompt=TEXT_PROMPT.format(text=text),
            schema=FOOD_ANALYSIS_SCHEMA,
            schema_name="food_analysis",
        )
        return normalize_text_analysis(raw)

    async def analyze_image(self, image: ImageInput) -> FoodAnalysisResult:
        """Try each image strategy in order; the first success wins."""
        failures: list[str] = []
        for strategy in self.image_strategies:
            try:
                return await strategy.analyze(image)
            except AnalysisProviderError as exc:
                _logger.warning(
                    "Image analysis provider failed: %s",
                    exc.message,
                    extra={"provider": strategy.name},
                )
                failures.append(f"{strategy.name}: {exc.message}")
        raise AnalysisProviderError(
            "Failed to analyze food image",
            details="; ".join(failures) or "No image analysis providers configured",
        )


def to_data_url(image_bytes: bytes, content_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = content_type if _is_image_type(content_type) else None
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type or _detect_mime_type(image_bytes)};base64,{encoded}"


def _is_image_type(content_type: str | None) -> bool:
    return bool(content_type) and content_type.startswith("image/")


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
