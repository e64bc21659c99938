"""Models for raw analysis provider payloads."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProviderMacros(BaseModel):
    """Macro block as reported by a provider; any field may be missing."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = Field(
        default=None, validation_alias=AliasChoices("fats", "fat")
    )
    fiber: float | None = None
    sugar: float | None = None


class ProviderFoodItem(BaseModel):
    """Single food item from text or vision analysis."""

    name: str | None = Field(
        default=None, validation_alias=AliasChoices("name", "label")
    )
    quantity: float | None = None
    unit: str | None = None
    confidence: float | None = None
    macros: ProviderMacros = Field(default_factory=ProviderMacros)
    usda_food_id: str | int | None = None
    logmeal_food_id: str | int | None = None


class ProviderAnalysis(BaseModel):
    """Structured output for text and vision analysis."""

    items: list[ProviderFoodItem]


class FoodImagePrediction(BaseModel):
    """Response of the food image prediction service."""

    food: str
    confidence: float | None = None
    nutrition: ProviderMacros


class InsightReport(BaseModel):
    """Daily insight produced by the LLM."""

    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(ge=0, le=100)
    summary: str
    macro_analysis: list[str] = Field(alias="macroAnalysis")
    recommendations: list[str]
