"""Nutrition domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Macros:
    """Macronutrient quantities for an item or a day."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0

    def plus(self, other: "Macros") -> "Macros":
        """Return the field-wise sum of two macro sets."""
        return Macros(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats,
            fiber=self.fiber + other.fiber,
            sugar=self.sugar + other.sugar,
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
            "fiber": self.fiber,
            "sugar": self.sugar,
        }


@dataclass(frozen=True)
class FoodItem:
    """A single food detected by an analysis provider."""

    name: str
    quantity: float
    unit: str
    confidence: float | None
    macros: Macros
    source: str
    external_ids: dict[str, str] = field(default_factory=dict)
    raw: dict[str, object] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "confidence": self.confidence,
            "macros": self.macros.as_dict(),
            "source": self.source,
        }
        payload.update(self.external_ids)
        return payload


@dataclass(frozen=True)
class FoodAnalysisResult:
    """Canonical analysis output: detected items plus their totals."""

    items: list[FoodItem]
    totals: Macros

    def as_dict(self) -> dict[str, object]:
        return {
            "items": [item.as_dict() for item in self.items],
            "totals": self.totals.as_dict(),
        }
