"""Domain models for users and profiles."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller for a single request."""

    user_id: UUID
    email: str | None
    access_token: str


@dataclass(frozen=True)
class UserProfile:
    """Health profile captured during onboarding."""

    user_id: UUID
    age: int | None
    gender: str | None
    activity_level: str | None
    calorie_goal: int | None
    water_goal_glasses: int | None
    medical_conditions: list[str] = field(default_factory=list)
    dietary_restrictions: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    updated_at: datetime | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "user_id": str(self.user_id),
            "age": self.age,
            "gender": self.gender,
            "activity_level": self.activity_level,
            "calorie_goal": self.calorie_goal,
            "water_goal_glasses": self.water_goal_glasses,
            "medical_conditions": list(self.medical_conditions),
            "dietary_restrictions": list(self.dietary_restrictions),
            "allergies": list(self.allergies),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
