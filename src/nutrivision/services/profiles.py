"""Health profile service."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from nutrivision.domain.models import UserProfile
from nutrivision.errors import ValidationError

_PLACEHOLDER_CHOICES = {"none", "none of the above"}
MAX_AGE = 130


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile with its child lists."""

    def upsert_profile(self, user_id: UUID, fields: dict[str, object]) -> None:
        """Create or update the profile row."""

    def replace_medical_conditions(self, user_id: UUID, conditions: list[str]) -> None:
        """Replace all medical condition rows for a user."""

    def replace_dietary_restrictions(
        self, user_id: UUID, restrictions: list[str]
    ) -> None:
        """Replace all dietary restriction rows for a user."""

    def replace_allergies(self, user_id: UUID, allergens: list[str]) -> None:
        """Replace all food allergy rows for a user."""


@dataclass(frozen=True)
class ProfileUpdate:
    """Fields submitted from onboarding or the profile screen."""

    age: int | None = None
    gender: str | None = None
    activity_level: str | None = None
    calorie_goal: int | None = None
    water_goal_glasses: int | None = None
    medical_conditions: list[str] | None = None
    dietary_restrictions: list[str] | None = None
    allergies: list[str] | None = None


@dataclass
class ProfileService:
    """Reads and saves health profiles."""

    repository: ProfileRepository
    default_calorie_goal: int = 2500
    default_water_goal_glasses: int = 8

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile with goal defaults applied."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return None
        return replace(
            profile,
            calorie_goal=profile.calorie_goal or self.default_calorie_goal,
            water_goal_glasses=(
                profile.water_goal_glasses or self.default_water_goal_glasses
            ),
        )

    def save_profile(self, user_id: UUID, update: ProfileUpdate) -> UserProfile:
        """Upsert profile columns, then replace any submitted child lists."""
        _validate(update)
        fields: dict[str, object] = {
            key: value
            for key, value in (
                ("age", update.age),
                ("gender", _clean(update.gender)),
                ("activity_level", _clean(update.activity_level)),
                ("calorie_goal", update.calorie_goal),
                ("water_goal_glasses", update.water_goal_glasses),
            )
            if value is not None
        }
        self.repository.upsert_profile(user_id, fields)
        if update.medical_conditions is not None:
            self.repository.replace_medical_conditions(
                user_id, _clean_choices(update.medical_conditions)
            )
        if update.dietary_restrictions is not None:
            self.repository.replace_dietary_restrictions(
                user_id, _clean_choices(update.dietary_restrictions)
            )
        if update.allergies is not None:
            self.repository.replace_allergies(
                user_id, _clean_choices(update.allergies)
            )
        profile = self.get_profile(user_id)
        if profile is None:
            raise ValidationError("Profile could not be saved")
        return profile

    def water_goal(self, user_id: UUID) -> int:
        profile = self.get_profile(user_id)
        if profile is None or profile.water_goal_glasses is None:
            return self.default_water_goal_glasses
        return profile.water_goal_glasses


def is_onboarded(profile: UserProfile | None) -> bool:
    """Return True once the onboarding basics are filled in."""
    return profile is not None and bool(profile.age) and bool(profile.gender)


def _validate(update: ProfileUpdate) -> None:
    if update.age is not None and not 0 < update.age <= MAX_AGE:
        raise ValidationError("Age must be between 1 and 130")
    if update.calorie_goal is not None and update.calorie_goal <= 0:
        raise ValidationError("Calorie goal must be positive")
    if update.water_goal_glasses is not None and update.water_goal_glasses <= 0:
        raise ValidationError("Water goal must be positive")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _clean_choices(values: list[str]) -> list[str]:
    cleaned: list[str] = []
    for value in values:
        item = value.strip()
        if not item or item.lower() in _PLACEHOLDER_CHOICES or item in cleaned:
            continue
        cleaned.append(item)
    return cleaned
