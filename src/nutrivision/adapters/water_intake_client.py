"""HTTP client used by the water intake controller."""

from dataclasses import dataclass
from datetime import date

import httpx

from nutrivision.errors import WaterIntakeSyncError
from nutrivision.services.water import WaterIntakeGateway, WaterReading


@dataclass
class HttpxWaterIntakeClient(WaterIntakeGateway):
    """Talks to the water intake endpoints on behalf of a signed-in user."""

    base_url: str
    access_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, base_url: str, access_token: str, timeout: float = 30.0
    ) -> "HttpxWaterIntakeClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            access_token=access_token,
            http_client=httpx.AsyncClient(timeout=timeout),
        )

    async def fetch(self, day: date) -> WaterReading:
        """Return the stored glasses for a day and the user's goal."""
        payload = await self._request(
            "GET", "/api/water-intake", params={"date": day.isoformat()}
        )
        goal = payload.get("water_goal_glasses")
        return WaterReading(
            glasses=_glasses(payload),
            goal=goal if isinstance(goal, int) and not isinstance(goal, bool) else None,
        )

    async def save(self, day: date, glasses: int) -> int:
        """Store the absolute glasses for a day."""
        payload = await self._request(
            "POST",
            "/api/water-intake",
            json={"date": day.isoformat(), "glasses": glasses},
        )
        data = payload.get("data")
        return _glasses(data if isinstance(data, dict) else {})

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> dict[str, object]:
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers={"Authorization": f"Bearer {self.access_token}"},
                params=params,
                json=json,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise WaterIntakeSyncError(
                "Failed to save water intake", details=f"{type(exc).__name__}: {exc}"
            ) from exc
        except ValueError as exc:
            raise WaterIntakeSyncError(
                "Water intake endpoint returned invalid JSON", details=str(exc)
            ) from exc
        if not isinstance(payload, dict):
            raise WaterIntakeSyncError("Water intake endpoint returned a non-object")
        return payload


def _glasses(payload: dict[str, object]) -> int:
    value = payload.get("water_intake_glasses")
    if isinstance(value, bool) or not isinstance(value, int):
        raise WaterIntakeSyncError("Water intake response is missing the glass count")
    return value
