"""Client for the hosted food image prediction service."""

from dataclasses import dataclass

import httpx

from nutrivision.domain.food_logs import ImageInput
from nutrivision.errors import AnalysisProviderError
from nutrivision.services.analysis import FoodImageClient


@dataclass
class HttpxFoodImageClient(FoodImageClient):
    """HTTPX-backed food image client posting multipart uploads."""

    url: str
    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(cls, url: str, timeout: float = 30.0) -> "HttpxFoodImageClient":
        """Create a client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def predict(self, image: ImageInput) -> dict[str, object]:
        """Upload the image and return the raw prediction."""
        files = {
            "file": (
                image.filename,
                image.content,
                image.content_type or "application/octet-stream",
            )
        }
        try:
            response = await self.http_client.post(
                self.url, files=files, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise AnalysisProviderError(
                "Food image API error", details=f"{type(exc).__name__}: {exc}"
            ) from exc
        except ValueError as exc:
            raise AnalysisProviderError(
                "Food image API returned invalid JSON", details=str(exc)
            ) from exc
        if not isinstance(payload, dict):
            raise AnalysisProviderError("Food image API returned a non-object payload")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
