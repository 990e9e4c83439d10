"""OpenFoodFacts product API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class ProductClient(Protocol):
    """Interface for barcode product lookups."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(ProductClient):
    """HTTPX-backed OpenFoodFacts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, base_url: str, timeout: float = 15) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(
                headers={"User-Agent": "diet-tracker/0.1"}
            ),
            timeout=timeout,
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        response = await self.http_client.get(
            f"{self.base_url}/api/v0/product/{barcode}.json",
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
