"""Barcode product lookups backed by OpenFoodFacts."""

import logging
from dataclasses import dataclass

from diet_tracker.adapters.openfoodfacts_client import ProductClient
from diet_tracker.domain.meals import MealEntry, MealKind
from diet_tracker.domain.nutrition import MacroProfile
from diet_tracker.domain.products import ScannedProduct
from diet_tracker.services.cache import Cache
from diet_tracker.services.recipes import PLACEHOLDER_IMAGE, parse_amount
from diet_tracker.services.retry import call_with_retry

_logger = logging.getLogger(__name__)


@dataclass
class ProductService:
    """Product lookups with caching."""

    client: ProductClient
    cache: Cache
    product_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def get_product(self, barcode: str) -> ScannedProduct | None:
        """Return product facts, or None when the barcode is unknown."""
        cache_key = f"off:product:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, ScannedProduct):
            return cached

        payload = await call_with_retry(
            lambda: self.client.get_product(barcode),
            action=f"product:{barcode}",
            attempts=self.retry_attempts,
            delay_seconds=self.retry_delay_seconds,
        )
        product = payload.get("product")
        if not isinstance(product, dict):
            _logger.info("Product not found: barcode=%s", barcode)
            return None
        nutriments = product.get("nutriments") or {}
        scanned = ScannedProduct(
            barcode=barcode,
            name=str(product.get("product_name") or "Unknown Item"),
            image_url=product.get("image_url"),
            per_100g=MacroProfile(
                calories=parse_amount(nutriments.get("energy-kcal")),
                protein_g=parse_amount(nutriments.get("proteins")),
                fat_g=parse_amount(nutriments.get("fat")),
                carbs_g=parse_amount(nutriments.get("carbohydrates")),
            ),
            per_serving=MacroProfile(
                calories=parse_amount(nutriments.get("energy-kcal_serving")),
                protein_g=parse_amount(nutriments.get("proteins_serving")),
                fat_g=parse_amount(nutriments.get("fat_serving")),
                carbs_g=parse_amount(nutriments.get("carbohydrates_serving")),
            ),
        )
        self.cache.set(cache_key, scanned, ttl_seconds=self.product_ttl_seconds)
        return scanned

    async def get_meal_entry(self, barcode: str) -> MealEntry | None:
        """Hydrate a barcode into a meal entry from per-serving facts."""
        try:
            product = await self.get_product(barcode)
        except Exception:
            _logger.exception("Product hydration failed", extra={"barcode": barcode})
            return None
        if product is None:
            return None
        return MealEntry(
            kind=MealKind.SCANNED,
            id=barcode,
            name=product.name,
            protein_g=product.per_serving.protein_g,
            carbs_g=product.per_serving.carbs_g,
            fat_g=product.per_serving.fat_g,
            calories=product.per_serving.calories,
            image=product.image_url or PLACEHOLDER_IMAGE,
        )
