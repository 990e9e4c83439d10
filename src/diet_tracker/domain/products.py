"""Domain models for barcode product lookups."""

from dataclasses import dataclass

from diet_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class ScannedProduct:
    """Packaged food facts from the product database."""

    barcode: str
    name: str
    image_url: str | None
    per_100g: MacroProfile
    per_serving: MacroProfile
