"""Normalized output of one product page scrape."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

FALLBACK_NAME = "Imported Item"
MAX_NAME_LENGTH = 100


@dataclass(frozen=True)
class ScrapeResult:
    """A wardrobe-item draft built from a retailer product page.

    The record is always fully populated; ``scraped_successfully`` is the only
    signal that the page could not be fetched or parsed.
    """

    name: str
    brand: str
    price: float
    color: str
    category: str
    item_url: str
    image_data: Optional[str]
    material: str
    scraped_successfully: bool

    @classmethod
    def failed(cls, product_url: str) -> "ScrapeResult":
        """Fixed-shape result returned when the page never made it to parsing."""

        return cls(
            name=FALLBACK_NAME,
            brand="",
            price=0,
            color="",
            category="tops",
            item_url=product_url,
            image_data=None,
            material="",
            scraped_successfully=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["FALLBACK_NAME", "MAX_NAME_LENGTH", "ScrapeResult"]
