"""Model package exports."""

from models.outfit import OutfitSlots
from models.scrape_result import ScrapeResult
from models.taxonomy import *  # noqa: F401,F403
from models.wardrobe_item import WardrobeItem, from_raw_metadata

__all__ = ["OutfitSlots", "ScrapeResult", "WardrobeItem", "from_raw_metadata"]
