"""Wardrobe operations used by the HTTP layer, including URL imports."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from models.identifiers import new_identifier, require_identifier
from models.scrape_result import ScrapeResult
from models.taxonomy import validate_category
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from smartfit_app.config import AppConfig
from smartfit_app.logging_config import get_logger, log_event, operation_context
from tools.observability import instrument_service
from tools.product_scraper import is_valid_product_url, scrape_product_info
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore

logger = get_logger(__name__)

DEFAULT_IMPORT_SIZE = "M"
UNSPECIFIED_COLOR = "Not specified"

Scraper = Callable[[str], ScrapeResult]


class UnsupportedProductURLError(ValueError):
    """Raised when an import URL is malformed or its retailer is not supported."""


def _default_store() -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore()


class WardrobeService:
    """Wraps a :class:`WardrobeStore` with validation and the URL import flow."""

    def __init__(
        self,
        store: Optional[WardrobeStore] = None,
        scraper: Optional[Scraper] = None,
        url_validator: Callable[[str], bool] = is_valid_product_url,
    ) -> None:
        self.store = store or _default_store()
        self.scraper = scraper or scrape_product_info
        self.url_validator = url_validator

    @classmethod
    def from_config(cls, config: AppConfig) -> "WardrobeService":
        def scraper(url: str) -> ScrapeResult:
            return scrape_product_info(
                url,
                page_timeout=config.page_timeout,
                image_timeout=config.image_timeout,
                user_agent=config.user_agent,
            )

        return cls(store=SQLiteWardrobeStore(config.wardrobe_db_path), scraper=scraper)

    @instrument_service("list_wardrobe_items")
    def list_items(self, user_id: str, category: Optional[str] = None) -> List[WardrobeItem]:
        require_identifier(user_id, "user id")
        if category:
            category = validate_category(category)
        return self.store.list_items_for_user(user_id, category=category)

    @instrument_service("add_wardrobe_item")
    def add_item(self, user_id: str, item_data: Dict[str, Any]) -> WardrobeItem:
        require_identifier(user_id, "user id")
        item = from_raw_metadata({**item_data, "user_id": user_id, "item_id": new_identifier()})
        return self.store.create_item(item)

    @instrument_service("update_wardrobe_item")
    def update_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[WardrobeItem]:
        require_identifier(item_id, "clothing id")
        return self.store.update_item(item_id, updates)

    @instrument_service("delete_wardrobe_item")
    def delete_item(self, item_id: str) -> bool:
        if not item_id:
            return False
        return self.store.delete_item(item_id)

    @instrument_service("import_wardrobe_item_from_url")
    def import_from_url(
        self, user_id: str, product_url: str, size: str = DEFAULT_IMPORT_SIZE
    ) -> Tuple[WardrobeItem, bool]:
        """Scrape a supported retailer page and store it as a wardrobe item.

        Returns the stored item and whether the page was actually scraped; a
        failed scrape still stores a placeholder item.
        """

        require_identifier(user_id, "user id")
        if not product_url or not self.url_validator(product_url):
            raise UnsupportedProductURLError(f"Valid product URL required: {product_url!r}")

        with operation_context("wardrobe.import_from_url") as correlation_id:
            scraped = self.scraper(product_url)
            item = from_raw_metadata(
                {
                    "item_id": new_identifier(),
                    "user_id": user_id,
                    "name": scraped.name,
                    "category": scraped.category,
                    "brand": scraped.brand or "",
                    "price": scraped.price or 0,
                    "color": scraped.color or UNSPECIFIED_COLOR,
                    "size": (size or DEFAULT_IMPORT_SIZE).upper(),
                    "material": scraped.material or "",
                    "item_url": product_url,
                    "image_data": scraped.image_data,
                }
            )
            stored = self.store.create_item(item)
            log_event(
                logger,
                logging.INFO,
                "wardrobe_item_imported",
                item_id=stored.item_id,
                url=product_url,
                category=stored.category,
                scraped=scraped.scraped_successfully,
                correlation_id=correlation_id,
            )
            return stored, scraped.scraped_successfully


__all__ = ["UnsupportedProductURLError", "WardrobeService"]
