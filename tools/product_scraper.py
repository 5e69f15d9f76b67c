"""Turn a retailer product URL into a wardrobe-item draft."""

from __future__ import annotations

import enum
import logging
from typing import Optional, Tuple
from urllib.parse import urlparse

from models.scrape_result import MAX_NAME_LENGTH, ScrapeResult
from smartfit_app.config import DEFAULT_IMAGE_TIMEOUT, DEFAULT_PAGE_TIMEOUT, DEFAULT_USER_AGENT
from smartfit_app.logging_config import get_logger, log_event, operation_context
from tools.product_page_fetcher import (
    ImageDownloadError,
    InvalidProductURLError,
    ProductPageFetchError,
    fetch_image_as_data_url,
    fetch_product_page,
)
from tools.product_parser import ParsedProduct, parse_product_html
from tools.site_profiles import get_site_profile

logger = get_logger(__name__)


class ScrapeOutcome(str, enum.Enum):
    SCRAPED = "scraped"
    INVALID_URL = "invalid_url"
    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"


class ImageOutcome(str, enum.Enum):
    DOWNLOADED = "downloaded"
    NO_IMAGE = "no_image"
    DOWNLOAD_FAILED = "download_failed"


def is_valid_product_url(url: str) -> bool:
    """Return True for absolute URLs whose host belongs to a supported retailer."""

    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if not parsed.scheme or not parsed.netloc:
        return False
    return get_site_profile(url) is not None


def _parse_page(
    product_url: str, page_timeout: Optional[float], user_agent: str
) -> Tuple[ScrapeOutcome, Optional[ParsedProduct]]:
    try:
        html = fetch_product_page(product_url, timeout=page_timeout, user_agent=user_agent)
    except InvalidProductURLError:
        return ScrapeOutcome.INVALID_URL, None
    except ProductPageFetchError:
        return ScrapeOutcome.FETCH_FAILED, None

    try:
        return ScrapeOutcome.SCRAPED, parse_product_html(html, product_url, get_site_profile(product_url))
    except Exception:  # malformed markup must not escape the scrape boundary
        logger.exception("Failed to parse product page", extra={"url": product_url})
        return ScrapeOutcome.PARSE_FAILED, None


def _download_image(image_url: str, image_timeout: Optional[float]) -> Tuple[ImageOutcome, Optional[str]]:
    if not image_url:
        return ImageOutcome.NO_IMAGE, None
    try:
        return ImageOutcome.DOWNLOADED, fetch_image_as_data_url(image_url, timeout=image_timeout)
    except ImageDownloadError as exc:
        logger.warning("Image download failed", extra={"url": image_url, "error": str(exc)})
        return ImageOutcome.DOWNLOAD_FAILED, None


def scrape_product_info(
    product_url: str,
    page_timeout: Optional[float] = DEFAULT_PAGE_TIMEOUT,
    image_timeout: Optional[float] = DEFAULT_IMAGE_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
) -> ScrapeResult:
    """Scrape a product page into a :class:`ScrapeResult`.

    Never raises. Supported-domain gating is the caller's job (see
    :func:`is_valid_product_url`); unsupported hosts are scraped through the
    generic meta-tag path.
    """

    with operation_context("scrape_product_info") as correlation_id:
        outcome, parsed = _parse_page(product_url, page_timeout, user_agent)
        if parsed is None:
            log_event(
                logger,
                logging.WARNING,
                "product_scrape_failed",
                url=product_url,
                outcome=outcome.value,
                correlation_id=correlation_id,
            )
            return ScrapeResult.failed(product_url)

        image_outcome, image_data = _download_image(parsed.image_url, image_timeout)
        log_event(
            logger,
            logging.INFO,
            "product_scrape_completed",
            url=product_url,
            outcome=outcome.value,
            image=image_outcome.value,
            correlation_id=correlation_id,
        )
        return ScrapeResult(
            name=parsed.name[:MAX_NAME_LENGTH],
            brand=parsed.brand,
            price=parsed.price,
            color=parsed.color,
            category=parsed.category,
            item_url=product_url,
            image_data=image_data,
            material=parsed.material,
            scraped_successfully=True,
        )


__all__ = ["ImageOutcome", "ScrapeOutcome", "is_valid_product_url", "scrape_product_info"]
