"""Per-retailer CSS selector profiles for product pages."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from urllib.parse import urlparse


@dataclass(frozen=True)
class SiteProfile:
    """Selectors for one retailer.

    Every selector tuple is tried in order and the first one yielding a
    non-empty value wins for that field only.
    """

    name: Tuple[str, ...] = ()
    price: Tuple[str, ...] = ()
    color: Tuple[str, ...] = ()
    image: Tuple[str, ...] = ()
    material: Tuple[str, ...] = ()
    brand: str = ""


SITE_PROFILES: Mapping[str, SiteProfile] = MappingProxyType(
    {
        "uniqlo.com": SiteProfile(
            name=("h1.heading-primary", ".product-name"),
            price=(
                ".price-value",
                ".product-price__price",
                ".product-detail__price",
                ".product__price",
                ".product-sales-price",
                '[data-test="product-price"]',
                '[class*="Price-module"]',
                '[class*="product-price"]',
                ".fr-ec-price-text",
            ),
            color=(".color-name", "[data-test='product-color']"),
            image=(".product-image img", ".product-detail-main-image-container img"),
            # Usually holds a composition line such as "93% Cotton, 7% Spandex".
            material=(".item-material", ".product-detail-description", "[data-test='composition']"),
            brand="UNIQLO",
        ),
        "zara.com": SiteProfile(
            name=("h1.product-detail-info__header-name",),
            price=(".price__amount-current",),
            color=(".product-detail-selected-color",),
            image=(".media-image__image",),
            material=(".product-detail-info__composition", ".product-detail-description"),
            brand="ZARA",
        ),
        "hm.com": SiteProfile(
            name=("h1.product-item-headline",),
            price=(".price-value", '[data-testid="price"]', '[class*="Price"]', '[class*="price"]'),
            color=(".product-color", '[class*="ProductDescription-module--colorName--"]'),
            image=(".product-image img", ".product-detail-main-image-container img"),
            material=(
                ".pdp-description-list-item",
                ".pdp-description-text",
                '[class*="ProductMaterial-module--details--"]',
            ),
            brand="H&M",
        ),
        "amazon.com": SiteProfile(
            name=("#productTitle",),
            price=(
                "#corePrice_feature_div span.a-offscreen",
                "#priceblock_ourprice",
                "#priceblock_dealprice",
            ),
            color=("#variation_color_name .selection",),
            image=("#imgTagWrapperId img", "#landingImage"),
        ),
    }
)


def normalized_hostname(url: str) -> str:
    """Lower-cased hostname with a leading ``www.`` removed; empty if unparseable."""

    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return ""
    hostname = hostname.lower()
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname


def get_site_profile(url: str) -> Optional[SiteProfile]:
    """Return the profile whose domain suffix matches the URL's host, if any."""

    hostname = normalized_hostname(url)
    if not hostname:
        return None
    for domain, profile in SITE_PROFILES.items():
        if hostname.endswith(domain):
            return profile
    return None


__all__ = ["SITE_PROFILES", "SiteProfile", "get_site_profile", "normalized_hostname"]
