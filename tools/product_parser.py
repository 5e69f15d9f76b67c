"""HTML parsing utilities for retailer product pages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from models.scrape_result import FALLBACK_NAME
from models.taxonomy import guess_category
from tools.site_profiles import SiteProfile

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup], Optional[str]]

MATERIAL_KEYWORDS = re.compile(
    r"(cotton|polyester|nylon|wool|rayon|linen|acrylic|spandex|elastane)", re.IGNORECASE
)
MAX_MATERIAL_CANDIDATE_LENGTH = 400
MAX_MATERIAL_LENGTH = 60
_COMPOSITION_PATTERN = re.compile(
    r"(\d{1,3}\s*[%％]\s*[A-Za-z]+(?:\s*,\s*\d{1,3}\s*[%％]\s*[A-Za-z]+)*)"
)
_PERCENT_SIGN = re.compile(r"[%％]")
_SENTENCE_END = re.compile(r"[。.]")
_WHITESPACE = re.compile(r"\s+")
_NON_PRICE_CHARS = re.compile(r"[^0-9.]")
# Leading number only; "19.9929.99" reads as 19.9929.
_LEADING_NUMBER = re.compile(r"\d*\.?\d+|\d+\.")


@dataclass(frozen=True)
class ParsedProduct:
    """Fields extracted from a product page before the image is fetched."""

    name: str
    brand: str
    price: float
    color: str
    category: str
    image_url: str
    material: str


def extract_price(price_text: Optional[str]) -> float:
    """Keep digits and dots, then read the leading number; ``0`` when there is none.

    >>> extract_price("$29.99")
    29.99
    """

    if not price_text:
        return 0
    match = _LEADING_NUMBER.match(_NON_PRICE_CHARS.sub("", price_text))
    return float(match.group(0)) if match else 0


def clean_material(text: Optional[str]) -> str:
    """Shorten material text to a composition line or its first sentence."""

    if not text:
        return ""
    normalized = _WHITESPACE.sub(" ", text).strip()

    match = _COMPOSITION_PATTERN.search(normalized)
    if match:
        return match.group(1).strip()

    result = _SENTENCE_END.split(normalized, maxsplit=1)[0].strip()
    if len(result) > MAX_MATERIAL_LENGTH:
        result = result[: MAX_MATERIAL_LENGTH - 3] + "..."
    return result


def find_material_text(soup: BeautifulSoup) -> str:
    """Return the first element text, in document order, that mentions a fabric."""

    for element in soup.find_all(True):
        text = element.get_text().strip()
        if 0 < len(text) < MAX_MATERIAL_CANDIDATE_LENGTH and MATERIAL_KEYWORDS.search(text):
            return text
    return ""


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def resolve_url(page_url: str, src: str) -> str:
    """Resolve a possibly relative image reference against the page origin."""

    if not src or src.startswith("http"):
        return src
    return urljoin(_origin(page_url), src)


def _get_meta_content(soup: BeautifulSoup, key: str, attr: str = "property") -> str:
    tag = soup.find("meta", attrs={attr: key})
    return tag["content"].strip() if tag and tag.get("content") else ""


def text_of(selector: str) -> Strategy:
    """Strategy yielding the trimmed text of the first element matching ``selector``."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        return element.get_text().strip() or None

    return strategy


def attribute_of(selector: str, attributes: Sequence[str] = ("src", "href")) -> Strategy:
    """Strategy yielding the first present attribute of the first match."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        for attribute in attributes:
            value = element.get(attribute)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None

    return strategy


def material_section_of(selector: str) -> Strategy:
    """Strategy yielding a material section's composition text.

    Within the section, the first descendant mentioning a percent sign wins;
    otherwise the whole section text is used.
    """

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        root = soup.select_one(selector)
        if root is None:
            return None
        for descendant in root.find_all(True):
            text = descendant.get_text().strip()
            if _PERCENT_SIGN.search(text):
                return text
        return root.get_text().strip() or None

    return strategy


def first_success(strategies: Iterable[Strategy], soup: BeautifulSoup) -> Optional[str]:
    """Run strategies in order and return the first non-empty value."""

    for strategy in strategies:
        value = strategy(soup)
        if value:
            return value
    return None


def _meta_name(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    title_text = title_tag.get_text().strip() if isinstance(title_tag, Tag) else ""
    return (
        _get_meta_content(soup, "og:title")
        or _get_meta_content(soup, "twitter:title", attr="name")
        or _get_meta_content(soup, "title", attr="name")
        or title_text
        or FALLBACK_NAME
    )


def _meta_image(soup: BeautifulSoup, url: str) -> str:
    image_url = _get_meta_content(soup, "og:image") or _get_meta_content(
        soup, "twitter:image", attr="name"
    )
    if not image_url:
        first_img = soup.find("img")
        image_url = (first_img.get("src") or "").strip() if isinstance(first_img, Tag) else ""
    return resolve_url(url, image_url)


def _meta_price(soup: BeautifulSoup) -> float:
    return extract_price(
        _get_meta_content(soup, "product:price:amount") or _get_meta_content(soup, "og:price:amount")
    )


def parse_product_html(html: str, url: str, profile: Optional[SiteProfile] = None) -> ParsedProduct:
    """Parse retailer HTML into product fields.

    Open Graph and Twitter meta tags provide the baseline; a site profile, when
    given, overrides each field its selectors can fill.
    """

    soup = BeautifulSoup(html, "html.parser")
    name = _meta_name(soup)
    price = _meta_price(soup)
    image_url = _meta_image(soup, url)
    color = ""
    brand = ""
    material_text: Optional[str] = None

    if profile is not None:
        name = first_success(map(text_of, profile.name), soup) or name

        price_text = first_success(map(text_of, profile.price), soup)
        if price_text:
            price = extract_price(price_text)

        color = first_success(map(text_of, profile.color), soup) or ""

        profile_image = first_success(map(attribute_of, profile.image), soup)
        if profile_image:
            image_url = resolve_url(url, profile_image)

        material_text = first_success(map(material_section_of, profile.material), soup)
        brand = profile.brand

    if not material_text:
        material_text = find_material_text(soup)

    parsed = ParsedProduct(
        name=name,
        brand=brand,
        price=price,
        color=color,
        category=guess_category(name),
        image_url=image_url,
        material=clean_material(material_text),
    )
    logger.info(
        "Parsed product HTML",
        extra={
            "url": url,
            "profiled": profile is not None,
            "fields": {
                "name": bool(parsed.name),
                "price": bool(parsed.price),
                "color": bool(parsed.color),
                "image_url": bool(parsed.image_url),
                "material": bool(parsed.material),
            },
        },
    )
    return parsed


__all__ = [
    "ParsedProduct",
    "attribute_of",
    "clean_material",
    "extract_price",
    "find_material_text",
    "first_success",
    "material_section_of",
    "parse_product_html",
    "resolve_url",
    "text_of",
]
