"""Canonical taxonomy definitions for wardrobe items.

This module centralises the category labels shared by the scraper, the
wardrobe store and the outfit slots, along with the keyword groups used to
guess a category from a product name.
"""

import re
from typing import List, Pattern, Tuple

CATEGORIES: List[str] = ["tops", "bottoms", "shoes", "outerwear", "accessories"]
DEFAULT_CATEGORY = "tops"

# Order matters: the first group whose pattern matches wins.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("tops", re.compile(r"shirt|blouse|tee|t-shirt|top|sweater")),
    ("bottoms", re.compile(r"pants|jeans|shorts|skirt|trousers")),
    ("shoes", re.compile(r"shoe|sneaker|boot|loafer")),
    ("outerwear", re.compile(r"jacket|coat|parka|blazer")),
    ("accessories", re.compile(r"hat|scarf|bag|belt")),
)


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    key = str(value).strip().lower()
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {CATEGORIES}")
    return key


def guess_category(name: str) -> str:
    """Guess a category from a product name using ordered keyword groups.

    This is a heuristic: "Denim Jacket over Shirt" resolves to ``tops`` because
    the tops group is tested before outerwear.
    """

    lowered = name.lower()
    for category, pattern in CATEGORY_KEYWORDS:
        if pattern.search(lowered):
            return category
    return DEFAULT_CATEGORY


def normalize_color_name(raw_string: str) -> str:
    """Colors are stored trimmed and lower-cased."""

    return raw_string.strip().lower()


def normalize_size(raw_string: str) -> str:
    return raw_string.strip().upper()


__all__ = [
    "CATEGORIES",
    "CATEGORY_KEYWORDS",
    "DEFAULT_CATEGORY",
    "guess_category",
    "normalize_color_name",
    "normalize_size",
    "validate_category",
]
