"""Wardrobe item data model and helpers."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models.identifiers import new_identifier, require_identifier
from models.taxonomy import normalize_color_name, normalize_size, validate_category

REQUIRED_FIELDS = ("category", "name", "color", "size")


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class WardrobeItem:
    """Represents an item in the user's wardrobe."""

    item_id: str
    user_id: str
    category: str
    name: str
    color: str
    size: str
    price: float = 0
    brand: Optional[str] = None
    material: Optional[str] = None
    description: Optional[str] = None
    image_data: Optional[str] = None
    item_url: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        self.item_id = require_identifier(self.item_id, "item id")
        self.user_id = require_identifier(self.user_id, "user id")
        for required in REQUIRED_FIELDS:
            value = getattr(self, required)
            if value is None or not str(value).strip():
                raise ValueError(f"Wardrobe item {required} is required")
        self.category = validate_category(self.category)
        self.name = str(self.name).strip()
        self.color = normalize_color_name(str(self.color))
        self.size = normalize_size(str(self.size))
        try:
            self.price = float(self.price or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Price must be a number, got {self.price!r}") from exc
        if math.isnan(self.price) or self.price < 0:
            raise ValueError(f"Price must be non-negative, got {self.price}")

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape used by the HTTP API."""

        return {
            "id": self.item_id,
            "userId": self.user_id,
            "category": self.category,
            "name": self.name,
            "color": self.color,
            "size": self.size,
            "price": self.price,
            "brand": self.brand,
            "material": self.material,
            "description": self.description,
            "image_data": self.image_data,
            "item_url": self.item_url,
            "createdAt": self.created_at,
        }


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose payload.

    A fresh ``item_id`` is minted when the payload does not carry one.
    """

    missing = [name for name in ("user_id", *REQUIRED_FIELDS) if not metadata.get(name)]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    return WardrobeItem(
        item_id=str(metadata.get("item_id") or new_identifier()),
        user_id=str(metadata["user_id"]),
        category=str(metadata["category"]),
        name=str(metadata["name"]),
        color=str(metadata["color"]),
        size=str(metadata["size"]),
        price=metadata.get("price") or 0,
        brand=_optional_str(metadata.get("brand")),
        material=_optional_str(metadata.get("material")),
        description=_optional_str(metadata.get("description")),
        image_data=_optional_str(metadata.get("image_data")),
        item_url=_optional_str(metadata.get("item_url")),
    )


__all__ = ["REQUIRED_FIELDS", "WardrobeItem", "from_raw_metadata"]
