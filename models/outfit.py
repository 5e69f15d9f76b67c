"""Outfit slot assignments: three outfits, one equipped item per category."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from models.identifiers import is_valid_identifier
from models.taxonomy import CATEGORIES

OUTFIT_NUMBERS = (1, 2, 3)


def _empty_slots() -> Dict[int, Dict[str, str]]:
    return {number: {} for number in OUTFIT_NUMBERS}


def validate_assignment(outfit_number: object, category: str, item_id: str | None = None) -> List[str]:
    """Return every problem with an equip request; empty when valid."""

    errors: List[str] = []
    if str(outfit_number) not in {str(n) for n in OUTFIT_NUMBERS}:
        errors.append("Outfit number must be 1, 2, or 3")
    if category not in CATEGORIES:
        errors.append("Invalid category")
    if item_id is not None and not is_valid_identifier(item_id):
        errors.append("Invalid item ID")
    return errors


@dataclass
class OutfitSlots:
    """Mapping of outfit number to ``{category: item_id}``."""

    slots: Dict[int, Dict[str, str]] = field(default_factory=_empty_slots)

    def __post_init__(self) -> None:
        merged = _empty_slots()
        for number, assignments in (self.slots or {}).items():
            key = int(number)
            if key in merged:
                merged[key] = {
                    str(category): str(item_id)
                    for category, item_id in (assignments or {}).items()
                    if category in CATEGORIES
                }
        self.slots = merged

    def equip(self, outfit_number: int, category: str, item_id: str) -> Dict[str, str]:
        """Equip ``item_id`` for ``category``; equipping it again removes it."""

        slot = self.slots[int(outfit_number)]
        if slot.get(category) == item_id:
            del slot[category]
        else:
            slot[category] = item_id
        return dict(slot)

    def unequip(self, outfit_number: int, category: str) -> Dict[str, str]:
        slot = self.slots[int(outfit_number)]
        slot.pop(category, None)
        return dict(slot)

    def outfit(self, outfit_number: int) -> Dict[str, str]:
        return dict(self.slots[int(outfit_number)])

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {str(number): dict(assignments) for number, assignments in self.slots.items()}

    @classmethod
    def from_dict(cls, payload: Dict[str, Dict[str, str]]) -> "OutfitSlots":
        return cls(slots={int(number): assignments for number, assignments in payload.items()})


__all__ = ["OUTFIT_NUMBERS", "OutfitSlots", "validate_assignment"]
