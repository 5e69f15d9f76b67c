"""Equip and unequip wardrobe items across the three outfit slots."""

from __future__ import annotations

from typing import Dict, List, Optional

from models.identifiers import is_valid_identifier
from models.outfit import OutfitSlots, validate_assignment
from smartfit_app.config import AppConfig
from tools.observability import instrument_service
from tools.outfit_store import JSONOutfitStore, OutfitStore


class OutfitValidationError(ValueError):
    """Raised with every problem found in an outfit request."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__("Validation failed: " + "; ".join(errors))
        self.errors = errors


def _check(user_id: str, outfit_number: object, category: str, item_id: Optional[str] = None) -> None:
    errors: List[str] = []
    if not is_valid_identifier(user_id):
        errors.append("Invalid user ID")
    errors.extend(validate_assignment(outfit_number, category, item_id))
    if errors:
        raise OutfitValidationError(errors)


class OutfitService:
    """Coordinates loading, mutating and persisting a user's outfit slots."""

    def __init__(self, store: Optional[OutfitStore] = None) -> None:
        self.store = store or JSONOutfitStore()

    @classmethod
    def from_config(cls, config: AppConfig) -> "OutfitService":
        return cls(store=JSONOutfitStore(config.outfit_store_dir))

    @instrument_service("get_outfits")
    def get_outfits(self, user_id: str) -> Dict[str, Dict[str, str]]:
        if not is_valid_identifier(user_id):
            raise OutfitValidationError(["Invalid user ID"])
        with self.store.locked(user_id):
            return self.store.load(user_id).to_dict()

    @instrument_service("equip_outfit_item")
    def equip(self, user_id: str, outfit_number: int, category: str, item_id: str) -> Dict[str, str]:
        """Equip an item; equipping the item already in that category removes it."""

        _check(user_id, outfit_number, category, item_id)
        with self.store.locked(user_id):
            slots = self.store.load(user_id)
            outfit = slots.equip(int(outfit_number), category, item_id)
            self.store.save(user_id, slots)
        return outfit

    @instrument_service("unequip_outfit_item")
    def unequip(self, user_id: str, outfit_number: int, category: str) -> Dict[str, str]:
        _check(user_id, outfit_number, category)
        with self.store.locked(user_id):
            slots = self.store.load(user_id)
            outfit = slots.unequip(int(outfit_number), category)
            self.store.save(user_id, slots)
        return outfit

    @instrument_service("clear_outfits")
    def clear(self, user_id: str) -> Dict[str, Dict[str, str]]:
        if not is_valid_identifier(user_id):
            raise OutfitValidationError(["Invalid user ID"])
        slots = OutfitSlots()
        with self.store.locked(user_id):
            self.store.save(user_id, slots)
        return slots.to_dict()


__all__ = ["OutfitService", "OutfitValidationError"]
