"""Outfit slot toggling and persistence."""

import threading
import time
from pathlib import Path

import pytest

from models.outfit import OutfitSlots, validate_assignment
from services.outfit_service import OutfitService, OutfitValidationError
from tools.outfit_store import JSONOutfitStore

USER_ID = "64b7f0c2a1b2c3d4e5f60718"
SHIRT_ID = "aaaaaaaaaaaaaaaaaaaaaaaa"
TEE_ID = "bbbbbbbbbbbbbbbbbbbbbbbb"


def test_new_slots_are_empty() -> None:
    assert OutfitSlots().to_dict() == {"1": {}, "2": {}, "3": {}}


def test_equip_replaces_and_toggles() -> None:
    slots = OutfitSlots()
    assert slots.equip(1, "tops", SHIRT_ID) == {"tops": SHIRT_ID}
    assert slots.equip(1, "tops", TEE_ID) == {"tops": TEE_ID}
    assert slots.equip(1, "tops", TEE_ID) == {}
    assert slots.outfit(2) == {}


def test_from_dict_drops_unknown_slots_and_categories() -> None:
    slots = OutfitSlots.from_dict({"1": {"tops": SHIRT_ID, "capes": TEE_ID}, "7": {"tops": TEE_ID}})
    assert slots.to_dict() == {"1": {"tops": SHIRT_ID}, "2": {}, "3": {}}


def test_validate_assignment_collects_every_error() -> None:
    assert validate_assignment("2", "shoes", SHIRT_ID) == []
    assert validate_assignment("4", "capes", "nope") == [
        "Outfit number must be 1, 2, or 3",
        "Invalid category",
        "Invalid item ID",
    ]


def test_store_round_trip(tmp_path: Path) -> None:
    store = JSONOutfitStore(tmp_path)
    slots = OutfitSlots()
    slots.equip(3, "shoes", SHIRT_ID)
    store.save(USER_ID, slots)

    assert store.load(USER_ID).outfit(3) == {"shoes": SHIRT_ID}


def test_store_replaces_undecodable_document(tmp_path: Path) -> None:
    store = JSONOutfitStore(tmp_path)
    (tmp_path / f"{USER_ID}.json").write_text("{not json")

    assert store.load(USER_ID).to_dict() == {"1": {}, "2": {}, "3": {}}
    assert (tmp_path / f"{USER_ID}.json").read_text().startswith("{")
    assert store.load(USER_ID).to_dict() == {"1": {}, "2": {}, "3": {}}


def test_service_persists_every_change(tmp_path: Path) -> None:
    service = OutfitService(JSONOutfitStore(tmp_path))

    assert service.equip(USER_ID, 1, "tops", SHIRT_ID) == {"tops": SHIRT_ID}
    assert service.equip(USER_ID, "1", "bottoms", TEE_ID) == {"tops": SHIRT_ID, "bottoms": TEE_ID}

    reloaded = OutfitService(JSONOutfitStore(tmp_path))
    assert reloaded.get_outfits(USER_ID)["1"] == {"tops": SHIRT_ID, "bottoms": TEE_ID}

    assert reloaded.unequip(USER_ID, 1, "tops") == {"bottoms": TEE_ID}
    assert reloaded.clear(USER_ID) == {"1": {}, "2": {}, "3": {}}


def test_service_rejects_invalid_requests(tmp_path: Path) -> None:
    service = OutfitService(JSONOutfitStore(tmp_path))

    with pytest.raises(OutfitValidationError) as excinfo:
        service.equip("bad-user", 5, "tops", SHIRT_ID)
    assert excinfo.value.errors == ["Invalid user ID", "Outfit number must be 1, 2, or 3"]


class SlowLoadingStore(JSONOutfitStore):
    """Widens the window between reading and writing a user's document."""

    def load(self, user_id: str) -> OutfitSlots:
        slots = super().load(user_id)
        time.sleep(0.05)
        return slots


def test_concurrent_equips_for_one_user_are_not_lost(tmp_path: Path) -> None:
    service = OutfitService(SlowLoadingStore(tmp_path))
    start = threading.Barrier(2)

    def equip(category: str, item_id: str) -> None:
        start.wait()
        service.equip(USER_ID, 1, category, item_id)

    workers = [
        threading.Thread(target=equip, args=("tops", SHIRT_ID)),
        threading.Thread(target=equip, args=("bottoms", TEE_ID)),
    ]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert service.get_outfits(USER_ID)["1"] == {"tops": SHIRT_ID, "bottoms": TEE_ID}
    assert [path.name for path in tmp_path.iterdir()] == [f"{USER_ID}.json"]
