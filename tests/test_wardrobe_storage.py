"""Wardrobe item model and SQLite storage tests."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from models import taxonomy
from models.identifiers import InvalidIdentifierError, is_valid_identifier, new_identifier
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from tools.wardrobe_store import SQLiteWardrobeStore

USER_ID = "64b7f0c2a1b2c3d4e5f60718"
OTHER_USER_ID = "64b7f0c2a1b2c3d4e5f60719"


@pytest.fixture()
def sample_metadata() -> Dict[str, object]:
    return {
        "item_id": "aaaaaaaaaaaaaaaaaaaaaaaa",
        "user_id": USER_ID,
        "category": "Tops",
        "name": "  Oxford Shirt ",
        "color": " Light Blue ",
        "size": "m",
        "price": 39.9,
        "brand": "Example",
        "material": "100% Cotton",
    }


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore(tmp_path / "wardrobe.db")


def test_identifiers_are_24_hex_characters() -> None:
    minted = new_identifier()
    assert len(minted) == 24
    assert is_valid_identifier(minted)
    assert not is_valid_identifier("not-an-id")
    assert not is_valid_identifier(None)


def test_validate_category() -> None:
    assert taxonomy.validate_category("Outerwear") == "outerwear"
    with pytest.raises(ValueError):
        taxonomy.validate_category("dresses")


def test_wardrobe_item_normalises_on_write(sample_metadata: Dict[str, object]) -> None:
    item = WardrobeItem(**sample_metadata)
    assert item.category == "tops"
    assert item.name == "Oxford Shirt"
    assert item.color == "light blue"
    assert item.size == "M"
    assert item.price == 39.9


def test_wardrobe_item_rejects_bad_values(sample_metadata: Dict[str, object]) -> None:
    with pytest.raises(ValueError):
        WardrobeItem(**{**sample_metadata, "price": -1})
    with pytest.raises(InvalidIdentifierError):
        WardrobeItem(**{**sample_metadata, "user_id": "user-1"})
    with pytest.raises(ValueError):
        WardrobeItem(**{**sample_metadata, "category": "hats"})


def test_from_raw_metadata_requires_fields(sample_metadata: Dict[str, object]) -> None:
    raw = dict(sample_metadata)
    raw.pop("size")
    with pytest.raises(ValueError, match="size"):
        from_raw_metadata(raw)


def test_from_raw_metadata_mints_identifier(sample_metadata: Dict[str, object]) -> None:
    raw = dict(sample_metadata)
    raw.pop("item_id")
    item = from_raw_metadata(raw)
    assert is_valid_identifier(item.item_id)
    assert item.description is None


def test_store_round_trip(store: SQLiteWardrobeStore, sample_metadata: Dict[str, object]) -> None:
    item = from_raw_metadata(sample_metadata)
    store.create_item(item)

    assert store.get_item(item.item_id) == item
    assert store.list_items_for_user(USER_ID) == [item]


def test_store_lists_newest_first_and_filters(store: SQLiteWardrobeStore, sample_metadata: Dict[str, object]) -> None:
    older = WardrobeItem(**{**sample_metadata, "created_at": 100.0})
    newer = WardrobeItem(
        **{
            **sample_metadata,
            "item_id": "bbbbbbbbbbbbbbbbbbbbbbbb",
            "category": "bottoms",
            "name": "Chinos",
            "created_at": 200.0,
        }
    )
    elsewhere = WardrobeItem(**{**sample_metadata, "item_id": "cccccccccccccccccccccccc", "user_id": OTHER_USER_ID})
    for item in (older, newer, elsewhere):
        store.create_item(item)

    assert store.list_items_for_user(USER_ID) == [newer, older]
    assert store.list_items_for_user(USER_ID, category="bottoms") == [newer]
    assert store.list_items_for_user(OTHER_USER_ID) == [elsewhere]


def test_update_and_delete_item(store: SQLiteWardrobeStore, sample_metadata: Dict[str, object]) -> None:
    item = from_raw_metadata(sample_metadata)
    store.create_item(item)

    updated = store.update_item(
        item.item_id,
        {"color": "NAVY", "size": "xl", "user_id": OTHER_USER_ID, "unknown": "ignored"},
    )
    assert updated is not None
    assert updated.color == "navy"
    assert updated.size == "XL"
    assert updated.user_id == USER_ID
    assert updated.created_at == item.created_at
    assert store.get_item(item.item_id) == updated

    assert store.delete_item(item.item_id) is True
    assert store.get_item(item.item_id) is None
    assert store.delete_item(item.item_id) is False


def test_update_missing_item_returns_none(store: SQLiteWardrobeStore) -> None:
    assert store.update_item("dddddddddddddddddddddddd", {"color": "red"}) is None


@pytest.mark.parametrize(
    "overrides",
    [{"name": None}, {"size": ""}, {"color": None}, {"price": [1]}, {"price": float("nan")}],
)
def test_wardrobe_item_rejects_missing_or_malformed_fields(
    sample_metadata: Dict[str, object], overrides: Dict[str, object]
) -> None:
    with pytest.raises(ValueError):
        WardrobeItem(**{**sample_metadata, **overrides})
