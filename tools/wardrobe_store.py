"""Wardrobe item persistence: the store interface and its SQLite backend."""
from __future__ import annotations

import contextlib
import sqlite3
from dataclasses import asdict, fields
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from models.wardrobe_item import WardrobeItem

IMMUTABLE_FIELDS = frozenset({"item_id", "user_id", "created_at"})
_COLUMNS = tuple(spec.name for spec in fields(WardrobeItem))

_SCHEMA = """
CREATE TABLE IF NOT EXISTS wardrobe_items (
    item_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    category TEXT NOT NULL,
    name TEXT NOT NULL,
    color TEXT NOT NULL,
    size TEXT NOT NULL,
    price REAL NOT NULL DEFAULT 0,
    brand TEXT,
    material TEXT,
    description TEXT,
    image_data TEXT,
    item_url TEXT,
    created_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_wardrobe_user_category ON wardrobe_items (user_id, category);
CREATE INDEX IF NOT EXISTS idx_wardrobe_user_created ON wardrobe_items (user_id, created_at DESC);
"""


class WardrobeStore:
    """Persistence interface for wardrobe items."""

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        raise NotImplementedError

    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def list_items_for_user(self, user_id: str, category: Optional[str] = None) -> List[WardrobeItem]:
        """Items owned by ``user_id``, newest first."""

        raise NotImplementedError

    def update_item(self, item_id: str, updated_fields: Dict[str, object]) -> Optional[WardrobeItem]:
        """Apply a partial update; ``None`` when the item does not exist."""

        raise NotImplementedError

    def delete_item(self, item_id: str) -> bool:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """SQLite-backed store; one short-lived connection per operation."""

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as conn:
            conn.executescript(_SCHEMA)

    @contextlib.contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    @staticmethod
    def _to_item(row: sqlite3.Row) -> WardrobeItem:
        return WardrobeItem(**{column: row[column] for column in _COLUMNS})

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        """Insert ``item``, replacing any stored row with the same id."""

        record = asdict(item)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._connection() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO wardrobe_items ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(record[column] for column in _COLUMNS),
            )
        return item

    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM wardrobe_items WHERE item_id = ?", (item_id,)).fetchone()
        return self._to_item(row) if row else None

    def list_items_for_user(self, user_id: str, category: Optional[str] = None) -> List[WardrobeItem]:
        clauses = ["user_id = ?"]
        params: List[object] = [user_id]
        if category:
            clauses.append("category = ?")
            params.append(category)
        # rowid breaks ties between items created within the same clock tick
        query = (
            f"SELECT * FROM wardrobe_items WHERE {' AND '.join(clauses)} "
            "ORDER BY created_at DESC, rowid DESC"
        )
        with self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._to_item(row) for row in rows]

    def update_item(self, item_id: str, updated_fields: Dict[str, object]) -> Optional[WardrobeItem]:
        """Merge known, mutable fields into the stored item and re-validate it.

        Unknown keys and the identity fields are ignored silently.
        """

        current = self.get_item(item_id)
        if current is None:
            return None
        merged = asdict(current)
        merged.update(
            {
                key: value
                for key, value in updated_fields.items()
                if key in merged and key not in IMMUTABLE_FIELDS
            }
        )
        return self.create_item(WardrobeItem(**merged))

    def delete_item(self, item_id: str) -> bool:
        with self._connection() as conn:
            deleted = conn.execute("DELETE FROM wardrobe_items WHERE item_id = ?", (item_id,)).rowcount
        return deleted > 0


__all__ = ["IMMUTABLE_FIELDS", "SQLiteWardrobeStore", "WardrobeStore"]
