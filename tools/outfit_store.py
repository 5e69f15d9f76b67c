"""Outfit slot persistence."""
from __future__ import annotations

import contextlib
import json
import logging
import threading
from pathlib import Path
from typing import Dict, Iterator

from models.identifiers import require_identifier
from models.outfit import OutfitSlots

logger = logging.getLogger(__name__)


class OutfitStore:
    """Interface for per-user outfit slot persistence.

    Callers hold :meth:`locked` across a load-modify-save sequence; locks are
    per user and per process.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextlib.contextmanager
    def locked(self, user_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(user_id, threading.Lock())
        with lock:
            yield

    def load(self, user_id: str) -> OutfitSlots:
        raise NotImplementedError

    def save(self, user_id: str, slots: OutfitSlots) -> None:
        raise NotImplementedError


class JSONOutfitStore(OutfitStore):
    """JSON-file-backed OutfitStore, one document per user."""

    def __init__(self, base_dir: str | Path = "data/outfits") -> None:
        super().__init__()
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str) -> Path:
        return self.base_dir / f"{require_identifier(user_id, 'user id')}.json"

    def load(self, user_id: str) -> OutfitSlots:
        """Return stored slots; a missing or undecodable document yields empty slots."""

        path = self._path(user_id)
        if not path.exists():
            return OutfitSlots()
        try:
            return OutfitSlots.from_dict(json.loads(path.read_text()))
        except (ValueError, TypeError, AttributeError):
            logger.warning("Discarding undecodable outfit document", extra={"path": str(path)})
            slots = OutfitSlots()
            self.save(user_id, slots)
            return slots

    def save(self, user_id: str, slots: OutfitSlots) -> None:
        path = self._path(user_id)
        staging = path.with_name(f"{path.name}.{threading.get_ident()}.tmp")
        staging.write_text(json.dumps(slots.to_dict(), indent=2))
        # Readers never see a half-written document.
        staging.replace(path)


__all__ = ["JSONOutfitStore", "OutfitStore"]
