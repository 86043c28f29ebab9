"""
JSON stores — Infrastructure adapters for local persistence.

Decks live in one JSON array; global statistics live in one JSON object
under a fixed well-known key. Both are (de)serialized with pydantic
TypeAdapters over the domain dataclasses, so timestamps keep full
precision and timezone.
"""

import copy
import json
import logging
from datetime import date
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from memit.domain.constants import DECKS_FILENAME, GLOBAL_STATS_KEY, STATS_FILENAME
from memit.domain.errors import StoreError
from memit.domain.models import Deck
from memit.domain.ports import DeckStore, GlobalStatsStore
from memit.domain.stats.models import GlobalStats

logger = logging.getLogger(__name__)

_decks_adapter = TypeAdapter(list[Deck])
_stats_adapter = TypeAdapter(GlobalStats)


def _write_atomic(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_bytes(payload)
    tmp.replace(path)


class JsonDeckStore(DeckStore):
    """Stores every deck in a single JSON document."""

    def __init__(self, data_dir: Path, filename: str = DECKS_FILENAME):
        self.path = data_dir / filename

    async def load_decks(self) -> list[Deck]:
        if not self.path.exists():
            logger.debug(f"No deck file at {self.path}, starting empty")
            return []
        try:
            decks = _decks_adapter.validate_json(self.path.read_bytes())
        except ValidationError as e:
            raise StoreError(f"Corrupt deck file {self.path}: {e}") from e
        logger.debug(f"Loaded {len(decks)} decks from {self.path}")
        return decks

    async def save_decks(self, decks: list[Deck]) -> None:
        _write_atomic(self.path, _decks_adapter.dump_json(decks, indent=2))
        logger.debug(f"Saved {len(decks)} decks to {self.path}")


class JsonGlobalStatsStore(GlobalStatsStore):
    """
    Stores GlobalStats under the GLOBAL_STATS_KEY entry of a JSON object.

    Other keys in the same document are preserved on save.
    """

    def __init__(self, data_dir: Path, filename: str = STATS_FILENAME):
        self.path = data_dir / filename

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt stats file {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StoreError(f"Stats file {self.path} is not a JSON object")
        return document

    async def load_global_stats(self, today: date) -> GlobalStats:
        raw = self._read_document().get(GLOBAL_STATS_KEY)
        if raw is None:
            logger.debug("No stored global stats, using defaults")
            return GlobalStats(today_date=today)
        try:
            return _stats_adapter.validate_python(raw)
        except ValidationError as e:
            raise StoreError(f"Corrupt global stats in {self.path}: {e}") from e

    async def save_global_stats(self, stats: GlobalStats) -> None:
        document = self._read_document()
        document[GLOBAL_STATS_KEY] = _stats_adapter.dump_python(stats, mode="json")
        _write_atomic(self.path, json.dumps(document, indent=2).encode("utf-8"))
        logger.debug(f"Global stats saved: {stats.total_cards_studied} total cards")


class MemoryDeckStore(DeckStore):
    """Keeps decks in process memory. Returns copies so callers never share state."""

    def __init__(self, decks: list[Deck] | None = None):
        self._decks = copy.deepcopy(decks or [])
        self.save_count = 0

    async def load_decks(self) -> list[Deck]:
        return copy.deepcopy(self._decks)

    async def save_decks(self, decks: list[Deck]) -> None:
        self._decks = copy.deepcopy(decks)
        self.save_count += 1


class MemoryGlobalStatsStore(GlobalStatsStore):
    def __init__(self, stats: GlobalStats | None = None):
        self._stats = stats
        self.save_count = 0

    async def load_global_stats(self, today: date) -> GlobalStats:
        if self._stats is None:
            return GlobalStats(today_date=today)
        return copy.deepcopy(self._stats)

    async def save_global_stats(self, stats: GlobalStats) -> None:
        self._stats = copy.deepcopy(stats)
        self.save_count += 1
