"""
Ports (interfaces) for persistence and time.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime

from memit.domain.constants import DEFAULT_DAILY_NEW_CARDS, DEFAULT_DAILY_TOTAL_LIMIT
from memit.domain.models import Deck
from memit.domain.stats.models import GlobalStats


@dataclass(frozen=True)
class StudyLimits:
    """Daily quotas read from the settings provider."""

    daily_new_limit: int = DEFAULT_DAILY_NEW_CARDS
    daily_total_limit: int = DEFAULT_DAILY_TOTAL_LIMIT


class Clock(ABC):
    """Source of the current time. Must return timezone-aware datetimes."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class DeckStore(ABC):
    """
    Port for loading and saving the deck collection.

    Implementations:
        - JsonDeckStore: One JSON document holding every deck.
        - MemoryDeckStore: Keeps decks in process memory.
    """

    @abstractmethod
    async def load_decks(self) -> list[Deck]:
        """
        Load every deck.

        Returns:
            The stored decks, or an empty list if nothing has been saved yet.
        """
        pass

    @abstractmethod
    async def save_decks(self, decks: list[Deck]) -> None:
        """Replace the stored collection with the given decks."""
        pass


class GlobalStatsStore(ABC):
    """
    Port for the single process-wide GlobalStats document.

    Implementations:
        - JsonGlobalStatsStore: JSON document keyed by a fixed identifier.
        - MemoryGlobalStatsStore: Keeps the document in process memory.
    """

    @abstractmethod
    async def load_global_stats(self, today: date) -> GlobalStats:
        """
        Load the stored statistics.

        Args:
            today: Day used for a fresh document when nothing is stored.
        """
        pass

    @abstractmethod
    async def save_global_stats(self, stats: GlobalStats) -> None:
        pass
