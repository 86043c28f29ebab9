"""
Study Service — Application layer orchestrator.

Owns the loaded decks and the StudyContext for the process, runs one
StudySession at a time and writes every change through to the stores.
"""

import logging
import random
from datetime import datetime
from pathlib import Path

from memit.application.id_service import new_card, new_deck
from memit.application.session import (
    SessionState,
    StartOutcome,
    StudyContext,
    StudySession,
)
from memit.application.stats.aggregator import rollover_if_new_day
from memit.domain.errors import DeckNotFoundError, InvalidSessionStateError
from memit.domain.models import Card, Deck
from memit.domain.ports import Clock, DeckStore, GlobalStatsStore, StudyLimits
from memit.domain.srs.models import Rating
from memit.domain.stats.models import GlobalStats


class StudyService:
    """
    Application service for studying decks.

    Follows Dependency Inversion: depends on the store and clock
    abstractions, not concrete adapter implementations.
    """

    def __init__(
        self,
        deck_store: DeckStore,
        stats_store: GlobalStatsStore,
        clock: Clock,
        limits: StudyLimits | None = None,
        rng: random.Random | None = None,
    ):
        """
        Args:
            deck_store: Where decks are loaded from and written back to.
            stats_store: Where the global statistics document lives.
            clock: Source of "now" for every scheduling decision.
            limits: Daily quotas; defaults apply if not provided.
            rng: Random source for queue sampling and shuffling.
        """
        self._deck_store = deck_store
        self._stats_store = stats_store
        self._clock = clock
        self._limits = limits or StudyLimits()
        self._rng = rng
        self._context: StudyContext | None = None
        self.decks: list[Deck] = []
        self.session: StudySession | None = None
        self.logger = logging.getLogger(__name__)

    @property
    def context(self) -> StudyContext:
        if self._context is None:
            raise RuntimeError("StudyService.load() must be awaited first")
        return self._context

    def now(self) -> datetime:
        return self._clock.now()

    @property
    def global_stats(self) -> GlobalStats:
        return self.context.global_stats

    async def load(self) -> None:
        """Load decks and global statistics, then run the day-rollover check."""
        today = self._clock.now().date()
        self.decks = await self._deck_store.load_decks()
        stats = await self._stats_store.load_global_stats(today)
        self._context = StudyContext(global_stats=stats, limits=self._limits)
        self.logger.info(
            f"Loaded {len(self.decks)} decks, {stats.total_cards_studied} lifetime cards studied"
        )
        await self.check_day_rollover()

    async def check_day_rollover(self) -> bool:
        """
        Zero today's counters if the calendar day changed. Call on every resume.

        Returns whether a rollover happened.
        """
        stats, rolled = rollover_if_new_day(self.global_stats, self._clock.now().date())
        if rolled:
            self.context.global_stats = stats
            await self._stats_store.save_global_stats(stats)
        return rolled

    # --- Decks ---

    def get_deck(self, deck_id: str) -> Deck:
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        raise DeckNotFoundError(deck_id)

    async def add_deck(self, deck: Deck) -> Deck:
        self.decks.append(deck)
        await self._deck_store.save_decks(self.decks)
        return deck

    async def create_deck(self, name: str, description: str = "") -> Deck:
        return await self.add_deck(new_deck(name, self._clock.now(), description=description))

    async def add_card(self, deck_id: str, front: str, back: str) -> Card:
        """Validate and append a new card, then persist."""
        now = self._clock.now()
        deck = self.get_deck(deck_id)
        card = new_card(front, back, now)
        deck.add_card(card, now)
        await self._deck_store.save_decks(self.decks)
        return card

    async def import_deck(self, path: Path, name: str) -> Deck:
        from memit.infrastructure.adapters.csv_io import create_deck_from_file

        deck = create_deck_from_file(path, name, self._clock.now())
        return await self.add_deck(deck)

    # --- Session ---

    def _require_session(self, operation: str) -> StudySession:
        if self.session is None:
            raise InvalidSessionStateError(operation, SessionState.IDLE.value)
        return self.session

    async def start_session(self, deck_id: str) -> StartOutcome:
        """
        Start studying a deck. Any open session is ended (and folded) first.
        """
        deck = self.get_deck(deck_id)
        if self.session is not None:
            await self.end_session()

        session = StudySession(self.context, rng=self._rng)
        outcome = session.start(deck, self._clock.now())
        if outcome is StartOutcome.STARTED:
            self.session = session
        return outcome

    def flip(self) -> bool:
        return self._require_session("flip").flip()

    async def rate(self, rating: Rating) -> Card:
        """
        Grade the current card and write the deck collection through.

        Global statistics are saved as soon as the session completes, even
        when the deck save fails.
        """
        session = self._require_session("rate")
        graded = session.rate(rating, self._clock.now())
        try:
            await self._deck_store.save_decks(self.decks)
        finally:
            if session.state is SessionState.COMPLETED:
                self.session = None
                await self._stats_store.save_global_stats(self.global_stats)
        return graded

    async def end_session(self) -> bool:
        """
        Abandon the open session, folding partial statistics once.

        Returns whether statistics were folded (and saved).
        """
        if self.session is None:
            return False
        folded = self.session.reset(self._clock.now())
        self.session = None
        if folded:
            await self._stats_store.save_global_stats(self.global_stats)
        return folded
