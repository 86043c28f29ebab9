"""
StudySession: drives one study session independent of any UI.

State machine:
    IDLE --start()--> ACTIVE --last rate()--> COMPLETED
    any --reset()--> IDLE

Session statistics are folded into the shared GlobalStats exactly once,
either on completion or when a partially graded session is reset.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from memit.application.queue_builder import build_session_queue
from memit.application.srs.scheduler import grade_card
from memit.application.stats.aggregator import fold_session
from memit.domain.errors import InvalidSessionStateError
from memit.domain.models import Card, Deck
from memit.domain.ports import StudyLimits
from memit.domain.srs.models import Rating
from memit.domain.stats.models import GlobalStats, SessionStats

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


class StartOutcome(str, Enum):
    STARTED = "started"
    NO_CARDS = "no_cards"


@dataclass
class StudyContext:
    """
    Process-wide study state passed explicitly to each session.

    global_stats is replaced (not mutated) on every fold; holders of the
    context always see the latest value.
    """

    global_stats: GlobalStats
    limits: StudyLimits = field(default_factory=StudyLimits)


class StudySession:
    def __init__(self, context: StudyContext, rng: random.Random | None = None):
        self.context = context
        self._rng = rng or random.Random()
        self._state = SessionState.IDLE
        self._deck: Deck | None = None
        self._queue: deque[Card] = deque()
        self._current: Card | None = None
        self._revealed = False
        self._total = 0
        self._graded_ids: set[str] = set()
        self._stats = SessionStats()
        self._stats_folded = False

    # --- Read-only view ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def deck(self) -> Deck | None:
        return self._deck

    @property
    def current_card(self) -> Card | None:
        return self._current

    @property
    def revealed(self) -> bool:
        return self._revealed

    @property
    def remaining(self) -> int:
        """Cards left in the queue, not counting the current card."""
        return len(self._queue)

    @property
    def total_in_session(self) -> int:
        return self._total

    @property
    def graded_count(self) -> int:
        return len(self._graded_ids)

    @property
    def progress(self) -> float:
        return self.graded_count / self._total if self._total else 0.0

    @property
    def session_stats(self) -> SessionStats:
        return self._stats

    @property
    def statistics_folded(self) -> bool:
        return self._stats_folded

    # --- Transitions ---

    def start(self, deck: Deck, now: datetime) -> StartOutcome:
        """
        Build the queue and show the first card.

        Returns NO_CARDS and stays IDLE when nothing is eligible.
        """
        if self._state is not SessionState.IDLE:
            raise InvalidSessionStateError("start", self._state.value)

        limits = self.context.limits
        queue = build_session_queue(
            deck,
            now,
            limits.daily_new_limit,
            limits.daily_total_limit,
            exclude_ids=self._graded_ids,
            rng=self._rng,
        )
        if not queue:
            logger.info(f"No cards available in deck {deck.name!r}")
            return StartOutcome.NO_CARDS

        self._deck = deck
        self._queue = deque(queue)
        self._total = len(queue)
        self._stats_folded = False
        self._state = SessionState.ACTIVE
        self._advance()
        logger.info(f"Session started on {deck.name!r} with {self._total} cards")
        return StartOutcome.STARTED

    def flip(self) -> bool:
        """Toggle between front and back. Returns the new revealed flag."""
        if self._state is not SessionState.ACTIVE:
            raise InvalidSessionStateError("flip", self._state.value)
        self._revealed = not self._revealed
        return self._revealed

    def rate(self, rating: Rating, now: datetime) -> Card:
        """
        Grade the current card and move on.

        The graded card is written back into the deck before anything else
        changes, so a failed write leaves the session untouched.

        Returns:
            The card with its updated review state.
        """
        if self._state is not SessionState.ACTIVE:
            raise InvalidSessionStateError("rate", self._state.value)
        if not self._revealed:
            raise InvalidSessionStateError("rate", "showing the front")

        card = self._current
        graded = grade_card(card, rating, now)
        self._deck.update_card(graded, now)

        self._stats.record(rating, was_new=card.is_new)
        self._graded_ids.add(card.id)
        logger.debug(
            f"Rated {card.id} {rating.title}: "
            f"interval={graded.review_state.interval_days}d "
            f"ease={graded.review_state.ease_factor:.2f}"
        )

        self._advance()
        if self._current is None:
            self._state = SessionState.COMPLETED
            logger.info(f"Session completed: {self._stats.total_studied} cards studied")
            self.fold_statistics(now)
        return graded

    def fold_statistics(self, now: datetime) -> bool:
        """
        Fold this session's counters into the context's GlobalStats.

        Idempotent: returns False without changing anything when the
        statistics were already folded or nothing has been graded.
        """
        if self._stats_folded or self._stats.total_studied == 0:
            return False
        self.context.global_stats = fold_session(self._stats, self.context.global_stats, now)
        self._stats_folded = True
        return True

    def reset(self, now: datetime) -> bool:
        """
        Abandon or close the session and return to IDLE.

        Partial statistics are folded first. Returns whether a fold happened.
        """
        folded = self.fold_statistics(now)
        self._state = SessionState.IDLE
        self._deck = None
        self._queue.clear()
        self._current = None
        self._revealed = False
        self._total = 0
        self._graded_ids.clear()
        self._stats = SessionStats()
        self._stats_folded = False
        return folded

    def _advance(self) -> None:
        self._current = self._queue.popleft() if self._queue else None
        self._revealed = False
