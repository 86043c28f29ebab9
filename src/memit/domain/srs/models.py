"""
Domain models for SM-2 review state.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

from memit.domain.constants import INITIAL_EASE_FACTOR, INITIAL_INTERVAL_DAYS, PASSING_QUALITY


class Rating(IntEnum):
    """
    Recall quality reported by the user after revealing the answer.

    The value doubles as the SM-2 quality score, restricted to 1-4.
    """

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4

    @property
    def quality(self) -> int:
        return int(self)

    @property
    def is_correct(self) -> bool:
        return self.quality >= PASSING_QUALITY

    @property
    def title(self) -> str:
        return self.name.capitalize()

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Rating.AGAIN: "I didn't remember",
    Rating.HARD: "I barely remembered",
    Rating.GOOD: "I remembered with effort",
    Rating.EASY: "I remembered easily",
}


@dataclass(frozen=True)
class ReviewState:
    """
    SM-2 memory state embedded in a card.

    Attributes:
        due_at: When the card is next scheduled.
        ease_factor: Interval growth multiplier, never below 1.3.
        interval_days: Days until the next review after a successful recall.
        repetitions: Consecutive successful recalls (0 = new card).
        lapses: Failed recalls, never reset.
    """

    due_at: datetime
    ease_factor: float = INITIAL_EASE_FACTOR
    interval_days: int = INITIAL_INTERVAL_DAYS
    repetitions: int = 0
    lapses: int = 0

    @property
    def is_new(self) -> bool:
        return self.repetitions == 0

    def is_due_at(self, now: datetime) -> bool:
        return self.due_at <= now

    def is_due_for_review(self, now: datetime) -> bool:
        return not self.is_new and self.is_due_at(now)

    @property
    def next_review(self) -> datetime | None:
        return None if self.is_new else self.due_at
