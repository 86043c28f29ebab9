"""
Domain models for study statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import date, datetime

from memit.domain.srs.models import Rating


@dataclass
class SessionStats:
    """
    Counters for a single study session.

    Every graded card increments exactly one of new/review and exactly one
    rating counter.
    """

    new_cards_studied: int = 0
    review_cards_studied: int = 0
    again_count: int = 0
    hard_count: int = 0
    good_count: int = 0
    easy_count: int = 0

    def record(self, rating: Rating, was_new: bool) -> None:
        if was_new:
            self.new_cards_studied += 1
        else:
            self.review_cards_studied += 1

        if rating is Rating.AGAIN:
            self.again_count += 1
        elif rating is Rating.HARD:
            self.hard_count += 1
        elif rating is Rating.GOOD:
            self.good_count += 1
        else:
            self.easy_count += 1

    @property
    def total_studied(self) -> int:
        return self.new_cards_studied + self.review_cards_studied

    @property
    def correct_count(self) -> int:
        return self.good_count + self.easy_count

    @property
    def total_ratings(self) -> int:
        return self.again_count + self.hard_count + self.good_count + self.easy_count

    @property
    def accuracy(self) -> float:
        total = self.total_ratings
        return self.correct_count / total if total > 0 else 0.0


@dataclass
class GlobalStats:
    """
    Lifetime totals plus a bucket for the current calendar day.

    Attributes:
        today_date: The day the today_* counters belong to.
        today_correct: Good + Easy ratings recorded today.
    """

    today_date: date

    # Lifetime
    total_cards_studied: int = 0
    total_new_cards_studied: int = 0
    total_review_cards_studied: int = 0
    total_again_count: int = 0
    total_hard_count: int = 0
    total_good_count: int = 0
    total_easy_count: int = 0
    study_sessions: int = 0
    last_study_at: datetime | None = None

    # Today
    today_cards_studied: int = 0
    today_new_cards: int = 0
    today_reviews: int = 0
    today_correct: int = 0

    @property
    def accuracy(self) -> float:
        total = (
            self.total_again_count
            + self.total_hard_count
            + self.total_good_count
            + self.total_easy_count
        )
        correct = self.total_good_count + self.total_easy_count
        return correct / total if total > 0 else 0.0

    @property
    def today_accuracy(self) -> float:
        """Share of today's graded cards rated Good or Easy."""
        if self.today_cards_studied == 0:
            return 0.0
        return self.today_correct / self.today_cards_studied
