"""
SM-2 update function.

Restricted to the four-level Rating scale, so quality is always in 1-4 and
the ease adjustment never reaches the canonical q=0 / q=5 extremes.
This is a pure computation module with no I/O.
"""

from dataclasses import replace
from datetime import datetime, timedelta

from memit.domain.constants import (
    INITIAL_INTERVAL_DAYS,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    PASSING_QUALITY,
    SECOND_INTERVAL_DAYS,
)
from memit.domain.models import Card
from memit.domain.srs.models import Rating, ReviewState


def apply_rating(rating: Rating, state: ReviewState, now: datetime) -> ReviewState:
    """
    Compute the review state that follows grading a card.

    Args:
        rating: The user's recall rating.
        state: The card's current review state (left untouched).
        now: Reference time the next due date is computed from.

    Returns:
        A new ReviewState.
    """
    q = rating.quality
    interval = state.interval_days
    repetitions = state.repetitions
    lapses = state.lapses

    if q >= PASSING_QUALITY:
        if repetitions == 0:
            interval = INITIAL_INTERVAL_DAYS
        elif repetitions == 1:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = int(interval * state.ease_factor)
        repetitions += 1
    else:
        repetitions = 0
        interval = INITIAL_INTERVAL_DAYS
        lapses += 1

    # Holds for stored states whose interval was already below 1
    interval = max(interval, INITIAL_INTERVAL_DAYS)

    ease = state.ease_factor + (
        0.1 - (MAX_QUALITY - q) * (0.08 + (MAX_QUALITY - q) * 0.02)
    )
    ease = max(ease, MIN_EASE_FACTOR)

    return ReviewState(
        due_at=now + timedelta(days=interval),
        ease_factor=ease,
        interval_days=interval,
        repetitions=repetitions,
        lapses=lapses,
    )


def grade_card(card: Card, rating: Rating, now: datetime) -> Card:
    """Return a copy of the card with its review state advanced and updated_at touched."""
    return replace(
        card,
        review_state=apply_rating(rating, card.review_state, now),
        updated_at=now,
    )
