import random
from datetime import datetime, timedelta, timezone

import pytest

from memit.domain.models import Card, Deck
from memit.domain.srs.models import ReviewState
from memit.infrastructure.clock import FixedClock

T0 = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_card():
    """Factory for cards with a chosen review state."""
    counter = iter(range(1, 10_000))

    def _make(
        card_id: str | None = None,
        repetitions: int = 0,
        due_in_days: float = 0,
        interval_days: int = 1,
        ease_factor: float = 2.5,
        lapses: int = 0,
        archived: bool = False,
        front: str = "front",
        back: str = "back",
    ) -> Card:
        return Card(
            id=card_id or f"card_{next(counter)}",
            front=front,
            back=back,
            created_at=T0,
            updated_at=T0,
            review_state=ReviewState(
                due_at=T0 + timedelta(days=due_in_days),
                ease_factor=ease_factor,
                interval_days=interval_days,
                repetitions=repetitions,
                lapses=lapses,
            ),
            archived=archived,
        )

    return _make


@pytest.fixture
def make_deck(make_card):
    """Factory for decks with `due` overdue review cards and `new` new cards."""

    def _make(due: int = 0, new: int = 0, name: str = "Italian A1") -> Deck:
        cards = [
            make_card(card_id=f"due_{i}", repetitions=2, interval_days=6, due_in_days=-(i + 1))
            for i in range(due)
        ]
        cards += [make_card(card_id=f"new_{i}") for i in range(new)]
        return Deck(id="deck_1", name=name, created_at=T0, updated_at=T0, cards=cards)

    return _make
