"""Service for minting stable identifiers and fresh cards/decks."""

from datetime import datetime

from ulid import ULID

from memit.domain.constants import DEFAULT_DECK_COLOR
from memit.domain.models import Card, Deck
from memit.domain.srs.models import ReviewState


def generate_card_id() -> str:
    """Generate a stable card ID using ULID."""
    return f"card_{ULID()}"


def generate_deck_id() -> str:
    return f"deck_{ULID()}"


def new_card(front: str, back: str, now: datetime) -> Card:
    """
    Create a new, never-reviewed card that is immediately eligible for study.
    """
    return Card(
        id=generate_card_id(),
        front=front,
        back=back,
        created_at=now,
        updated_at=now,
        review_state=ReviewState(due_at=now),
    )


def new_deck(
    name: str,
    now: datetime,
    description: str = "",
    cards: list[Card] | None = None,
    color: str = DEFAULT_DECK_COLOR,
) -> Deck:
    return Deck(
        id=generate_deck_id(),
        name=name,
        description=description,
        cards=list(cards or []),
        created_at=now,
        updated_at=now,
        color=color,
    )
