"""
Domain models for cards and decks.

Plain dataclasses with no I/O. Timestamps are passed in by the caller so
that every mutation can be driven from an injected clock.
"""

from dataclasses import dataclass, field
from datetime import datetime

from memit.domain.constants import DEFAULT_DECK_COLOR
from memit.domain.errors import CardNotFoundError, CardValidationError
from memit.domain.srs.models import ReviewState


@dataclass
class Card:
    """
    A single flashcard.

    front/back are opaque to the scheduler; only the deck mutation helpers
    check them for emptiness.
    """

    id: str
    front: str
    back: str
    created_at: datetime
    updated_at: datetime
    review_state: ReviewState
    archived: bool = False

    @property
    def is_valid(self) -> bool:
        return bool(self.front.strip()) and bool(self.back.strip())

    @property
    def normalized_front(self) -> str:
        return self.front.strip()

    @property
    def normalized_back(self) -> str:
        return self.back.strip()

    @property
    def is_new(self) -> bool:
        return self.review_state.is_new

    def touch(self, now: datetime) -> None:
        self.updated_at = now


@dataclass
class Deck:
    """An ordered collection of cards owned exclusively by this deck."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    cards: list[Card] = field(default_factory=list)
    color: str = DEFAULT_DECK_COLOR
    archived: bool = False

    # --- CRUD ---

    def add_card(self, card: Card, now: datetime) -> None:
        if not card.is_valid:
            raise CardValidationError("Card front and back must not be empty")
        self.cards.append(card)
        self.touch(now)

    def remove_card(self, card_id: str, now: datetime) -> None:
        self.cards = [c for c in self.cards if c.id != card_id]
        self.touch(now)

    def update_card(self, updated: Card, now: datetime) -> None:
        """Replace the card with the same id, keeping its position."""
        for index, card in enumerate(self.cards):
            if card.id == updated.id:
                self.cards[index] = updated
                self.touch(now)
                return
        raise CardNotFoundError(updated.id)

    def get_card(self, card_id: str) -> Card:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise CardNotFoundError(card_id)

    # --- Filters ---

    @property
    def active_cards(self) -> list[Card]:
        return [c for c in self.cards if not c.archived]

    def due_cards(self, now: datetime) -> list[Card]:
        """Active, already-learned cards whose due date has passed."""
        return [c for c in self.active_cards if c.review_state.is_due_for_review(now)]

    @property
    def new_cards(self) -> list[Card]:
        return [c for c in self.active_cards if c.review_state.is_new]

    # --- Counts ---

    @property
    def total_count(self) -> int:
        return len(self.active_cards)

    def due_count(self, now: datetime) -> int:
        return len(self.due_cards(now))

    @property
    def new_count(self) -> int:
        return len(self.new_cards)

    def touch(self, now: datetime) -> None:
        self.updated_at = now
