"""
Queue builder for daily study sessions.

Builds a bounded study queue by:
1. Ranking due review cards by due date and filling the total quota with them
2. Topping up the remaining quota with randomly sampled new cards
3. Shuffling the combined selection for presentation
"""

import logging
import random
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import datetime

from memit.domain.models import Card, Deck

logger = logging.getLogger(__name__)


@dataclass
class QueueBuildResult:
    """Result of queue building operation."""

    due: list[Card]  # Selected review cards, earliest due first
    new: list[Card]  # Selected new cards, in sampled order
    queue: list[Card] = field(default_factory=list)  # Presentation order

    @property
    def is_empty(self) -> bool:
        return not self.queue


def build_session_queue(
    deck: Deck,
    now: datetime,
    daily_new_limit: int,
    daily_total_limit: int,
    exclude_ids: Collection[str] | None = None,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Select and order the cards for one study session.

    Args:
        deck: Deck to draw from. Archived cards are never selected.
        now: Reference time for deciding which review cards are due.
        daily_new_limit: Maximum number of new cards in the session.
        daily_total_limit: Maximum number of cards in the session.
        exclude_ids: Card IDs already graded and not to be offered again.
        rng: Random source for sampling and shuffling (default: module random).

    Returns:
        The cards in presentation order. An empty list means there is nothing
        to study.
    """
    return plan_session_queue(
        deck,
        now,
        daily_new_limit,
        daily_total_limit,
        exclude_ids=exclude_ids,
        rng=rng,
    ).queue


def plan_session_queue(
    deck: Deck,
    now: datetime,
    daily_new_limit: int,
    daily_total_limit: int,
    exclude_ids: Collection[str] | None = None,
    rng: random.Random | None = None,
) -> QueueBuildResult:
    """
    Same selection as build_session_queue, keeping the due/new split visible.
    """
    rng = rng or random.Random()
    excluded = set(exclude_ids or ())
    total_limit = max(daily_total_limit, 0)
    new_limit = max(daily_new_limit, 0)

    due = _select_due(deck, now, excluded, total_limit)

    remaining = total_limit - len(due)
    allowed_new = min(new_limit, remaining)
    new = _select_new(deck, excluded, allowed_new, rng) if allowed_new > 0 else []

    queue = due + new
    rng.shuffle(queue)

    logger.debug(
        f"[queue] deck={deck.name!r} due={len(due)} new={len(new)} "
        f"limits=({new_limit}, {total_limit})"
    )
    return QueueBuildResult(due=due, new=new, queue=queue)


def _select_due(
    deck: Deck, now: datetime, excluded: set[str], limit: int
) -> list[Card]:
    """Due review cards, earliest due first, truncated to limit."""
    candidates = [c for c in deck.due_cards(now) if c.id not in excluded]
    # sorted() is stable: equal due dates keep deck order
    candidates = sorted(candidates, key=lambda c: c.review_state.due_at)
    return candidates[:limit]


def _select_new(
    deck: Deck, excluded: set[str], limit: int, rng: random.Random
) -> list[Card]:
    """A random sample of new cards of at most limit cards."""
    candidates = [c for c in deck.new_cards if c.id not in excluded]
    rng.shuffle(candidates)
    return candidates[:limit]
