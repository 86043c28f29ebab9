from datetime import timedelta

import pytest

from memit.application.session import SessionState, StartOutcome, StudyContext, StudySession
from memit.domain.errors import CardNotFoundError, ErrorKind, InvalidSessionStateError
from memit.domain.ports import StudyLimits
from memit.domain.srs.models import Rating
from memit.domain.stats.models import GlobalStats


@pytest.fixture
def context(t0):
    return StudyContext(global_stats=GlobalStats(today_date=t0.date()), limits=StudyLimits(20, 80))


@pytest.fixture
def session(context, rng):
    return StudySession(context, rng=rng)


def _grade_all(session, rating, now):
    graded = []
    while session.state is SessionState.ACTIVE:
        session.flip()
        graded.append(session.rate(rating, now))
    return graded


def test_empty_deck_never_becomes_active(session, make_deck, t0):
    outcome = session.start(make_deck(), t0)

    assert outcome is StartOutcome.NO_CARDS
    assert session.state is SessionState.IDLE
    assert session.current_card is None


def test_start_shows_first_card_front(session, make_deck, t0):
    assert session.start(make_deck(due=1, new=2), t0) is StartOutcome.STARTED

    assert session.state is SessionState.ACTIVE
    assert session.current_card is not None
    assert not session.revealed
    assert session.total_in_session == 3
    assert session.remaining == 2


def test_flip_toggles(session, make_deck, t0):
    session.start(make_deck(new=1), t0)
    assert session.flip() is True
    assert session.flip() is False


def test_rate_before_reveal_is_rejected(session, make_deck, t0):
    session.start(make_deck(new=1), t0)
    current = session.current_card

    with pytest.raises(InvalidSessionStateError) as exc:
        session.rate(Rating.GOOD, t0)

    assert exc.value.kind is ErrorKind.INVALID_STATE
    assert session.current_card is current
    assert session.session_stats.total_studied == 0


def test_calls_while_idle_are_rejected(session, t0):
    with pytest.raises(InvalidSessionStateError):
        session.flip()
    with pytest.raises(InvalidSessionStateError):
        session.rate(Rating.GOOD, t0)


def test_start_twice_is_rejected(session, make_deck, t0):
    session.start(make_deck(new=2), t0)
    with pytest.raises(InvalidSessionStateError):
        session.start(make_deck(new=2), t0)


def test_rate_writes_through_to_deck(session, make_deck, t0):
    deck = make_deck(new=2)
    session.start(deck, t0)
    card_id = session.current_card.id
    later = t0 + timedelta(minutes=5)

    session.flip()
    graded = session.rate(Rating.GOOD, later)

    stored = deck.get_card(card_id)
    assert stored is graded
    assert stored.review_state.repetitions == 1
    assert stored.review_state.due_at == later + timedelta(days=1)
    assert stored.updated_at == later
    assert not session.revealed
    assert session.current_card.id != card_id


def test_session_stats_track_new_and_review(session, make_deck, t0):
    session.start(make_deck(due=2, new=1), t0)
    _grade_all(session, Rating.HARD, t0)

    stats = session.session_stats
    assert stats.new_cards_studied == 1
    assert stats.review_cards_studied == 2
    assert stats.hard_count == 3


def test_completion_folds_exactly_once(session, context, make_deck, t0):
    session.start(make_deck(due=1, new=2), t0)
    _grade_all(session, Rating.GOOD, t0)

    assert session.state is SessionState.COMPLETED
    assert session.statistics_folded
    assert session.progress == 1.0
    after_completion = context.global_stats
    assert after_completion.total_cards_studied == 3
    assert after_completion.study_sessions == 1

    assert session.fold_statistics(t0) is False
    assert context.global_stats == after_completion

    assert session.reset(t0) is False
    assert context.global_stats == after_completion
    assert session.state is SessionState.IDLE


def test_rate_after_completion_is_rejected(session, make_deck, t0):
    session.start(make_deck(new=1), t0)
    _grade_all(session, Rating.EASY, t0)
    with pytest.raises(InvalidSessionStateError):
        session.flip()


def test_abandoned_session_folds_partial_stats_once(session, context, make_deck, t0):
    session.start(make_deck(new=3), t0)
    session.flip()
    session.rate(Rating.AGAIN, t0)

    assert session.reset(t0) is True
    assert context.global_stats.total_cards_studied == 1
    assert context.global_stats.total_again_count == 1

    assert session.reset(t0) is False
    assert context.global_stats.total_cards_studied == 1


def test_reset_without_grading_does_not_fold(session, context, make_deck, t0):
    session.start(make_deck(new=3), t0)
    assert session.reset(t0) is False
    assert context.global_stats.study_sessions == 0


def test_graded_cards_are_not_requeued(context, make_deck, t0, rng):
    deck = make_deck(new=3)
    session = StudySession(context, rng=rng)
    session.start(deck, t0)
    seen = []
    while session.state is SessionState.ACTIVE:
        seen.append(session.current_card.id)
        session.flip()
        # Again keeps the card new; it must still not come back this session
        session.rate(Rating.AGAIN, t0)

    assert sorted(seen) == ["new_0", "new_1", "new_2"]


def test_quota_limits_session_size(context, make_deck, t0, rng):
    context.limits = StudyLimits(daily_new_limit=3, daily_total_limit=4)
    session = StudySession(context, rng=rng)
    session.start(make_deck(due=5, new=10), t0)

    graded = _grade_all(session, Rating.GOOD, t0)
    assert len(graded) == 4
    assert session.session_stats.new_cards_studied == 0


def test_card_removed_from_deck_mid_session(session, make_deck, t0):
    deck = make_deck(new=2)
    session.start(deck, t0)
    deck.remove_card(session.current_card.id, t0)
    session.flip()

    with pytest.raises(CardNotFoundError):
        session.rate(Rating.GOOD, t0)
    assert session.session_stats.total_studied == 0
    assert session.state is SessionState.ACTIVE
