"""
Statistics aggregator.

Folds a finished (or abandoned) session into the lifetime and daily
statistics. Pure functions: the caller owns the GlobalStats handle and
decides when to persist.
"""

import logging
from dataclasses import replace
from datetime import date, datetime

from memit.domain.stats.models import GlobalStats, SessionStats

logger = logging.getLogger(__name__)


def reset_today(stats: GlobalStats, today: date) -> GlobalStats:
    """Zero the today bucket and move it to the given day. Lifetime totals are kept."""
    return replace(
        stats,
        today_date=today,
        today_cards_studied=0,
        today_new_cards=0,
        today_reviews=0,
        today_correct=0,
    )


def rollover_if_new_day(stats: GlobalStats, today: date) -> tuple[GlobalStats, bool]:
    """
    Day-rollover check, run on every application resume.

    Returns:
        (stats, rolled_over). When the stored day differs from today the
        returned stats have a zeroed today bucket.
    """
    if stats.today_date == today:
        return stats, False

    logger.info(f"New day detected ({stats.today_date} -> {today}), daily stats reset")
    return reset_today(stats, today), True


def fold_session(session: SessionStats, stats: GlobalStats, now: datetime) -> GlobalStats:
    """
    Merge one session's counters into the global statistics.

    Args:
        session: Counters accumulated by the session runner.
        stats: Current global statistics (left untouched).
        now: Time of the fold; its calendar day selects the today bucket.

    Returns:
        The updated GlobalStats.
    """
    today = now.date()
    if stats.today_date != today:
        stats = reset_today(stats, today)

    folded = replace(
        stats,
        total_cards_studied=stats.total_cards_studied + session.total_studied,
        total_new_cards_studied=stats.total_new_cards_studied + session.new_cards_studied,
        total_review_cards_studied=(
            stats.total_review_cards_studied + session.review_cards_studied
        ),
        total_again_count=stats.total_again_count + session.again_count,
        total_hard_count=stats.total_hard_count + session.hard_count,
        total_good_count=stats.total_good_count + session.good_count,
        total_easy_count=stats.total_easy_count + session.easy_count,
        study_sessions=stats.study_sessions + 1,
        last_study_at=now,
        today_cards_studied=stats.today_cards_studied + session.total_studied,
        today_new_cards=stats.today_new_cards + session.new_cards_studied,
        today_reviews=stats.today_reviews + session.review_cards_studied,
        today_correct=stats.today_correct + session.correct_count,
    )

    logger.info(
        f"Folded session: {session.total_studied} cards "
        f"(lifetime {folded.total_cards_studied}, today {folded.today_cards_studied})"
    )
    return folded
