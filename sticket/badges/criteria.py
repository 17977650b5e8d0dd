"""
Badge Criteria Evaluation

Maps one criterion and a statistics snapshot to (earned, current, target).
Every criterion kind is handled in evaluate_criterion(); the final
assert_never() makes an unhandled kind a type-checker error.
"""

import math
from typing import NamedTuple, assert_never

from sticket.badges.statistics import UserStatistics
from sticket.models.badge import (
    BadgeCriterion,
    ConsecutiveMonthsCriterion,
    DistanceTraveledCriterion,
    FestivalCriterion,
    FirstShowCriterion,
    GenreShowsCriterion,
    SameArtistCriterion,
    SameVenueCriterion,
    ShowCountCriterion,
    ShowsInMonthCriterion,
    UniqueCitiesCriterion,
    UniqueCountriesCriterion,
    UniqueStatesCriterion,
    UniqueVenuesCriterion,
)


class CriterionResult(NamedTuple):
    earned: bool
    current: int
    target: int


def _at_least(current: int, target: int) -> CriterionResult:
    return CriterionResult(earned=current >= target, current=current, target=target)


def evaluate_criterion(criterion: BadgeCriterion, stats: UserStatistics) -> CriterionResult:
    """
    Evaluate a badge criterion against a user's statistics

    Args:
        criterion: Criterion from a badge definition
        stats: Snapshot from compute_statistics() (read only)

    Returns:
        CriterionResult(earned, current, target)
    """
    if isinstance(criterion, FirstShowCriterion):
        return _at_least(stats.show_count, 1)

    elif isinstance(criterion, ShowCountCriterion):
        return _at_least(stats.show_count, criterion.count)

    elif isinstance(criterion, ShowsInMonthCriterion):
        return _at_least(stats.max_month_count, criterion.count)

    elif isinstance(criterion, ConsecutiveMonthsCriterion):
        return _at_least(stats.max_consecutive, criterion.count)

    elif isinstance(criterion, SameArtistCriterion):
        return _at_least(stats.max_artist_count, criterion.count)

    elif isinstance(criterion, UniqueVenuesCriterion):
        return _at_least(stats.unique_venues, criterion.count)

    elif isinstance(criterion, UniqueCitiesCriterion):
        return _at_least(stats.unique_cities, criterion.count)

    elif isinstance(criterion, UniqueStatesCriterion):
        return _at_least(stats.unique_states, criterion.count)

    elif isinstance(criterion, UniqueCountriesCriterion):
        return _at_least(stats.unique_countries, criterion.count)

    elif isinstance(criterion, SameVenueCriterion):
        return _at_least(stats.max_venue_count, criterion.count)

    elif isinstance(criterion, GenreShowsCriterion):
        return _at_least(stats.genre_counts.get(criterion.genre, 0), criterion.count)

    elif isinstance(criterion, FestivalCriterion):
        # Events carry no festival flag yet
        return CriterionResult(earned=False, current=0, target=1)

    elif isinstance(criterion, DistanceTraveledCriterion):
        # No user home location or venue coordinates yet
        return CriterionResult(earned=False, current=0, target=criterion.miles)

    else:
        assert_never(criterion)


def progress_percentage(current: int, target: int) -> int:
    """Percent complete, rounded half up and clamped to 0..100 (0 when target is 0)"""
    if target <= 0:
        return 0
    return max(0, min(100, math.floor(current * 100 / target + 0.5)))
