"""Badge models for the achievement engine"""
from enum import Enum
from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class BadgeCategory(str, Enum):
    """Badge categories"""
    MILESTONE = "milestone"
    STREAK = "streak"
    LOYALTY = "loyalty"
    EXPLORER = "explorer"
    TRAVELER = "traveler"
    GENRE = "genre"
    VENUE = "venue"
    SPECIAL = "special"


class BadgeRarity(str, Enum):
    """Badge rarity (informational only, ordered common -> legendary)"""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


# ============================================
# Criteria
# ============================================

class _Criterion(BaseModel):
    model_config = ConfigDict(frozen=True)


class _CountCriterion(_Criterion):
    count: int = Field(ge=0)


class FirstShowCriterion(_Criterion):
    type: Literal["first_show"] = "first_show"


class ShowCountCriterion(_CountCriterion):
    type: Literal["show_count"] = "show_count"


class ShowsInMonthCriterion(_CountCriterion):
    type: Literal["shows_in_month"] = "shows_in_month"


class ConsecutiveMonthsCriterion(_CountCriterion):
    type: Literal["consecutive_months"] = "consecutive_months"


class SameArtistCriterion(_CountCriterion):
    type: Literal["same_artist"] = "same_artist"


class UniqueVenuesCriterion(_CountCriterion):
    type: Literal["unique_venues"] = "unique_venues"


class UniqueCitiesCriterion(_CountCriterion):
    type: Literal["unique_cities"] = "unique_cities"


class UniqueStatesCriterion(_CountCriterion):
    type: Literal["unique_states"] = "unique_states"


class UniqueCountriesCriterion(_CountCriterion):
    type: Literal["unique_countries"] = "unique_countries"


class SameVenueCriterion(_CountCriterion):
    type: Literal["same_venue"] = "same_venue"


class GenreShowsCriterion(_CountCriterion):
    type: Literal["genre_shows"] = "genre_shows"
    genre: str  # normalized bucket, e.g. "hip-hop"


class FestivalCriterion(_Criterion):
    """Needs a festival flag on events; never earned until one exists."""
    type: Literal["festival"] = "festival"


class DistanceTraveledCriterion(_Criterion):
    """Needs user home location and venue coordinates; never earned until both exist."""
    type: Literal["distance_traveled"] = "distance_traveled"
    miles: int = Field(ge=0)


BadgeCriterion = Annotated[
    Union[
        FirstShowCriterion,
        ShowCountCriterion,
        ShowsInMonthCriterion,
        ConsecutiveMonthsCriterion,
        SameArtistCriterion,
        UniqueVenuesCriterion,
        UniqueCitiesCriterion,
        UniqueStatesCriterion,
        UniqueCountriesCriterion,
        SameVenueCriterion,
        GenreShowsCriterion,
        FestivalCriterion,
        DistanceTraveledCriterion,
    ],
    Field(discriminator="type"),
]


# ============================================
# Definitions and results
# ============================================

class BadgeDefinition(BaseModel):
    """Badge catalog entry. `id` is the stable key and is never reused."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: BadgeCategory
    rarity: BadgeRarity
    icon: str  # Ionicons name
    points: int = Field(ge=0)
    criteria: BadgeCriterion


class BadgeProgress(BaseModel):
    """Progress toward an unearned badge"""
    badge: BadgeDefinition
    current: int
    target: int
    percentage: int = Field(ge=0, le=100)
    is_earned: bool = False


class BadgeCheckResult(BaseModel):
    """Outcome of one badge check"""
    new_badges: list[BadgeDefinition] = Field(default_factory=list)
    progress: list[BadgeProgress] = Field(default_factory=list)


class EarnedBadge(BaseModel):
    """A badge the user holds"""
    id: str
    badge: BadgeDefinition
    earned_at: datetime
    event_id: Optional[str] = None
