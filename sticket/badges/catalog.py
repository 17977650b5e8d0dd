"""
Badge Catalog

The in-process badge definitions. This tuple is the source of truth: the
`badges` table is overwritten to match it on every sync, and definitions are
only ever added or edited here.

Categories:
- Milestones (total shows logged)
- Streaks (busy months, consecutive months)
- Loyalty (same artist)
- Explorer (distinct venues)
- Traveler (distinct cities, states, countries, distance)
- Genre (shows per normalized genre)
- Venue regular (same venue)
- Special (festivals)
"""

from typing import Dict, List, Optional

from sticket.exceptions import CatalogError
from sticket.models.badge import (
    BadgeCategory,
    BadgeDefinition,
    BadgeRarity,
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


def _badge(id, name, description, category, rarity, icon, criteria, points) -> BadgeDefinition:
    return BadgeDefinition(
        id=id,
        name=name,
        description=description,
        category=category,
        rarity=rarity,
        icon=icon,
        criteria=criteria,
        points=points,
    )


_C = BadgeCategory
_R = BadgeRarity

BADGES: tuple[BadgeDefinition, ...] = (
    # === MILESTONES ===
    _badge("first_show", "First Timer", "Log your first concert",
           _C.MILESTONE, _R.COMMON, "star", FirstShowCriterion(), 10),
    _badge("shows_10", "Getting Started", "Log 10 concerts",
           _C.MILESTONE, _R.COMMON, "musical-notes", ShowCountCriterion(count=10), 25),
    _badge("shows_25", "Concert Goer", "Log 25 concerts",
           _C.MILESTONE, _R.UNCOMMON, "ticket", ShowCountCriterion(count=25), 50),
    _badge("shows_50", "Live Music Lover", "Log 50 concerts",
           _C.MILESTONE, _R.RARE, "heart", ShowCountCriterion(count=50), 100),
    _badge("shows_100", "Centurion", "Log 100 concerts",
           _C.MILESTONE, _R.EPIC, "trophy", ShowCountCriterion(count=100), 250),
    _badge("shows_250", "Concert Veteran", "Log 250 concerts",
           _C.MILESTONE, _R.EPIC, "medal", ShowCountCriterion(count=250), 500),
    _badge("shows_500", "Living Legend", "Log 500 concerts",
           _C.MILESTONE, _R.LEGENDARY, "diamond", ShowCountCriterion(count=500), 1000),

    # === STREAKS ===
    _badge("monthly_5", "Busy Month", "5 shows in a single month",
           _C.STREAK, _R.UNCOMMON, "calendar", ShowsInMonthCriterion(count=5), 50),
    _badge("monthly_10", "Concert Marathon", "10 shows in a single month",
           _C.STREAK, _R.RARE, "flame", ShowsInMonthCriterion(count=10), 100),
    _badge("consecutive_3", "Consistent", "Shows 3 months in a row",
           _C.STREAK, _R.UNCOMMON, "trending-up", ConsecutiveMonthsCriterion(count=3), 50),
    _badge("consecutive_6", "Dedicated", "Shows 6 months in a row",
           _C.STREAK, _R.RARE, "ribbon", ConsecutiveMonthsCriterion(count=6), 100),
    _badge("consecutive_12", "Year Round", "Shows every month for a year",
           _C.STREAK, _R.LEGENDARY, "infinite", ConsecutiveMonthsCriterion(count=12), 500),

    # === LOYALTY ===
    _badge("loyalty_3", "Fan", "See the same artist 3 times",
           _C.LOYALTY, _R.COMMON, "heart", SameArtistCriterion(count=3), 25),
    _badge("loyalty_5", "Superfan", "See the same artist 5 times",
           _C.LOYALTY, _R.UNCOMMON, "heart-circle", SameArtistCriterion(count=5), 50),
    _badge("loyalty_10", "Devoted", "See the same artist 10 times",
           _C.LOYALTY, _R.RARE, "sparkles", SameArtistCriterion(count=10), 100),
    _badge("loyalty_25", "Groupie", "See the same artist 25 times",
           _C.LOYALTY, _R.LEGENDARY, "star", SameArtistCriterion(count=25), 500),

    # === EXPLORER ===
    _badge("venues_10", "Venue Hunter", "Visit 10 different venues",
           _C.EXPLORER, _R.COMMON, "location", UniqueVenuesCriterion(count=10), 25),
    _badge("venues_25", "Venue Explorer", "Visit 25 different venues",
           _C.EXPLORER, _R.UNCOMMON, "map", UniqueVenuesCriterion(count=25), 50),
    _badge("venues_50", "Venue Master", "Visit 50 different venues",
           _C.EXPLORER, _R.RARE, "compass", UniqueVenuesCriterion(count=50), 100),
    _badge("venues_100", "Venue Collector", "Visit 100 different venues",
           _C.EXPLORER, _R.LEGENDARY, "globe", UniqueVenuesCriterion(count=100), 500),

    # === TRAVELER ===
    _badge("cities_5", "City Hopper", "See shows in 5 different cities",
           _C.TRAVELER, _R.COMMON, "business", UniqueCitiesCriterion(count=5), 25),
    _badge("cities_10", "Road Tripper", "See shows in 10 different cities",
           _C.TRAVELER, _R.UNCOMMON, "car", UniqueCitiesCriterion(count=10), 50),
    _badge("states_5", "State Explorer", "See shows in 5 different states",
           _C.TRAVELER, _R.UNCOMMON, "flag", UniqueStatesCriterion(count=5), 50),
    _badge("states_10", "Coast to Coast", "See shows in 10 different states",
           _C.TRAVELER, _R.RARE, "airplane", UniqueStatesCriterion(count=10), 100),
    _badge("countries_3", "International", "See shows in 3 different countries",
           _C.TRAVELER, _R.RARE, "earth", UniqueCountriesCriterion(count=3), 100),
    _badge("distance_500", "Dedicated Fan", "Travel 500+ miles for a show",
           _C.TRAVELER, _R.RARE, "navigate", DistanceTraveledCriterion(miles=500), 100),

    # === GENRE ===
    _badge("genre_rock", "Rock Enthusiast", "See 10 rock shows",
           _C.GENRE, _R.UNCOMMON, "hand-left", GenreShowsCriterion(genre="rock", count=10), 50),
    _badge("genre_pop", "Pop Fan", "See 10 pop shows",
           _C.GENRE, _R.UNCOMMON, "sparkles", GenreShowsCriterion(genre="pop", count=10), 50),
    _badge("genre_hiphop", "Hip-Hop Head", "See 10 hip-hop shows",
           _C.GENRE, _R.UNCOMMON, "mic", GenreShowsCriterion(genre="hip-hop", count=10), 50),
    _badge("genre_electronic", "Raver", "See 10 electronic/EDM shows",
           _C.GENRE, _R.UNCOMMON, "pulse", GenreShowsCriterion(genre="electronic", count=10), 50),
    _badge("genre_country", "Country Roads", "See 10 country shows",
           _C.GENRE, _R.UNCOMMON, "leaf", GenreShowsCriterion(genre="country", count=10), 50),

    # === VENUE REGULAR ===
    _badge("venue_regular_5", "Regular", "5 shows at the same venue",
           _C.VENUE, _R.UNCOMMON, "home", SameVenueCriterion(count=5), 50),
    _badge("venue_regular_10", "Home Base", "10 shows at the same venue",
           _C.VENUE, _R.RARE, "storefront", SameVenueCriterion(count=10), 100),
    _badge("venue_regular_25", "VIP Status", "25 shows at the same venue",
           _C.VENUE, _R.EPIC, "shield", SameVenueCriterion(count=25), 250),

    # === SPECIAL ===
    _badge("festival", "Festival Goer", "Attend your first festival",
           _C.SPECIAL, _R.UNCOMMON, "bonfire", FestivalCriterion(), 50),
)


def _build_badge_map(badges: tuple[BadgeDefinition, ...]) -> Dict[str, BadgeDefinition]:
    """Index definitions by key, rejecting duplicate keys"""
    badge_map: Dict[str, BadgeDefinition] = {}
    for badge in badges:
        if badge.id in badge_map:
            raise CatalogError(f"Duplicate badge key in catalog: {badge.id}", badge_key=badge.id)
        badge_map[badge.id] = badge
    return badge_map


BADGE_MAP: Dict[str, BadgeDefinition] = _build_badge_map(BADGES)


def get_badge_by_id(badge_id: str) -> Optional[BadgeDefinition]:
    return BADGE_MAP.get(badge_id)


def get_badges_by_category(category: BadgeCategory) -> List[BadgeDefinition]:
    """Definitions in one category, in catalog order"""
    return [b for b in BADGES if b.category == category]


def total_catalog_points() -> int:
    return sum(b.points for b in BADGES)
