"""
Prometheus metrics definitions for the badge engine.

- Badge checks: how often the engine runs and how long it takes
- Awards: badges newly awarded, and awards lost to a concurrent writer
- Catalog: sync runs

Metrics are registered in the default prometheus_client registry; the host
application exposes them on its /metrics endpoint.
"""

from prometheus_client import Counter, Histogram


# =============================================================================
# Badge Check Metrics
# =============================================================================

badge_checks_total = Counter(
    "badge_checks_total",
    "Total badge evaluations",
    ["mode"],  # mode: award/read_only
)

badge_check_duration_seconds = Histogram(
    "badge_check_duration_seconds",
    "Badge evaluation time in seconds, including store I/O",
    ["mode"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

# =============================================================================
# Award Metrics
# =============================================================================

badges_awarded_total = Counter(
    "badges_awarded_total",
    "Total badges newly awarded",
    ["badge"],
)

badge_award_conflicts_total = Counter(
    "badge_award_conflicts_total",
    "Award inserts rejected because another writer already recorded the badge",
    ["badge"],
)

# =============================================================================
# Catalog Metrics
# =============================================================================

badge_catalog_syncs_total = Counter(
    "badge_catalog_syncs_total",
    "Total badge catalog sync runs",
)
