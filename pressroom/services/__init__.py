# Services package.
#
# Each module exposes a focused set of async functions for one concern:
#
#   article_service       - article submission and lookup
#   engagement_service    - like/view recording across both stores
#   popularity_service    - top-N read from the ranking cache
#   notification_service  - author notification inbox
#
# Functions that touch the durable store take an AsyncSession first; the
# ones that touch the ranking take the RankingCache injected by the router.
