"""
Free-text city resolver.

Exact (case-insensitive) match first, then the first city whose name
contains the input. Both passes walk the taxonomy in order, so an
ambiguous input silently resolves to the first hit; there is no ranking.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from src.guide import taxonomy
from src.models.schemas import Notice

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CityMatch:
    """A resolved city and where it sits in the taxonomy."""

    city: str
    region: str
    country: str
    exact: bool


Location = tuple[str, str, str]


def _candidates(
    locations: Optional[Iterable[Location]],
    scope: Optional[str],
) -> Iterable[Location]:
    source = taxonomy.iter_locations() if locations is None else locations
    for region, country, city in source:
        if scope is None or country == scope:
            yield region, country, city


def resolve_city(
    text: str,
    cities: Optional[Iterable[Location]] = None,
    scope: Optional[str] = None,
) -> Optional[CityMatch]:
    """
    Resolve typed input to a city name.

    Args:
        text: What the user typed.
        cities: (region, country, city) triples to search. Defaults to the
            whole taxonomy, duplicates across countries included.
        scope: Optional country to restrict the search to.

    Returns:
        The first matching city, or None when nothing matches.
    """
    term = text.strip().lower()
    if not term:
        return None

    candidates = list(_candidates(cities, scope))

    for region, country, city in candidates:
        if city.lower() == term:
            return CityMatch(city=city, region=region, country=country, exact=True)

    for region, country, city in candidates:
        if term in city.lower():
            logger.debug("city_resolved_by_substring", term=term, city=city)
            return CityMatch(city=city, region=region, country=country, exact=False)

    return None


def city_found_notice(match: CityMatch) -> Notice:
    return Notice.success("City Found", f"Selected {match.city}")


CITY_NOT_FOUND = Notice.error(
    "City Not Found",
    "Sorry, your choice is not listed. Please try a different city or select from the dropdown.",
)
