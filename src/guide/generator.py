"""
Mock result generator.

Stands in for a search/ranking API that does not exist yet: once the
selection is complete it synthesizes N placeholder listings for the chosen
category and city. Names are drawn independently per record, so duplicate
names within a batch are expected.

Only one country is served. Any other country is rejected with a
validation notice; nothing is generated.

Usage:
    generator = MockResultGenerator(supported_country="United States")
    outcome = await generator.search(state)
    if outcome.ok:
        records = outcome.records
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote

import structlog

from src.guide.selection import SelectionState
from src.models.schemas import (
    BusinessRecord,
    Category,
    ContactDetails,
    Notice,
    ReviewSource,
    SocialLinks,
)
from src.monitoring.metrics import record_rejected_search, track_guide_search

logger = structlog.get_logger(__name__)


# =============================================================================
# Word Tables
# =============================================================================

NAME_PREFIXES = [
    "Golden", "Royal", "Grand", "Elite", "Prime", "Classic", "Modern", "Urban",
    "Sunset", "Riverside", "Downtown", "Central", "Main Street", "Corner",
    "Blue Moon", "Red Oak", "Green Valley", "Silver Star", "Diamond",
]

NAME_SUFFIXES: dict[Category, list[str]] = {
    Category.EAT: ["Restaurant", "Bistro", "Grill", "Kitchen", "Cafe", "Diner", "Eatery"],
    Category.DRINK: ["Bar", "Lounge", "Pub", "Tavern", "Brewery", "Wine Bar", "Cocktail Bar"],
    Category.STAY: ["Hotel", "Inn", "Resort", "Lodge", "Suites", "Boutique Hotel"],
    Category.PLAY: ["Entertainment Center", "Theater", "Club", "Venue", "Arena", "Gaming Lounge"],
}

STREETS = ["Main St", "Broadway", "First Ave", "Oak St", "Park Ave", "Center St"]

PLACEHOLDER_IMAGES = [
    f"https://images.unsplash.com/photo-{photo_id}?w=400&h=300&fit=crop&crop=center&q=80"
    for photo_id in (
        "1649972904349-6e44c42644a7",
        "1488590528505-98d2b5aba04b",
        "1518770660439-4636190af475",
        "1461749280684-dccba630e2f6",
        "1486312338219-ce68d2c6f44d",
        "1581091226825-a6a2a5aee158",
        "1485827404703-89b55fcc595e",
        "1526374965328-7f61d4dc18c5",
        "1531297484001-80022131f5a1",
        "1487058792275-0ad4aaf24ca7",
        "1605810230434-7631ac76ec81",
    )
]

# Chance that each optional field is present on a listing
FIELD_PRESENCE = {
    "facebook": 0.7,
    "instagram": 0.8,
    "twitter": 0.4,
    "email": 0.6,
    "website": 0.7,
    "menu_link": 0.6,
}

MIN_RATING = 3.0
MAX_RATING = 5.0
RATING_SPAN = MAX_RATING - MIN_RATING


# =============================================================================
# Outcome
# =============================================================================


@dataclass
class SearchOutcome:
    """Result of a guide search: either records or a validation notice."""

    records: list[BusinessRecord] = field(default_factory=list)
    notice: Optional[Notice] = None

    @property
    def ok(self) -> bool:
        return self.notice is None or self.notice.level != "error"


ALL_STEPS_REQUIRED = Notice.error(
    "All Steps Required",
    "Please complete all steps before getting your results.",
)


# =============================================================================
# Generator
# =============================================================================


class MockResultGenerator:
    """Synthesizes placeholder listings for a complete selection."""

    def __init__(
        self,
        supported_country: str = "United States",
        delay_seconds: float = 3.0,
        default_count: int = 20,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.supported_country = supported_country
        self.delay_seconds = delay_seconds
        self.default_count = default_count
        self._rng = rng or random.Random()

    def _maybe(self, key: str, value: str) -> Optional[str]:
        return value if self._rng.random() < FIELD_PRESENCE[key] else None

    def _business_name(self, category: Category) -> str:
        prefix = self._rng.choice(NAME_PREFIXES)
        suffix = self._rng.choice(NAME_SUFFIXES.get(category, ["Place"]))
        return f"{prefix} {suffix}"

    def _phone(self) -> str:
        return (
            f"+1-{self._rng.randint(100, 999)}"
            f"-{self._rng.randint(100, 999)}"
            f"-{self._rng.randint(1000, 9999)}"
        )

    def _rating(self) -> float:
        rating = MIN_RATING + self._rng.random() * RATING_SPAN
        # float rounding can land exactly on the open upper bound
        return min(rating, MAX_RATING - 1e-9)

    def _record(self, index: int, category: Category, country: str, city: str) -> BusinessRecord:
        slug = f"business{index + 1}"
        menu_link = None
        if category == Category.EAT:
            menu_link = self._maybe("menu_link", f"https://menu.{slug}.com")

        return BusinessRecord(
            name=self._business_name(category),
            address=(
                f"{self._rng.randint(1, 9999)} {self._rng.choice(STREETS)}, {city}, {country}"
            ),
            map_reference=f"https://maps.google.com/?q={quote(f'{city}, {country}', safe='')}",
            social_links=SocialLinks(
                facebook=self._maybe("facebook", f"https://facebook.com/{slug}"),
                instagram=self._maybe("instagram", f"https://instagram.com/{slug}"),
                twitter=self._maybe("twitter", f"https://twitter.com/{slug}"),
            ),
            contact=ContactDetails(
                phone=self._phone(),
                email=self._maybe("email", f"info@{slug}.com"),
                website=self._maybe("website", f"https://{slug}.com"),
                menu_link=menu_link,
            ),
            images=[PLACEHOLDER_IMAGES[index % len(PLACEHOLDER_IMAGES)]],
            rating=self._rating(),
            review_count=self._rng.randint(50, 849),
            source=self._rng.choice(list(ReviewSource)),
        )

    def generate(
        self,
        category: Category,
        country: str,
        city: str,
        count: int,
    ) -> list[BusinessRecord]:
        """Produce exactly ``count`` synthetic listings. No validation, no delay."""
        return [self._record(i, category, country, city) for i in range(count)]

    def validate(self, state: SelectionState) -> Optional[Notice]:
        """Return the notice that blocks this search, or None when it may run."""
        if not state.is_complete:
            return ALL_STEPS_REQUIRED
        if state.country != self.supported_country:
            return Notice.error(
                "USA Cities Only",
                f"Currently only supporting cities in the {self.supported_country}.",
            )
        return None

    async def search(self, state: SelectionState) -> SearchOutcome:
        """
        Run a guide search for a selection.

        Validation problems come back as an error notice on the outcome;
        they are never raised.
        """
        notice = self.validate(state)
        if notice is not None:
            logger.info(
                "guide_search_rejected",
                reason=notice.title,
                country=state.country,
                city=state.city,
            )
            record_rejected_search(state.category)
            return SearchOutcome(notice=notice)

        count = state.result_count or self.default_count

        with track_guide_search(state.category):
            await asyncio.sleep(self.delay_seconds)
            records = self.generate(state.category, state.country, state.city, count)

        logger.info(
            "guide_search_completed",
            category=state.category.value,
            city=state.city,
            count=len(records),
        )
        category_word = state.category.value.lower()
        return SearchOutcome(
            records=records,
            notice=Notice.success(
                "Success!",
                f"Found {len(records)} {category_word} businesses in {state.city} "
                "with 3+ star ratings",
            ),
        )
