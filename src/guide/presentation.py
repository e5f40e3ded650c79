"""
Result presentation.

Turns a result batch into a feed (listings plus one sign-up promo after the
second listing) and renders that feed to read-only HTML with Jinja2.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.models.schemas import BusinessRecord, Category

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

PROMO_POSITION = 2

_TAGLINE_SUBJECT = {
    Category.EAT: "restaurants",
    Category.DRINK: "bars and cafes",
    Category.STAY: "hotels and accommodations",
    Category.PLAY: "entertainment venues",
}

_STAR_FILLED = "&#9733;"
_STAR_EMPTY = "&#9734;"


@dataclass(frozen=True)
class FeedEntry:
    """One slot in the result feed."""

    kind: Literal["business", "promo"]
    record: Optional[BusinessRecord] = None
    position: Optional[int] = None

    def as_dict(self) -> dict:
        if self.kind == "promo":
            return {"kind": "promo"}
        return {"kind": "business", "position": self.position, "record": self.record.to_payload()}


def build_result_feed(records: Sequence[BusinessRecord]) -> list[FeedEntry]:
    """
    Lay out a result batch for display.

    A promo entry follows the second listing whenever there is more than one
    listing. Listing positions are 1-based.
    """
    feed: list[FeedEntry] = []
    for index, record in enumerate(records):
        feed.append(FeedEntry(kind="business", record=record, position=index + 1))
        if index + 1 == PROMO_POSITION and len(records) > 1:
            feed.append(FeedEntry(kind="promo"))
    return feed


def tagline(category: Optional[Category]) -> str:
    """Headline copy shown above the selector for a category."""
    subject = _TAGLINE_SUBJECT.get(category, "places")
    return (
        f"Discover the TOP 20 {subject} in the city selected. "
        "All business listing ratings are based on Google Reviews, Yelp and Trip Advisor."
    )


def format_star_rating(rating: float) -> str:
    """Render a rating as five HTML star entities."""
    filled = min(5, max(0, round(rating)))
    return (_STAR_FILLED * filled) + (_STAR_EMPTY * (5 - filled))


class ResultRenderer:
    """Renders result feeds with the ``results.html`` template."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(enabled_extensions=["html"]),
        )
        self._env.filters["stars"] = format_star_rating
        self._results_tpl = self._env.get_template("results.html")

    def render(
        self,
        records: Sequence[BusinessRecord],
        city: str,
        country: str,
        category: Category,
    ) -> str:
        return self._results_tpl.render(
            feed=build_result_feed(records),
            city=city,
            country=country,
            category=category.value,
            category_word=category.value.lower(),
            tagline=tagline(category),
            count=len(records),
        )


_renderer: Optional[ResultRenderer] = None


def render_results_html(
    records: Sequence[BusinessRecord],
    city: str,
    country: str,
    category: Category,
) -> str:
    """Render a result batch to an HTML fragment using a shared renderer."""
    global _renderer
    if _renderer is None:
        _renderer = ResultRenderer()
    return _renderer.render(records, city, country, category)
