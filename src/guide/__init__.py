"""
The guide flow.

- taxonomy: static region -> country -> city data
- selection: the four-stage selection reducer
- city_resolver: free-text city lookup
- generator: mock result generator
- presentation / export: result feed, HTML rendering and CSV export
- session: per-visitor sessions with stale-result protection
"""

from src.guide.city_resolver import CityMatch, resolve_city
from src.guide.export import csv_filename, export_csv
from src.guide.generator import MockResultGenerator, SearchOutcome
from src.guide.presentation import build_result_feed, render_results_html, tagline
from src.guide.selection import (
    RESULT_COUNT_OPTIONS,
    SelectionState,
    Stage,
    promote_city,
    select,
    set_result_count,
)
from src.guide.session import GuideSession, SessionStore

__all__ = [
    "CityMatch",
    "resolve_city",
    "csv_filename",
    "export_csv",
    "MockResultGenerator",
    "SearchOutcome",
    "build_result_feed",
    "render_results_html",
    "tagline",
    "RESULT_COUNT_OPTIONS",
    "SelectionState",
    "Stage",
    "promote_city",
    "select",
    "set_result_count",
    "GuideSession",
    "SessionStore",
]
