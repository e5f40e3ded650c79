"""Unit tests for the free-text city resolver."""

from src.guide.city_resolver import CITY_NOT_FOUND, city_found_notice, resolve_city


def test_exact_match_is_case_insensitive():
    match = resolve_city("  austin ")
    assert match.city == "Austin"
    assert match.country == "United States"
    assert match.exact


def test_substring_match():
    match = resolve_city("Pari")
    assert match.city == "Paris"
    assert match.country == "France"
    assert not match.exact


def test_exact_match_beats_earlier_substring():
    cities = [
        ("Europe", "Nowhere", "Romeville"),
        ("Europe", "Italy", "Rome"),
    ]
    match = resolve_city("rome", cities)
    assert match.city == "Rome"
    assert match.exact


def test_first_hit_in_taxonomy_order():
    match = resolve_city("Hamilton")
    assert match.country == "Canada"


def test_scope_restricts_country():
    match = resolve_city("Hamilton", scope="New Zealand")
    assert match.country == "New Zealand"
    assert resolve_city("Paris", scope="United States") is None


def test_no_match():
    assert resolve_city("Gotham") is None
    assert resolve_city("   ") is None


def test_notices():
    match = resolve_city("Boston")
    notice = city_found_notice(match)
    assert notice.level == "success"
    assert notice.description == "Selected Boston"
    assert CITY_NOT_FOUND.title == "City Not Found"
