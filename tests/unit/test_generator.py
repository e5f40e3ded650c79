"""Unit tests for the mock result generator."""

import random
from dataclasses import replace
from unittest.mock import AsyncMock, patch

import pytest

from src.guide.generator import ALL_STEPS_REQUIRED, MockResultGenerator
from src.guide.selection import SelectionState
from src.models.schemas import Category, ReviewSource


class TestGenerate:
    """Record synthesis without validation or delay."""

    def test_produces_exact_count(self, generator):
        records = generator.generate(Category.EAT, "United States", "Austin", 20)
        assert len(records) == 20

    def test_record_invariants(self, generator):
        for record in generator.generate(Category.PLAY, "United States", "Denver", 50):
            assert 3.0 <= record.rating < 5.0
            assert 50 <= record.review_count <= 849
            assert record.source in ReviewSource
            assert record.address.endswith("Denver, United States")
            assert record.map_reference == (
                "https://maps.google.com/?q=Denver%2C%20United%20States"
            )
            assert len(record.images) == 1
            assert record.contact.phone.startswith("+1-")

    def test_menu_link_only_for_eat(self, generator):
        drinks = generator.generate(Category.DRINK, "United States", "Austin", 30)
        assert all(record.contact.menu_link is None for record in drinks)

    def test_names_match_category(self, generator):
        for record in generator.generate(Category.STAY, "United States", "Austin", 10):
            assert record.name.split()[-1] in {"Hotel", "Inn", "Resort", "Lodge", "Suites"}

    def test_seeded_generators_agree(self):
        first = MockResultGenerator(delay_seconds=0, rng=random.Random(7))
        second = MockResultGenerator(delay_seconds=0, rng=random.Random(7))
        assert first.generate(Category.EAT, "United States", "Austin", 5) == second.generate(
            Category.EAT, "United States", "Austin", 5
        )


class TestSearch:
    """Validation and the search entry point."""

    @pytest.mark.asyncio
    async def test_complete_selection_succeeds(self, generator, complete_state):
        outcome = await generator.search(complete_state)

        assert outcome.ok
        assert len(outcome.records) == 5
        assert outcome.notice.title == "Success!"
        assert outcome.notice.description == (
            "Found 5 eat businesses in Austin with 3+ star ratings"
        )

    @pytest.mark.asyncio
    async def test_other_country_is_rejected(self, generator, complete_state):
        state = replace(complete_state, country="Canada", city="Toronto")

        outcome = await generator.search(state)

        assert not outcome.ok
        assert outcome.records == []
        assert outcome.notice.title == "USA Cities Only"

    @pytest.mark.asyncio
    async def test_incomplete_selection_is_rejected(self, generator):
        state = SelectionState(category=Category.EAT, region="North America")

        outcome = await generator.search(state)

        assert outcome.notice == ALL_STEPS_REQUIRED
        assert outcome.records == []

    @pytest.mark.asyncio
    async def test_default_count_when_unset(self, complete_state):
        generator = MockResultGenerator(delay_seconds=0, default_count=3)
        state = replace(complete_state, result_count=None, ready=False)

        outcome = await generator.search(state)

        assert len(outcome.records) == 3

    @pytest.mark.asyncio
    async def test_applies_delay(self, complete_state):
        generator = MockResultGenerator(delay_seconds=3.0)
        with patch("src.guide.generator.asyncio.sleep", new=AsyncMock()) as sleep:
            await generator.search(complete_state)
        sleep.assert_awaited_once_with(3.0)

    @pytest.mark.asyncio
    async def test_rejection_skips_delay(self, complete_state):
        generator = MockResultGenerator(delay_seconds=3.0)
        state = replace(complete_state, country="Mexico")
        with patch("src.guide.generator.asyncio.sleep", new=AsyncMock()) as sleep:
            await generator.search(state)
        sleep.assert_not_awaited()
