"""Unit tests for the guide selection state machine."""

import pytest

from src.core.exceptions import SelectionError
from src.guide.selection import (
    RESULT_COUNT_OPTIONS,
    SelectionState,
    Stage,
    is_stage_enabled,
    missing_stages,
    promote_city,
    select,
    set_result_count,
    stage_options,
)
from src.models.schemas import Category


def _filled(count: int = 10) -> SelectionState:
    state = SelectionState()
    state = select(state, Stage.CATEGORY, "Eat")
    state = select(state, Stage.REGION, "North America")
    state = select(state, Stage.COUNTRY, "United States")
    state = select(state, Stage.CITY, "Austin")
    return set_result_count(state, count)


class TestGating:
    """Each stage opens only once its predecessor is chosen."""

    def test_initial_state_only_category_enabled(self):
        state = SelectionState()
        enabled = [stage for stage in Stage if is_stage_enabled(state, stage)]
        assert enabled == [Stage.CATEGORY]

    def test_disabled_stage_has_no_options(self):
        assert stage_options(SelectionState(), Stage.REGION) == []

    def test_category_options(self):
        assert stage_options(SelectionState(), Stage.CATEGORY) == ["Eat", "Stay", "Drink", "Play"]

    def test_selecting_disabled_stage_raises(self):
        with pytest.raises(SelectionError) as exc_info:
            select(SelectionState(), Stage.COUNTRY, "United States")
        assert exc_info.value.notice.title == "Step Not Available"

    def test_country_options_follow_region(self):
        state = select(select(SelectionState(), Stage.CATEGORY, "Stay"), Stage.REGION, "Oceania")
        assert stage_options(state, Stage.COUNTRY) == ["Australia", "New Zealand"]


class TestCascade:
    """Setting a stage clears everything downstream."""

    def test_full_walk_is_ready(self):
        state = _filled()
        assert state.is_complete
        assert state.ready
        assert state.category == Category.EAT
        assert state.result_count == 10

    def test_reselecting_same_category_clears_downstream(self):
        state = select(_filled(), Stage.CATEGORY, "Eat")
        assert state.category == Category.EAT
        assert state.region is None
        assert state.country is None
        assert state.city is None
        assert state.result_count is None
        assert state.ready is False

    def test_changing_country_keeps_upstream(self):
        state = select(_filled(), Stage.COUNTRY, "Canada")
        assert state.region == "North America"
        assert state.country == "Canada"
        assert state.city is None
        assert not state.ready

    @pytest.mark.parametrize("stage", list(Stage))
    def test_every_later_stage_is_cleared(self, stage):
        value = _filled().value(stage)
        state = select(_filled(), stage, value)
        for later in Stage:
            if later > stage:
                assert state.value(later) is None
        assert state.result_count is None

    def test_empty_value_clears_stage(self):
        state = select(_filled(), Stage.REGION, "")
        assert state.region is None
        assert missing_stages(state) == [Stage.REGION, Stage.COUNTRY, Stage.CITY]

    def test_unknown_option_raises(self):
        state = select(SelectionState(), Stage.CATEGORY, "Eat")
        with pytest.raises(SelectionError):
            select(state, Stage.REGION, "Atlantis")

    def test_unknown_category_raises(self):
        with pytest.raises(SelectionError) as exc_info:
            select(SelectionState(), Stage.CATEGORY, "Shop")
        assert exc_info.value.notice.title == "Unknown Category"
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__


class TestResultCount:
    """Result count gating and bounds."""

    def test_requires_city(self):
        state = select(SelectionState(), Stage.CATEGORY, "Eat")
        with pytest.raises(SelectionError):
            set_result_count(state, 5)

    @pytest.mark.parametrize("count", [0, 3, 21, 50])
    def test_unoffered_count_rejected(self, count):
        state = select(_filled(), Stage.CITY, "Austin")
        with pytest.raises(SelectionError) as exc_info:
            set_result_count(state, count)
        assert exc_info.value.notice.title == "Invalid Result Count"

    @pytest.mark.parametrize("count", RESULT_COUNT_OPTIONS)
    def test_offered_counts_accepted(self, count):
        assert _filled(count).result_count == count


class TestPromoteCity:
    """Typed city input bypasses the city dropdown."""

    def test_keeps_region_and_country(self):
        state = select(select(SelectionState(), Stage.CATEGORY, "Eat"), Stage.REGION, "Asia")
        state = select(state, Stage.COUNTRY, "Japan")
        state = promote_city(state, "Paris")
        assert state.region == "Asia"
        assert state.country == "Japan"
        assert state.city == "Paris"

    @pytest.mark.parametrize(
        "stages",
        [
            [],
            [(Stage.CATEGORY, "Eat")],
            [(Stage.CATEGORY, "Eat"), (Stage.REGION, "Europe")],
        ],
    )
    def test_refused_before_country_chosen(self, stages):
        state = SelectionState()
        for stage, value in stages:
            state = select(state, stage, value)

        with pytest.raises(SelectionError) as exc_info:
            promote_city(state, "Paris")

        assert exc_info.value.notice.title == "Step Not Available"
        assert state.city is None

    def test_resets_result_count(self):
        state = promote_city(_filled(), "Boston")
        assert state.result_count is None
        assert not state.ready
