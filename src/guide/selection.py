"""
Guide selection state machine.

Four ordered stages (category, region, country, city) each gated on the
previous one. Transitions are pure functions over an immutable
``SelectionState``:

    state = SelectionState()
    state = select(state, Stage.CATEGORY, "Eat")
    state = select(state, Stage.REGION, "North America")
    ...
    state = set_result_count(state, 10)   # state.ready is now True

Setting a stage always clears every later stage, the result count and the
ready flag, even when the new value equals the old one. There is no undo.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional, Union

from src.core.exceptions import SelectionError
from src.guide import taxonomy
from src.models.schemas import Category, Notice

RESULT_COUNT_OPTIONS = (1, 5, 10, 20)


class Stage(IntEnum):
    """Selection stages in the order they must be completed."""
    CATEGORY = 1
    REGION = 2
    COUNTRY = 3
    CITY = 4

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class SelectionState:
    """The (category, region, country, city) tuple plus the chosen result count."""

    category: Optional[Category] = None
    region: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    result_count: Optional[int] = None
    ready: bool = False

    def value(self, stage: Stage) -> Optional[Union[Category, str]]:
        return getattr(self, stage.label)

    @property
    def is_complete(self) -> bool:
        """All four stages are non-empty."""
        return all(self.value(stage) for stage in Stage)

    def as_dict(self) -> dict:
        return {
            "category": self.category.value if self.category else None,
            "region": self.region,
            "country": self.country,
            "city": self.city,
            "result_count": self.result_count,
            "ready": self.ready,
        }


def is_stage_enabled(state: SelectionState, stage: Stage) -> bool:
    """A stage accepts input only once its predecessor is chosen."""
    if stage == Stage.CATEGORY:
        return True
    return bool(state.value(Stage(stage - 1)))


def stage_options(state: SelectionState, stage: Stage) -> list[str]:
    """Options offered for a stage; empty while the stage is disabled."""
    if not is_stage_enabled(state, stage):
        return []
    if stage == Stage.CATEGORY:
        return [category.value for category in Category]
    if stage == Stage.REGION:
        return taxonomy.get_regions()
    if stage == Stage.COUNTRY:
        return taxonomy.get_countries(state.region)
    return taxonomy.get_cities(state.region, state.country)


def missing_stages(state: SelectionState) -> list[Stage]:
    """Stages that are still empty."""
    return [stage for stage in Stage if not state.value(stage)]


def _cleared_after(stage: Stage) -> dict:
    cleared = {later.label: None for later in Stage if later > stage}
    cleared["result_count"] = None
    cleared["ready"] = False
    return cleared


def require_enabled(state: SelectionState, stage: Stage) -> None:
    """Raise the "Step Not Available" SelectionError for a disabled stage."""
    if not is_stage_enabled(state, stage):
        previous = Stage(stage - 1).label
        raise SelectionError(
            Notice.error("Step Not Available", f"Please select a {previous} first."),
            {"stage": stage.label},
        )


def select(
    state: SelectionState,
    stage: Stage,
    value: Optional[Union[Category, str]],
) -> SelectionState:
    """
    Set one stage and reset everything downstream of it.

    Args:
        state: Current selection.
        stage: Stage being changed.
        value: New value. None or "" clears the stage.

    Returns:
        The new selection state.

    Raises:
        SelectionError: If the stage is still disabled or the value is not
            one of the stage's options.
    """
    require_enabled(state, stage)

    if value in (None, ""):
        value = None
    elif stage == Stage.CATEGORY:
        try:
            value = Category(value)
        except ValueError:
            raise SelectionError(
                Notice.error("Unknown Category", f"'{value}' is not a guide category."),
                {"stage": stage.label, "value": value},
            ) from None
    elif value not in stage_options(state, stage):
        raise SelectionError(
            Notice.error("Unknown Option", f"'{value}' is not available for this {stage.label}."),
            {"stage": stage.label, "value": value},
        )

    return replace(state, **{stage.label: value}, **_cleared_after(stage))


def promote_city(state: SelectionState, city: str) -> SelectionState:
    """
    Set the city directly, as the free-text resolver does.

    The city stage must already be enabled. The chosen region and country
    are left as they are and not cross-checked against the city.

    Raises:
        SelectionError: If no country is selected yet.
    """
    require_enabled(state, Stage.CITY)
    return replace(state, city=city, **_cleared_after(Stage.CITY))


def set_result_count(state: SelectionState, count: int) -> SelectionState:
    """
    Pick how many results to generate and mark the selection ready to search.

    Raises:
        SelectionError: If no city is selected or the count is not one of
            RESULT_COUNT_OPTIONS.
    """
    if not state.city:
        raise SelectionError(
            Notice.error("Step Not Available", "Please select a city first."),
            {"stage": "result_count"},
        )
    if count not in RESULT_COUNT_OPTIONS:
        choices = ", ".join(str(option) for option in RESULT_COUNT_OPTIONS)
        raise SelectionError(
            Notice.error("Invalid Result Count", f"Choose {choices} results."),
            {"value": count},
        )
    return replace(state, result_count=count, ready=True)
