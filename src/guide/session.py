"""
Per-visitor guide sessions.

A GuideSession threads one visitor through the guide: it holds the selection
state, the visible result batch and the loading flag, and it guards the
batch with a RequestSequencer so that a slow search can never overwrite the
results of a newer selection.

Sessions live in an in-memory SessionStore created at application start and
cleared at shutdown.
"""

from datetime import datetime, timezone
from typing import Optional, Union
from uuid import uuid4

import structlog

from src.core.exceptions import NotFoundError
from src.core.sequencing import RequestSequencer
from src.guide import selection
from src.guide.city_resolver import CITY_NOT_FOUND, city_found_notice, resolve_city
from src.guide.generator import MockResultGenerator, SearchOutcome
from src.guide.selection import SelectionState, Stage
from src.models.schemas import BusinessRecord, Category, Notice

logger = structlog.get_logger(__name__)

SEARCH_IN_PROGRESS = Notice.info(
    "Search In Progress",
    "Your results are on the way. Please wait for the current search to finish.",
)

RESULTS_DISCARDED = Notice.info(
    "Selection Changed",
    "Your selection changed while searching, so those results were discarded.",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GuideSession:
    """Selection state, visible results and loading flag for one visitor."""

    def __init__(self, generator: MockResultGenerator, session_id: Optional[str] = None) -> None:
        self.id = session_id or str(uuid4())
        self.state = SelectionState()
        self.records: list[BusinessRecord] = []
        self.created_at = _utcnow()
        self.updated_at = self.created_at
        self._generator = generator
        self._sequencer = RequestSequencer()
        self._in_flight: Optional[int] = None

    @property
    def loading(self) -> bool:
        """True while the latest search has not come back yet."""
        return self._in_flight is not None and self._sequencer.is_current(self._in_flight)

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def _reset_results(self) -> None:
        self._sequencer.invalidate()
        self._in_flight = None
        self.records = []
        self._touch()

    # -----------------------------------------------------------------
    # Selection
    # -----------------------------------------------------------------

    def select(self, stage: Stage, value: Optional[Union[Category, str]]) -> SelectionState:
        """
        Change one stage. Later stages and any visible results are cleared.

        Raises:
            SelectionError: If the stage is disabled or the value is unknown.
        """
        self.state = selection.select(self.state, stage, value)
        self._reset_results()
        logger.debug("guide_stage_selected", session_id=self.id, stage=stage.label, value=str(value))
        return self.state

    def set_result_count(self, count: int) -> SelectionState:
        self.state = selection.set_result_count(self.state, count)
        self._reset_results()
        return self.state

    def search_city(self, text: str, scoped: bool = False) -> Notice:
        """
        Resolve typed input and promote the match into the selection.

        Args:
            text: Free-text city name.
            scoped: Restrict matching to the selected country.

        Returns:
            "City Found" on a match, "City Not Found" otherwise.

        Raises:
            SelectionError: If no country is selected yet.
        """
        selection.require_enabled(self.state, Stage.CITY)
        scope = self.state.country if scoped else None
        match = resolve_city(text, scope=scope)
        if match is None:
            logger.info("city_not_found", session_id=self.id, term=text)
            return CITY_NOT_FOUND

        self.state = selection.promote_city(self.state, match.city)
        self._reset_results()
        logger.info("city_promoted", session_id=self.id, city=match.city, exact=match.exact)
        return city_found_notice(match)

    def clear_results(self) -> None:
        self._reset_results()

    # -----------------------------------------------------------------
    # Search
    # -----------------------------------------------------------------

    async def run_search(self) -> SearchOutcome:
        """
        Run a search for the current selection.

        Only one search runs at a time per session. If the selection changes
        while the search is in flight, its records are dropped on arrival.
        """
        if self.loading:
            return SearchOutcome(notice=SEARCH_IN_PROGRESS)

        token = self._sequencer.issue()
        self._in_flight = token
        snapshot = self.state
        self.records = []

        try:
            outcome = await self._generator.search(snapshot)
        finally:
            if self._in_flight == token:
                self._in_flight = None

        if not self._sequencer.is_current(token):
            logger.info("stale_search_discarded", session_id=self.id, token=token)
            return SearchOutcome(notice=RESULTS_DISCARDED)

        if outcome.ok:
            self.records = outcome.records
        self._touch()
        return outcome

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "selection": self.state.as_dict(),
            "loading": self.loading,
            "result_count": len(self.records),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class SessionStore:
    """In-memory registry of guide sessions keyed by id."""

    def __init__(self, generator: MockResultGenerator) -> None:
        self._generator = generator
        self._sessions: dict[str, GuideSession] = {}

    def create(self) -> GuideSession:
        session = GuideSession(self._generator)
        self._sessions[session.id] = session
        logger.info("guide_session_created", session_id=session.id)
        return session

    def get(self, session_id: str) -> GuideSession:
        """
        Raises:
            NotFoundError: If no session has this id.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("guide_session", session_id)
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise NotFoundError("guide_session", session_id)
        logger.info("guide_session_deleted", session_id=session_id)

    def clear(self) -> None:
        count = len(self._sessions)
        self._sessions.clear()
        logger.info("guide_sessions_cleared", count=count)

    def __len__(self) -> int:
        return len(self._sessions)
