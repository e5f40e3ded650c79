"""Guide flow endpoints.

A client creates a guide session, walks the four selection stages (or types
a city), picks a result count and runs the search. Results stay on the
session until the selection changes and can be exported as CSV or rendered
as HTML.

Validation problems come back as notices; search rejections are returned
with status 200 and an error-level notice.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import HTMLResponse

from src.api.dependencies import get_session_store
from src.api.models import (
    CitySearchRequest,
    ErrorResponse,
    FeedEntryResponse,
    NoticeResponse,
    ResultCountRequest,
    SearchResponse,
    SelectionView,
    SelectStageRequest,
    SessionResponse,
    StageName,
    StageOptionsResponse,
)
from src.core.exceptions import ValidationFailure
from src.guide.export import CSV_MEDIA_TYPE, csv_filename, export_csv
from src.guide.presentation import build_result_feed, render_results_html, tagline
from src.guide.selection import RESULT_COUNT_OPTIONS, Stage, is_stage_enabled, stage_options
from src.guide.session import GuideSession, SessionStore
from src.models.schemas import BusinessRecord, Category, Notice

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/guide", tags=["Guide"])

NO_RESULTS = Notice.error("No Results", "Run a search before exporting results.")


def _session_response(session: GuideSession) -> SessionResponse:
    state = session.state
    return SessionResponse(
        id=session.id,
        selection=SelectionView(**state.as_dict()),
        loading=session.loading,
        result_count=len(session.records),
        enabled_stages=[stage.label for stage in Stage if is_stage_enabled(state, stage)],
        result_count_options=list(RESULT_COUNT_OPTIONS) if state.city else [],
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


def _feed(records: list[BusinessRecord]) -> list[FeedEntryResponse]:
    return [
        FeedEntryResponse(kind=entry.kind, position=entry.position, record=entry.record)
        for entry in build_result_feed(records)
    ]


def _require_results(session: GuideSession) -> None:
    if not session.records or session.state.category is None:
        raise ValidationFailure(NO_RESULTS, {"session_id": session.id})


@router.get("/tagline", summary="Headline copy for a category")
async def get_tagline(category: Optional[Category] = Query(None)) -> dict:
    return {"tagline": tagline(category)}


@router.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=201,
    summary="Start a guide session",
)
async def create_session(store: SessionStore = Depends(get_session_store)) -> SessionResponse:
    return _session_response(store.create())


@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    summary="Get a guide session",
    responses={404: {"model": ErrorResponse, "description": "Session not found"}},
)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    return _session_response(store.get(session_id))


@router.delete("/sessions/{session_id}", status_code=204, summary="End a guide session")
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    store.delete(session_id)
    return Response(status_code=204)


@router.get(
    "/sessions/{session_id}/options/{stage}",
    response_model=StageOptionsResponse,
    summary="Options for one stage",
)
async def get_stage_options(
    session_id: str,
    stage: StageName,
    store: SessionStore = Depends(get_session_store),
) -> StageOptionsResponse:
    session = store.get(session_id)
    target = Stage[stage.upper()]
    return StageOptionsResponse(
        stage=stage,
        enabled=is_stage_enabled(session.state, target),
        options=stage_options(session.state, target),
    )


@router.put(
    "/sessions/{session_id}/selection/{stage}",
    response_model=SessionResponse,
    summary="Set one stage",
    description="Setting a stage clears every later stage, the result count and the results.",
    responses={400: {"model": ErrorResponse, "description": "Stage disabled or unknown value"}},
)
async def select_stage(
    session_id: str,
    stage: StageName,
    request: SelectStageRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    session = store.get(session_id)
    session.select(Stage[stage.upper()], request.value)
    return _session_response(session)


@router.put(
    "/sessions/{session_id}/result-count",
    response_model=SessionResponse,
    summary="Choose how many results to generate",
    responses={400: {"model": ErrorResponse, "description": "No city selected or count out of range"}},
)
async def choose_result_count(
    session_id: str,
    request: ResultCountRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    session = store.get(session_id)
    session.set_result_count(request.count)
    return _session_response(session)


@router.post(
    "/sessions/{session_id}/city-search",
    response_model=NoticeResponse,
    summary="Resolve a typed city name into the selection",
)
async def city_search(
    session_id: str,
    request: CitySearchRequest,
    store: SessionStore = Depends(get_session_store),
) -> NoticeResponse:
    session = store.get(session_id)
    notice = session.search_city(request.text, scoped=request.scoped)
    return NoticeResponse(notice=notice, session=_session_response(session))


@router.post(
    "/sessions/{session_id}/search",
    response_model=SearchResponse,
    summary="Run the guide search",
    description=(
        "Generates listings for the current selection after a fixed delay. "
        "Incomplete selections and unsupported countries are rejected with a notice."
    ),
)
async def run_search(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SearchResponse:
    session = store.get(session_id)
    outcome = await session.run_search()
    return SearchResponse(
        notice=outcome.notice,
        records=outcome.records if outcome.ok else [],
        feed=_feed(outcome.records) if outcome.ok else [],
        tagline=tagline(session.state.category),
    )


@router.get(
    "/sessions/{session_id}/results",
    response_model=SearchResponse,
    summary="Current results of a session",
)
async def get_results(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SearchResponse:
    session = store.get(session_id)
    return SearchResponse(
        records=session.records,
        feed=_feed(session.records),
        tagline=tagline(session.state.category),
    )


@router.get(
    "/sessions/{session_id}/results.csv",
    summary="Download results as CSV",
    response_class=Response,
    responses={
        200: {"content": {CSV_MEDIA_TYPE: {}}, "description": "CSV attachment"},
        400: {"model": ErrorResponse, "description": "No results to export"},
    },
)
async def download_csv(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    session = store.get(session_id)
    _require_results(session)

    category = session.state.category
    return Response(
        content=export_csv(session.records, category),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{csv_filename(category)}"'},
    )


@router.get(
    "/sessions/{session_id}/results.html",
    response_class=HTMLResponse,
    summary="Results rendered as HTML",
)
async def results_html(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> HTMLResponse:
    session = store.get(session_id)
    _require_results(session)

    state = session.state
    return HTMLResponse(render_results_html(session.records, state.city, state.country, state.category))
