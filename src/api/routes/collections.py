"""Collection endpoints.

Every route here needs a signed-in user; unauthenticated calls get a 401
carrying ``redirect_to`` so the client can send the user to sign in. Share
links are resolved by a separate, unauthenticated router.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Response

from src.api.dependencies import get_current_user, get_session_store
from src.api.models import (
    CollectionCreate,
    CollectionListResponse,
    CollectionResponse,
    ErrorResponse,
    SavedListResponse,
    SaveBusinessRequest,
    SaveResponse,
    SharedCollectionResponse,
    ShareRequest,
    ShareResponse,
)
from src.core.container import DependencyContainer, get_container
from src.core.exceptions import ValidationFailure
from src.guide.session import SessionStore
from src.models.schemas import Collection, CurrentUser, Notice

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/collections",
    tags=["Collections"],
    responses={401: {"model": ErrorResponse, "description": "Sign-in required"}},
)
shared_router = APIRouter(prefix="/shared", tags=["Collections"])

RESULT_NOT_FOUND = Notice.error("Result Not Found", "That result is no longer available.")


@router.get("", response_model=CollectionListResponse, summary="List my collections")
async def list_collections(
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> CollectionListResponse:
    summaries = await container.collections.list_collections(user)
    return CollectionListResponse(
        collections=[
            CollectionResponse(collection=s.collection, saved_count=s.saved_count)
            for s in summaries
        ],
        total=len(summaries),
    )


@router.post("", response_model=Collection, status_code=201, summary="Create a collection")
async def create_collection(
    request: CollectionCreate,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> Collection:
    return await container.collections.create_collection(
        user, request.name, request.description, request.is_public
    )


@router.delete(
    "/{collection_id}",
    status_code=204,
    summary="Delete a collection",
    description="Deletes the collection together with everything saved in it. Irreversible.",
)
async def delete_collection(
    collection_id: str,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> Response:
    await container.collections.delete_collection(user, collection_id)
    return Response(status_code=204)


@router.get("/saved", response_model=SavedListResponse, summary="List saved listings")
async def list_saved(
    collection_id: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> SavedListResponse:
    saved = await container.collections.list_saved(user, collection_id, limit)
    return SavedListResponse(saved=saved, total=len(saved))


@router.post(
    "/saved",
    response_model=SaveResponse,
    summary="Save a listing",
    description=(
        "Saves a listing into an existing collection, or into a new one when "
        "new_collection_name is given. With neither, nothing is saved and a "
        "notice asks the user to choose a collection."
    ),
)
async def save_business(
    request: SaveBusinessRequest,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
    store: SessionStore = Depends(get_session_store),
) -> SaveResponse:
    if request.record is not None:
        record = request.record
        city, country, category = request.city, request.country, request.category
    else:
        session = store.get(request.session_id)
        if request.position > len(session.records):
            raise ValidationFailure(RESULT_NOT_FOUND, {"position": request.position})
        record = session.records[request.position - 1]
        state = session.state
        city, country, category = state.city, state.country, state.category

    service = container.collections
    if request.new_collection_name:
        outcome = await service.save_to_new_collection(
            user, request.new_collection_name, record, city, country, category
        )
    else:
        outcome = await service.save_business(
            user, record, request.collection_id, city, country, category
        )
    return SaveResponse(saved=outcome.saved, notice=outcome.notice)


@router.delete("/saved/{saved_id}", status_code=204, summary="Remove a saved listing")
async def delete_saved(
    saved_id: str,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> Response:
    await container.collections.delete_saved(user, saved_id)
    return Response(status_code=204)


@router.post(
    "/{collection_id}/share",
    response_model=ShareResponse,
    status_code=201,
    summary="Create a share link",
)
async def share_collection(
    collection_id: str,
    request: ShareRequest,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> ShareResponse:
    share, url = await container.collections.share_collection(
        user, collection_id, request.expires_in_days
    )
    return ShareResponse(token=share.share_token, url=url, expires_at=share.expires_at)


@shared_router.get(
    "/{token}",
    response_model=SharedCollectionResponse,
    summary="Open a shared collection",
    description="Read-only and unauthenticated. Unknown and expired tokens both return 404.",
    responses={404: {"model": ErrorResponse, "description": "Unknown or expired link"}},
)
async def open_shared_collection(
    token: str,
    container: DependencyContainer = Depends(get_container),
) -> SharedCollectionResponse:
    shared = await container.collections.resolve_share(token)
    return SharedCollectionResponse(
        collection=shared.collection,
        saved=shared.saved,
        expires_at=shared.expires_at,
    )
