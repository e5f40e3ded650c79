"""Member preference endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user
from src.api.models import ErrorResponse, PreferencesUpdate
from src.core.container import DependencyContainer, get_container
from src.models.schemas import CurrentUser, UserPreferences

router = APIRouter(
    prefix="/preferences",
    tags=["Preferences"],
    responses={401: {"model": ErrorResponse, "description": "Sign-in required"}},
)


@router.get("", response_model=UserPreferences, summary="Get my preferences")
async def get_preferences(
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> UserPreferences:
    return await container.preferences.get_preferences(user)


@router.put("", response_model=UserPreferences, summary="Update my preferences")
async def update_preferences(
    request: PreferencesUpdate,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> UserPreferences:
    return await container.preferences.save_preferences(user, request.model_dump(exclude_none=True))
