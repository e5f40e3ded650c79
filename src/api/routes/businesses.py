"""Owner endpoints for registering and editing a business listing."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user
from src.api.models import BusinessProfileRequest, ErrorResponse
from src.core.container import DependencyContainer, get_container
from src.core.exceptions import NotFoundError
from src.models.schemas import BusinessProfile, CurrentUser

router = APIRouter(
    prefix="/businesses",
    tags=["Businesses"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid profile"},
        401: {"model": ErrorResponse, "description": "Sign-in required"},
    },
)


def _profile(request: BusinessProfileRequest) -> dict:
    return request.model_dump(mode="json", exclude_unset=True)


@router.get("/mine", response_model=BusinessProfile, summary="Get my business")
async def get_my_business(
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> BusinessProfile:
    business = await container.businesses.get_my_business(user)
    if business is None:
        raise NotFoundError("business", user.id)
    return business


@router.post(
    "/mine",
    response_model=BusinessProfile,
    status_code=status.HTTP_201_CREATED,
    summary="Register my business",
)
async def create_business(
    request: BusinessProfileRequest,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> BusinessProfile:
    return await container.businesses.create_business(user, _profile(request))


@router.patch("/mine", response_model=BusinessProfile, summary="Edit my business")
async def update_business(
    request: BusinessProfileRequest,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> BusinessProfile:
    return await container.businesses.update_business_profile(user, _profile(request))
