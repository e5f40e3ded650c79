"""Admin panel endpoints.

Every route requires a signed-in admin (checked with the ``is_admin`` RPC).
Signed-out callers get 401 with a redirect to sign in; signed-in non-admins
get 403 with a redirect home.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Response

from src.api.dependencies import get_admin_user
from src.api.models import (
    AmenityCreate,
    AmenityToggle,
    AnalyticsResponse,
    BusinessStatusUpdate,
    ErrorResponse,
    FeatureAdd,
    GiftCardListResponse,
    GiftCardResponse,
    GiftCardStatusUpdate,
    GrantAdminRequest,
    PlanUpdate,
    SubscriptionUpdate,
)
from src.core.container import DependencyContainer, get_container
from src.models.schemas import (
    AmenityOption,
    BusinessProfile,
    GiftCard,
    Notice,
    SubscriptionPlan,
)
from src.services.gift_cards import total_active_value
from src.services.base import utcnow

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_admin_user)],
    responses={
        401: {"model": ErrorResponse, "description": "Sign-in required"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)


def gift_card_response(card: GiftCard) -> GiftCardResponse:
    return GiftCardResponse(
        id=card.id,
        business_id=card.business_id,
        business_name=(card.business or {}).get("business_name"),
        amount=card.amount,
        recipient_name=card.recipient_name,
        recipient_email=card.recipient_email,
        purchased_by_name=card.purchased_by_name,
        purchased_by_email=card.purchased_by_email,
        qr_code=card.qr_code,
        numeric_code=card.numeric_code,
        status=card.status,
        effective_status=card.effective_status(utcnow()),
        expires_at=card.expires_at,
        created_at=card.created_at,
    )


@router.get("/check", summary="Confirm admin access")
async def check_admin() -> dict:
    return {"is_admin": True}


# -----------------------------------------------------------------------------
# Businesses
# -----------------------------------------------------------------------------


@router.get("/businesses", response_model=list[BusinessProfile], summary="List businesses")
async def list_businesses(
    status: Optional[str] = Query(None, description="Filter by moderation status"),
    container: DependencyContainer = Depends(get_container),
) -> list[BusinessProfile]:
    return await container.businesses.list_businesses(status)


@router.patch(
    "/businesses/{business_id}/status",
    response_model=BusinessProfile,
    summary="Change a business's moderation status",
)
async def update_business_status(
    business_id: str,
    request: BusinessStatusUpdate,
    container: DependencyContainer = Depends(get_container),
) -> BusinessProfile:
    return await container.businesses.update_status(business_id, request.status)


@router.patch(
    "/businesses/{business_id}/subscription",
    response_model=BusinessProfile,
    summary="Change a business's subscription",
)
async def update_business_subscription(
    business_id: str,
    request: SubscriptionUpdate,
    container: DependencyContainer = Depends(get_container),
) -> BusinessProfile:
    return await container.businesses.update_subscription(
        business_id, request.tier, request.status, request.end_date
    )


# -----------------------------------------------------------------------------
# Subscription plans
# -----------------------------------------------------------------------------


@router.get("/plans", response_model=list[SubscriptionPlan], summary="List subscription plans")
async def list_plans(
    container: DependencyContainer = Depends(get_container),
) -> list[SubscriptionPlan]:
    return await container.plans.list_plans()


@router.patch("/plans/{plan_id}", response_model=SubscriptionPlan, summary="Edit a plan")
async def update_plan(
    plan_id: str,
    request: PlanUpdate,
    container: DependencyContainer = Depends(get_container),
) -> SubscriptionPlan:
    return await container.plans.update_plan(plan_id, request.model_dump(exclude_none=True))


@router.post(
    "/plans/{plan_id}/features",
    response_model=SubscriptionPlan,
    summary="Add a feature line to a plan",
)
async def add_plan_feature(
    plan_id: str,
    request: FeatureAdd,
    container: DependencyContainer = Depends(get_container),
) -> SubscriptionPlan:
    return await container.plans.add_feature(plan_id, request.feature)


@router.delete(
    "/plans/{plan_id}/features/{index}",
    response_model=SubscriptionPlan,
    summary="Remove a feature line from a plan",
)
async def remove_plan_feature(
    plan_id: str,
    index: int,
    container: DependencyContainer = Depends(get_container),
) -> SubscriptionPlan:
    return await container.plans.remove_feature(plan_id, index)


# -----------------------------------------------------------------------------
# Gift cards
# -----------------------------------------------------------------------------


@router.get("/gift-cards", response_model=GiftCardListResponse, summary="List gift cards")
async def list_gift_cards(
    search: str = Query("", max_length=255),
    status: Optional[str] = Query(None, description="active, redeemed, cancelled or all"),
    business_id: Optional[str] = Query(None, description="Business id or all"),
    container: DependencyContainer = Depends(get_container),
) -> GiftCardListResponse:
    cards = await container.gift_cards.list_gift_cards(search, status, business_id)
    return GiftCardListResponse(
        gift_cards=[gift_card_response(card) for card in cards],
        total=len(cards),
        total_active_value=float(total_active_value(cards)),
    )


@router.patch(
    "/gift-cards/{gift_card_id}/status",
    response_model=GiftCardResponse,
    summary="Change a gift card's status",
)
async def update_gift_card_status(
    gift_card_id: str,
    request: GiftCardStatusUpdate,
    container: DependencyContainer = Depends(get_container),
) -> GiftCardResponse:
    card = await container.gift_cards.update_status(gift_card_id, request.status)
    return gift_card_response(card)


# -----------------------------------------------------------------------------
# Amenities
# -----------------------------------------------------------------------------


@router.get("/amenities", response_model=list[AmenityOption], summary="List amenity options")
async def list_amenities(
    include_inactive: bool = Query(False),
    container: DependencyContainer = Depends(get_container),
) -> list[AmenityOption]:
    return await container.amenities.list_amenities(include_inactive)


@router.post(
    "/amenities",
    response_model=AmenityOption,
    status_code=201,
    summary="Add a custom amenity",
)
async def add_amenity(
    request: AmenityCreate,
    container: DependencyContainer = Depends(get_container),
) -> AmenityOption:
    return await container.amenities.add_amenity(
        request.display_name, request.description, request.sort_order
    )


@router.patch(
    "/amenities/{amenity_id}",
    response_model=AmenityOption,
    summary="Activate or deactivate an amenity",
)
async def toggle_amenity(
    amenity_id: str,
    request: AmenityToggle,
    container: DependencyContainer = Depends(get_container),
) -> AmenityOption:
    return await container.amenities.set_active(amenity_id, request.is_active)


@router.delete("/amenities/{amenity_id}", status_code=204, summary="Delete an amenity")
async def delete_amenity(
    amenity_id: str,
    container: DependencyContainer = Depends(get_container),
) -> Response:
    await container.amenities.delete_amenity(amenity_id)
    return Response(status_code=204)


# -----------------------------------------------------------------------------
# Admins and analytics
# -----------------------------------------------------------------------------


@router.post("/admins", response_model=Notice, summary="Grant admin privileges by email")
async def grant_admin(
    request: GrantAdminRequest,
    container: DependencyContainer = Depends(get_container),
) -> Notice:
    return await container.admin.grant_admin(request.email)


@router.get("/analytics", response_model=AnalyticsResponse, summary="System analytics")
async def system_analytics(
    container: DependencyContainer = Depends(get_container),
) -> AnalyticsResponse:
    analytics = await container.admin.system_analytics()
    return AnalyticsResponse(**analytics.as_dict())
