"""Public gift card purchase endpoint.

Anyone may buy a gift card for a business. No payment is taken here; the
card is recorded as active with freshly generated codes.
"""

from fastapi import APIRouter, Depends

from src.api.models import ErrorResponse, GiftCardPurchaseRequest, GiftCardResponse
from src.api.routes.admin import gift_card_response
from src.core.container import DependencyContainer, get_container
from src.services.gift_cards import GiftCardPurchase

router = APIRouter(prefix="/gift-cards", tags=["Gift Cards"])


@router.post(
    "",
    response_model=GiftCardResponse,
    status_code=201,
    summary="Purchase a gift card",
    responses={400: {"model": ErrorResponse, "description": "Missing information or invalid amount"}},
)
async def purchase_gift_card(
    request: GiftCardPurchaseRequest,
    container: DependencyContainer = Depends(get_container),
) -> GiftCardResponse:
    card = await container.gift_cards.purchase(GiftCardPurchase(**request.model_dump()))
    return gift_card_response(card)
