"""
Gift cards.

Purchases are validated here and recorded in ``gift_cards``; payment is not
handled. Each card gets two redemption codes: a QR payload of the form
``GC-{epoch ms}-{9 base36 chars}`` and an 8-digit numeric code.
"""

import secrets
import string
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

import structlog

from src.core.exceptions import NotFoundError, ValidationFailure
from src.models.schemas import GiftCard, GiftCardStatus, Notice
from src.services.base import SupabaseService, utcnow

logger = structlog.get_logger(__name__)

MIN_AMOUNT = Decimal("5.00")
MAX_AMOUNT = Decimal("1000.00")

BASE36_ALPHABET = string.digits + string.ascii_lowercase

MISSING_INFORMATION = Notice.error("Missing Information", "Please fill in all required fields.")
INVALID_AMOUNT = Notice.error(
    "Invalid Amount",
    "Gift card amount must be between $5.00 and $1,000.00.",
)


def generate_qr_code(now_ms: Optional[int] = None) -> str:
    """QR payload: ``GC-{epoch ms}-{9 base36 chars}``."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(9))
    return f"GC-{stamp}-{suffix}"


def generate_numeric_code() -> str:
    """Eight random decimal digits, leading zeros allowed."""
    return "".join(secrets.choice(string.digits) for _ in range(8))


def parse_amount(value: Union[str, float, int, Decimal, None]) -> Decimal:
    """
    Parse and range-check a purchase amount.

    Raises:
        ValidationFailure: With the "Invalid Amount" notice.
    """
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationFailure(INVALID_AMOUNT, {"amount": value}) from e
    if not amount.is_finite() or amount < MIN_AMOUNT or amount > MAX_AMOUNT:
        raise ValidationFailure(INVALID_AMOUNT, {"amount": value})
    return amount


@dataclass
class GiftCardPurchase:
    """Fields collected by the purchase form."""

    business_id: str
    amount: Union[str, float, int, Decimal, None]
    recipient_name: str
    recipient_email: str
    purchased_by_name: str
    purchased_by_email: str
    recipient_phone: Optional[str] = None
    message: Optional[str] = None

    def missing_fields(self) -> list[str]:
        required = {
            "amount": self.amount,
            "recipient_name": self.recipient_name,
            "recipient_email": self.recipient_email,
            "purchased_by_name": self.purchased_by_name,
            "purchased_by_email": self.purchased_by_email,
        }
        return [name for name, value in required.items() if value in (None, "")]


def matches_search(card: GiftCard, term: str) -> bool:
    """Case-insensitive match on names, emails, business and numeric code."""
    if not term:
        return True
    needle = term.lower()
    business_name = (card.business or {}).get("business_name") or ""
    return (
        needle in card.recipient_name.lower()
        or needle in card.recipient_email.lower()
        or needle in card.purchased_by_name.lower()
        or term in card.numeric_code
        or needle in business_name.lower()
    )


def total_active_value(cards: list[GiftCard]) -> Decimal:
    """Sum of amounts over cards whose stored status is active."""
    return sum(
        (Decimal(str(card.amount)) for card in cards if card.status == GiftCardStatus.ACTIVE.value),
        Decimal("0"),
    )


class GiftCardService(SupabaseService):
    """Purchase, listing and status changes for gift cards."""

    async def purchase(self, purchase: GiftCardPurchase) -> GiftCard:
        """
        Record a gift card purchase.

        Raises:
            ValidationFailure: "Missing Information" or "Invalid Amount".
        """
        missing = purchase.missing_fields()
        if missing:
            raise ValidationFailure(MISSING_INFORMATION, {"missing": missing})
        amount = parse_amount(purchase.amount)

        row = GiftCard(
            business_id=purchase.business_id,
            amount=float(amount),
            recipient_name=purchase.recipient_name,
            recipient_email=purchase.recipient_email,
            recipient_phone=purchase.recipient_phone,
            message=purchase.message,
            qr_code=generate_qr_code(),
            numeric_code=generate_numeric_code(),
            purchased_by_name=purchase.purchased_by_name,
            purchased_by_email=purchase.purchased_by_email,
        ).to_db_row()
        row.pop("business", None)
        row.pop("expires_at", None)

        result = self._run("gift_cards", "insert", self._table("gift_cards").insert(row))
        card = GiftCard.from_db_row(result.data[0])

        logger.info("gift_card_created", gift_card_id=card.id, business_id=card.business_id)
        return card

    async def list_gift_cards(
        self,
        search: str = "",
        status: Optional[str] = None,
        business_id: Optional[str] = None,
    ) -> list[GiftCard]:
        """
        Gift cards newest first, joined with their business.

        ``status`` and ``business_id`` of None or "all" mean no filter.
        """
        query = self._table("gift_cards").select(
            "*, business:businesses!inner(business_name, city, country)"
        )
        if status and status != "all":
            query = query.eq("status", status)
        if business_id and business_id != "all":
            query = query.eq("business_id", business_id)

        result = self._run("gift_cards", "select", query.order("created_at", desc=True))
        cards = [GiftCard.from_db_row(row) for row in (result.data or [])]
        return [card for card in cards if matches_search(card, search)]

    async def update_status(self, gift_card_id: str, status: str) -> GiftCard:
        allowed = [s.value for s in GiftCardStatus]
        if status not in allowed:
            raise ValidationFailure(
                Notice.error("Invalid Value", f"'{status}' is not a valid gift card status."),
                {"field": "status", "allowed": allowed},
            )

        result = self._run(
            "gift_cards",
            "update",
            self._table("gift_cards").update({"status": status}).eq("id", gift_card_id),
        )
        if not result.data:
            raise NotFoundError("gift_card", gift_card_id)

        logger.info("gift_card_status_updated", gift_card_id=gift_card_id, status=status)
        return GiftCard.from_db_row(result.data[0])

    @staticmethod
    def effective_status(card: GiftCard) -> str:
        return card.effective_status(utcnow())
