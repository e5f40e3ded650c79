"""Unit tests for gift card codes, validation and the gift card service."""

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

import pytest

from src.core.exceptions import NotFoundError, ValidationFailure
from src.models.schemas import GiftCard
from src.services.gift_cards import (
    INVALID_AMOUNT,
    MISSING_INFORMATION,
    GiftCardPurchase,
    GiftCardService,
    generate_numeric_code,
    generate_qr_code,
    matches_search,
    parse_amount,
    total_active_value,
)


@pytest.fixture
def business(fake_supabase) -> dict:
    return fake_supabase.add(
        "businesses",
        {"business_name": "Blue Moon Bistro", "business_type": "restaurant", "city": "Austin"},
    )


@pytest.fixture
def service(fake_supabase, settings) -> GiftCardService:
    return GiftCardService(fake_supabase, settings)


def _purchase(business_id: str, **overrides) -> GiftCardPurchase:
    fields = {
        "business_id": business_id,
        "amount": "50",
        "recipient_name": "Ada Lovelace",
        "recipient_email": "ada@example.com",
        "purchased_by_name": "Charles Babbage",
        "purchased_by_email": "charles@example.com",
    }
    fields.update(overrides)
    return GiftCardPurchase(**fields)


class TestCodes:
    def test_qr_code_format(self):
        code = generate_qr_code(now_ms=1700000000000)
        assert re.fullmatch(r"GC-1700000000000-[0-9a-z]{9}", code)

    def test_numeric_code_format(self):
        for _ in range(20):
            assert re.fullmatch(r"\d{8}", generate_numeric_code())


class TestAmount:
    @pytest.mark.parametrize("value", ["5", "5.00", "1000", 250, "99.99"])
    def test_accepts_range(self, value):
        assert Decimal("5") <= parse_amount(value) <= Decimal("1000")

    @pytest.mark.parametrize("value", ["4.99", "1000.01", "abc", "", None, "NaN", "-10"])
    def test_rejects_out_of_range_and_garbage(self, value):
        with pytest.raises(ValidationFailure) as exc_info:
            parse_amount(value)
        assert exc_info.value.notice == INVALID_AMOUNT

    def test_unparseable_amount_keeps_cause(self):
        with pytest.raises(ValidationFailure) as exc_info:
            parse_amount("abc")
        assert isinstance(exc_info.value.__cause__, InvalidOperation)


class TestHelpers:
    def _card(self, **overrides) -> GiftCard:
        fields = dict(
            business_id="b1",
            amount=25.0,
            recipient_name="Ada Lovelace",
            recipient_email="ada@example.com",
            qr_code="GC-1-abc",
            numeric_code="12345678",
            purchased_by_name="Charles Babbage",
            purchased_by_email="charles@example.com",
            business={"business_name": "Blue Moon Bistro"},
        )
        fields.update(overrides)
        return GiftCard(**fields)

    @pytest.mark.parametrize("term", ["ada", "CHARLES", "blue moon", "3456", ""])
    def test_search_matches(self, term):
        assert matches_search(self._card(), term)

    def test_search_misses(self):
        assert not matches_search(self._card(), "grace")

    def test_total_counts_stored_active_only(self):
        cards = [
            self._card(amount=10.0),
            self._card(amount=15.5),
            self._card(amount=100.0, status="redeemed"),
        ]
        assert total_active_value(cards) == Decimal("25.5")

    def test_expiry_overrides_status(self):
        now = datetime.now(timezone.utc)
        expired = self._card(expires_at=now - timedelta(days=1))
        assert expired.effective_status(now) == "expired"
        assert self._card(expires_at=now + timedelta(days=1)).effective_status(now) == "active"


class TestGiftCardService:
    @pytest.mark.asyncio
    async def test_purchase_records_card(self, service, business):
        card = await service.purchase(_purchase(business["id"], amount="75.50"))

        assert card.amount == 75.5
        assert card.status == "active"
        assert card.qr_code.startswith("GC-")
        assert len(card.numeric_code) == 8
        assert card.expires_at is not None

    @pytest.mark.asyncio
    async def test_missing_fields(self, service, fake_supabase, business):
        with pytest.raises(ValidationFailure) as exc_info:
            await service.purchase(_purchase(business["id"], recipient_email=""))

        assert exc_info.value.notice == MISSING_INFORMATION
        assert exc_info.value.details["missing"] == ["recipient_email"]
        assert fake_supabase.rows("gift_cards") == []

    @pytest.mark.asyncio
    async def test_invalid_amount_not_recorded(self, service, fake_supabase, business):
        with pytest.raises(ValidationFailure):
            await service.purchase(_purchase(business["id"], amount="2"))
        assert fake_supabase.rows("gift_cards") == []

    @pytest.mark.asyncio
    async def test_list_filters_and_joins_business(self, service, business):
        first = await service.purchase(_purchase(business["id"]))
        await service.purchase(_purchase(business["id"], recipient_name="Grace Hopper"))
        await service.update_status(first.id, "redeemed")

        everything = await service.list_gift_cards(status="all")
        active = await service.list_gift_cards(status="active")
        grace = await service.list_gift_cards(search="grace")

        assert len(everything) == 2
        assert everything[0].business["business_name"] == "Blue Moon Bistro"
        assert [card.recipient_name for card in active] == ["Grace Hopper"]
        assert len(grace) == 1

    @pytest.mark.asyncio
    async def test_update_status_validation(self, service, business):
        card = await service.purchase(_purchase(business["id"]))
        with pytest.raises(ValidationFailure):
            await service.update_status(card.id, "lost")
        with pytest.raises(NotFoundError):
            await service.update_status("missing", "cancelled")
