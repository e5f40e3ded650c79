"""Business profiles (owner registration and editing, admin moderation) and subscription plans."""

from datetime import datetime
from typing import Any, Optional

import structlog

from src.core.exceptions import NotFoundError, ValidationFailure
from src.models.schemas import (
    BusinessProfile,
    BusinessStatus,
    CurrentUser,
    Notice,
    SubscriptionPlan,
    SubscriptionTier,
)
from src.services.base import SupabaseService

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = (
    "business_name",
    "business_type",
    "description",
    "address",
    "city",
    "state",
    "country",
    "postal_code",
    "email",
    "phone",
    "website",
    "facebook",
    "instagram",
    "twitter",
    "linkedin",
)
REQUIRED_PROFILE_FIELDS = ("business_name", "business_type")

BUSINESS_EXISTS = Notice.error(
    "Business Already Registered",
    "You already have a business profile. Edit it from your dashboard.",
)

PLAN_FIELDS = (
    "name",
    "description",
    "monthly_price",
    "annual_price",
    "annual_discount_percentage",
    "features",
    "is_active",
)


def _invalid_choice(field: str, value: str, allowed: list[str]) -> ValidationFailure:
    return ValidationFailure(
        Notice.error("Invalid Value", f"'{value}' is not a valid {field}."),
        {"field": field, "value": value, "allowed": allowed},
    )


def _profile_fields(profile: dict[str, Any]) -> dict[str, Any]:
    """Keep editable profile columns, trimming text and storing blanks as NULL."""
    fields = {}
    for key, value in profile.items():
        if key not in PROFILE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip() or None
        fields[key] = value
    return fields


def _require_profile_basics(fields: dict[str, Any]) -> None:
    missing = [key for key in REQUIRED_PROFILE_FIELDS if not fields.get(key)]
    if missing:
        raise ValidationFailure(
            Notice.error("Missing Information", "Business name and type are required."),
            {"missing": missing},
        )


class BusinessService(SupabaseService):
    """Owner-managed business profiles, plus their moderation and subscriptions."""

    # -----------------------------------------------------------------
    # Owner profile
    # -----------------------------------------------------------------

    async def get_my_business(self, user: CurrentUser) -> Optional[BusinessProfile]:
        """The business registered by this user, or None."""
        result = self._run(
            "businesses",
            "select",
            self._table("businesses").select("*").eq("user_id", user.id).limit(1),
        )
        if not result.data:
            return None
        return BusinessProfile.from_db_row(result.data[0])

    async def create_business(self, user: CurrentUser, profile: dict[str, Any]) -> BusinessProfile:
        """
        Register a business for its owner. New listings start as pending.

        Raises:
            ValidationFailure: If the name or type is blank, or the user
                already owns a business.
        """
        row = _profile_fields(profile)
        _require_profile_basics(row)
        if await self.get_my_business(user) is not None:
            raise ValidationFailure(BUSINESS_EXISTS, {"user_id": user.id})

        row.update(user_id=user.id, status=BusinessStatus.PENDING.value)
        result = self._run("businesses", "insert", self._table("businesses").insert(row))
        business = BusinessProfile.from_db_row(result.data[0])
        logger.info("business_created", business_id=business.id, user_id=user.id)
        return business

    async def update_business_profile(
        self, user: CurrentUser, profile: dict[str, Any]
    ) -> BusinessProfile:
        """
        Edit the owner's own listing. Moderation and subscription fields are
        not editable here.

        Raises:
            NotFoundError: If the user has not registered a business.
        """
        current = await self.get_my_business(user)
        if current is None:
            raise NotFoundError("business", user.id)

        changes = _profile_fields(profile)
        if not changes:
            return current
        basics = current.model_dump(include=set(REQUIRED_PROFILE_FIELDS))
        _require_profile_basics({**basics, **changes})

        result = self._run(
            "businesses",
            "update",
            self._table("businesses").update(changes).eq("id", current.id).eq("user_id", user.id),
        )
        if not result.data:
            raise NotFoundError("business", current.id)
        logger.info("business_profile_updated", business_id=current.id, fields=sorted(changes))
        return BusinessProfile.from_db_row(result.data[0])

    # -----------------------------------------------------------------
    # Moderation
    # -----------------------------------------------------------------

    async def list_businesses(self, status: Optional[str] = None) -> list[BusinessProfile]:
        query = self._table("businesses").select("*")
        if status:
            query = query.eq("status", status)
        result = self._run("businesses", "select", query.order("created_at", desc=True))
        return [BusinessProfile.from_db_row(row) for row in (result.data or [])]

    def _update(self, business_id: str, changes: dict[str, Any]) -> BusinessProfile:
        result = self._run(
            "businesses",
            "update",
            self._table("businesses").update(changes).eq("id", business_id),
        )
        if not result.data:
            raise NotFoundError("business", business_id)
        return BusinessProfile.from_db_row(result.data[0])

    async def update_status(self, business_id: str, status: str) -> BusinessProfile:
        """
        Move a business to pending, approved, rejected or suspended.

        Raises:
            ValidationFailure: If the status is unknown.
            NotFoundError: If the business does not exist.
        """
        allowed = [s.value for s in BusinessStatus]
        if status not in allowed:
            raise _invalid_choice("status", status, allowed)

        business = self._update(business_id, {"status": status})
        logger.info("business_status_updated", business_id=business_id, status=status)
        return business

    async def update_subscription(
        self,
        business_id: str,
        tier: str,
        subscription_status: str = "active",
        end_date: Optional[datetime] = None,
    ) -> BusinessProfile:
        """Change a business's subscription tier, status and end date."""
        allowed = [t.value for t in SubscriptionTier]
        if tier not in allowed:
            raise _invalid_choice("subscription tier", tier, allowed)

        business = self._update(
            business_id,
            {
                "subscription_tier": tier,
                "subscription_status": subscription_status,
                "subscription_end_date": end_date.isoformat() if end_date else None,
            },
        )
        logger.info("business_subscription_updated", business_id=business_id, tier=tier)
        return business


class SubscriptionPlanService(SupabaseService):
    """Editing of subscription plans and their feature lists."""

    async def list_plans(self) -> list[SubscriptionPlan]:
        result = self._run(
            "subscription_plans",
            "select",
            self._table("subscription_plans").select("*").order("sort_order"),
        )
        return [SubscriptionPlan.from_db_row(row) for row in (result.data or [])]

    async def get_plan(self, plan_id: str) -> SubscriptionPlan:
        result = self._run(
            "subscription_plans",
            "select",
            self._table("subscription_plans").select("*").eq("id", plan_id).limit(1),
        )
        if not result.data:
            raise NotFoundError("subscription_plan", plan_id)
        return SubscriptionPlan.from_db_row(result.data[0])

    async def update_plan(self, plan_id: str, changes: dict[str, Any]) -> SubscriptionPlan:
        """
        Update editable plan fields. Unknown keys are ignored; blank feature
        lines are dropped.
        """
        update = {key: value for key, value in changes.items() if key in PLAN_FIELDS}
        if "features" in update:
            update["features"] = [f.strip() for f in update["features"] or [] if f and f.strip()]
        if not update:
            return await self.get_plan(plan_id)

        result = self._run(
            "subscription_plans",
            "update",
            self._table("subscription_plans").update(update).eq("id", plan_id),
        )
        if not result.data:
            raise NotFoundError("subscription_plan", plan_id)

        logger.info("subscription_plan_updated", plan_id=plan_id, fields=sorted(update))
        return SubscriptionPlan.from_db_row(result.data[0])

    async def add_feature(self, plan_id: str, feature: str) -> SubscriptionPlan:
        """Append a feature line. Blank input leaves the plan unchanged."""
        plan = await self.get_plan(plan_id)
        if not feature.strip():
            return plan
        return await self.update_plan(plan_id, {"features": plan.features + [feature.strip()]})

    async def remove_feature(self, plan_id: str, index: int) -> SubscriptionPlan:
        plan = await self.get_plan(plan_id)
        if index < 0 or index >= len(plan.features):
            raise NotFoundError("plan_feature", str(index))
        features = plan.features[:index] + plan.features[index + 1:]
        return await self.update_plan(plan_id, {"features": features})
