"""Pydantic models for CityGuide core entities."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class Category(str, Enum):
    """Guide categories, in the order the selector offers them."""
    EAT = "Eat"
    STAY = "Stay"
    DRINK = "Drink"
    PLAY = "Play"


class ReviewSource(str, Enum):
    """Review platforms a listing's rating is attributed to."""
    GOOGLE = "Google Reviews"
    YELP = "Yelp"
    TRIPADVISOR = "TripAdvisor"


class SubscriptionTier(str, Enum):
    """Business subscription tiers, lowest first."""
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    FIRSTCLASS = "firstclass"


class BusinessStatus(str, Enum):
    """Moderation status of a business profile."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class GiftCardStatus(str, Enum):
    """Lifecycle status of a gift card."""
    ACTIVE = "active"
    REDEEMED = "redeemed"
    CANCELLED = "cancelled"


# =============================================================================
# Notices
# =============================================================================


class Notice(BaseModel):
    """A transient, non-blocking message shown to the user."""

    level: Literal["info", "success", "error"] = Field(..., description="Notice severity")
    title: str = Field(..., description="Short heading")
    description: str = Field(..., description="Message body")

    @classmethod
    def error(cls, title: str, description: str) -> "Notice":
        return cls(level="error", title=title, description=description)

    @classmethod
    def success(cls, title: str, description: str) -> "Notice":
        return cls(level="success", title=title, description=description)

    @classmethod
    def info(cls, title: str, description: str) -> "Notice":
        return cls(level="info", title=title, description=description)


TRY_AGAIN = Notice.error("Error", "Something went wrong. Please try again.")


# =============================================================================
# Guide Records
# =============================================================================


class _OptionalFields(BaseModel):
    """Base for groups of optional fields that are omitted, not blanked, when absent."""

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        return {key: value for key, value in handler(self).items() if value is not None}


class SocialLinks(_OptionalFields):
    """Social profiles of a listing."""

    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None


class ContactDetails(_OptionalFields):
    """Contact channels of a listing."""

    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    menu_link: Optional[str] = None


class BusinessRecord(BaseModel):
    """A synthetic business listing produced by the guide search."""

    name: str = Field(..., description="Display name")
    address: str = Field(..., description="Street address, city and country")
    map_reference: str = Field(..., description="Google Maps URL")
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    contact: ContactDetails = Field(default_factory=ContactDetails)
    images: list[str] = Field(default_factory=list, description="Image URLs")
    rating: float = Field(..., ge=3.0, lt=5.0, description="Rating in [3.0, 5.0)")
    review_count: int = Field(..., ge=0, description="Number of reviews behind the rating")
    source: ReviewSource = Field(..., description="Platform the rating is attributed to")

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe snapshot used when a record is saved."""
        return self.model_dump(mode="json")


# =============================================================================
# Identity
# =============================================================================


class CurrentUser(BaseModel):
    """The signed-in user a request acts on behalf of."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Supabase auth user id")
    email: Optional[str] = Field(None, description="Account email")


# =============================================================================
# Base Models
# =============================================================================


class BaseEntity(BaseModel):
    """Base model for persisted rows with conversion helpers."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    def to_db_row(self) -> dict[str, Any]:
        """Convert model to database row format (Supabase/PostgreSQL)."""
        data = self.model_dump()
        result = {}
        for key, value in data.items():
            if value is None and key in ("id", "created_at", "updated_at"):
                # Let the database fill server-generated columns
                continue
            if isinstance(value, UUID):
                result[key] = str(value)
            elif isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, Enum):
                result[key] = value.value
            else:
                result[key] = value
        return result

    @classmethod
    def from_db_row(cls, row: dict[str, Any]):
        """Create model instance from database row."""
        return cls.model_validate(row)


# =============================================================================
# Collections
# =============================================================================


class Collection(BaseEntity):
    """A user-owned, named group of saved listings."""

    id: Optional[str] = None
    user_id: str
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    is_public: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SavedRestaurant(BaseEntity):
    """A snapshot of one listing saved into a collection."""

    id: Optional[str] = None
    user_id: str
    collection_id: Optional[str] = None
    restaurant_name: str
    restaurant_address: str
    restaurant_data: dict[str, Any] = Field(default_factory=dict)
    city: str
    country: str
    category: Optional[str] = None
    created_at: Optional[datetime] = None


class CollectionShare(BaseEntity):
    """An opaque token granting read-only access to one collection."""

    id: Optional[str] = None
    collection_id: str
    share_token: str
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


# =============================================================================
# Business Management
# =============================================================================


class BusinessProfile(BaseEntity):
    """A business listing, edited by its owner and moderated by admins."""

    id: Optional[str] = None
    user_id: Optional[str] = None
    business_name: str
    business_type: str
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    status: str = BusinessStatus.PENDING.value
    subscription_tier: Optional[str] = None
    subscription_status: Optional[str] = None
    subscription_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class SubscriptionPlan(BaseEntity):
    """A purchasable subscription plan."""

    id: Optional[str] = None
    name: str
    tier: str
    description: Optional[str] = None
    monthly_price: float = 0.0
    annual_price: float = 0.0
    annual_discount_percentage: float = 0.0
    features: list[str] = Field(default_factory=list)
    is_active: bool = True
    sort_order: int = 0

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "SubscriptionPlan":
        data = dict(row)
        if not isinstance(data.get("features"), list):
            data["features"] = []
        return cls.model_validate(data)


class GiftCard(BaseEntity):
    """A gift card sold on behalf of a business."""

    id: Optional[str] = None
    business_id: str
    amount: float
    recipient_name: str
    recipient_email: str
    recipient_phone: Optional[str] = None
    message: Optional[str] = None
    qr_code: str
    numeric_code: str
    status: str = GiftCardStatus.ACTIVE.value
    purchased_by_name: str
    purchased_by_email: str
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    business: Optional[dict[str, Any]] = Field(
        None, description="Joined business name/city/country"
    )

    def effective_status(self, now: datetime) -> str:
        """Status as displayed: expiry overrides the stored status."""
        if self.expires_at is not None and self.expires_at < now:
            return "expired"
        return self.status


class AmenityOption(BaseEntity):
    """A searchable amenity flag offered to businesses."""

    id: Optional[str] = None
    option_key: str
    display_name: str
    description: Optional[str] = None
    category: str = "general"
    is_active: bool = True
    sort_order: int = 0


class UserPreferences(BaseEntity):
    """Amenity preferences and language of a member."""

    user_id: str
    wheelchair_access: bool = False
    extended_hours: bool = False
    gluten_free: bool = False
    low_noise: bool = False
    public_transport: bool = False
    pet_friendly: bool = False
    outdoor_seating: bool = False
    senior_discounts: bool = False
    online_booking: bool = False
    air_conditioned: bool = False
    preferred_language: str = "en"
