"""Pydantic models for API requests and responses.

This module defines the request/response schemas for the CityGuide API.
Persisted rows (collections, businesses, plans, amenities, preferences) are
returned with their domain models from src.models directly.
"""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator, model_validator

from src.models.schemas import (
    BusinessRecord,
    Category,
    Collection,
    Notice,
    SavedRestaurant,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Enums and Types
# =============================================================================

StageName = Literal["category", "region", "country", "city"]


# =============================================================================
# Taxonomy Models
# =============================================================================


class OptionsResponse(BaseModel):
    """Options for one level of the taxonomy."""

    options: list[str] = Field(..., description="Names in display order")


class LocationStatsResponse(BaseModel):
    """Size of the location taxonomy."""

    regions: int
    countries: int
    cities: int


class CityLookupResponse(BaseModel):
    """Result of a free-text city lookup outside a session."""

    notice: Notice
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    exact: Optional[bool] = None


# =============================================================================
# Guide Models
# =============================================================================


class SelectionView(BaseModel):
    """Current selection of a guide session."""

    category: Optional[Category] = None
    region: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    result_count: Optional[int] = None
    ready: bool = False


class SessionResponse(BaseModel):
    """State of a guide session."""

    id: str = Field(..., description="Session identifier")
    selection: SelectionView
    loading: bool = Field(..., description="A search is in flight")
    result_count: int = Field(..., description="Number of visible results")
    enabled_stages: list[StageName] = Field(
        default_factory=list,
        description="Stages that currently accept input",
    )
    result_count_options: list[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class StageOptionsResponse(BaseModel):
    """Options offered for one stage of a session."""

    stage: StageName
    enabled: bool
    options: list[str]


class SelectStageRequest(BaseModel):
    """Request to set (or clear, with null) one selection stage."""

    value: Optional[str] = Field(
        None,
        description="New value. Null or empty clears the stage",
        json_schema_extra={"example": "Eat"},
    )


class ResultCountRequest(BaseModel):
    """Request to choose how many results to generate."""

    count: int = Field(..., description="Number of results", json_schema_extra={"example": 10})


class CitySearchRequest(BaseModel):
    """Free-text city search."""

    text: str = Field(..., max_length=255, json_schema_extra={"example": "Pari"})
    scoped: bool = Field(
        default=False,
        description="Only match cities in the session's selected country",
    )


class NoticeResponse(BaseModel):
    """A notice plus the session it applies to."""

    notice: Notice
    session: Optional[SessionResponse] = None


class FeedEntryResponse(BaseModel):
    """One slot of the result feed."""

    kind: Literal["business", "promo"]
    position: Optional[int] = None
    record: Optional[BusinessRecord] = None


class SearchResponse(BaseModel):
    """Outcome of a guide search."""

    notice: Optional[Notice] = None
    records: list[BusinessRecord] = Field(default_factory=list)
    feed: list[FeedEntryResponse] = Field(default_factory=list)
    tagline: Optional[str] = None


# =============================================================================
# Collection Models
# =============================================================================


class CollectionCreate(BaseModel):
    """Request model for creating a collection."""

    name: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "My Faves"})
    description: Optional[str] = Field(None, max_length=1000)
    is_public: bool = False


class CollectionResponse(BaseModel):
    """A collection with its saved-listing count."""

    collection: Collection
    saved_count: int = 0


class CollectionListResponse(BaseModel):
    """Response model for listing collections."""

    collections: list[CollectionResponse]
    total: int


class SaveBusinessRequest(BaseModel):
    """
    Save a listing.

    Either name a result of a guide session (``session_id`` + ``position``)
    or send the listing itself with its city and country. Target either an
    existing collection or a new one by name; with neither nothing is saved.
    """

    session_id: Optional[str] = None
    position: Optional[int] = Field(None, ge=1, description="1-based position in the results")
    record: Optional[BusinessRecord] = None
    city: Optional[str] = None
    country: Optional[str] = None
    category: Optional[Category] = None
    collection_id: Optional[str] = None
    new_collection_name: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def check_source(self) -> "SaveBusinessRequest":
        from_session = self.session_id is not None and self.position is not None
        if not from_session and self.record is None:
            raise ValueError("either session_id and position, or record, is required")
        if self.record is not None and not (self.city and self.country):
            raise ValueError("city and country are required when sending a record")
        return self


class SaveResponse(BaseModel):
    """Outcome of a save: the stored row, if any, and a notice."""

    saved: Optional[SavedRestaurant] = None
    notice: Notice


class SavedListResponse(BaseModel):
    saved: list[SavedRestaurant]
    total: int


class ShareRequest(BaseModel):
    """Request to publish a collection."""

    expires_in_days: Optional[int] = Field(
        None,
        ge=1,
        le=365,
        description="Link lifetime. Omit for the default",
    )


class ShareResponse(BaseModel):
    token: str
    url: str
    expires_at: Optional[datetime] = None


class SharedCollectionResponse(BaseModel):
    """Read-only view behind a share link."""

    collection: Collection
    saved: list[SavedRestaurant]
    expires_at: Optional[datetime] = None


# =============================================================================
# Business Profile Models
# =============================================================================


class BusinessProfileRequest(BaseModel):
    """
    Owner-editable listing fields.

    Name and type are required when registering. On update, omitted fields
    are unchanged and blank strings clear the field.
    """

    business_name: Optional[str] = Field(None, max_length=200, json_schema_extra={"example": "Golden Grill"})
    business_type: Optional[str] = Field(None, max_length=100, json_schema_extra={"example": "restaurant"})
    description: Optional[str] = Field(None, max_length=180)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    website: Optional[HttpUrl] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None

    @field_validator("email", "website", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


# =============================================================================
# Admin Models
# =============================================================================


class BusinessStatusUpdate(BaseModel):
    status: str = Field(..., json_schema_extra={"example": "approved"})


class SubscriptionUpdate(BaseModel):
    tier: str = Field(..., json_schema_extra={"example": "premium"})
    status: str = Field(default="active")
    end_date: Optional[datetime] = None


class PlanUpdate(BaseModel):
    """Editable subscription plan fields. Omitted fields are unchanged."""

    name: Optional[str] = None
    description: Optional[str] = None
    monthly_price: Optional[float] = Field(None, ge=0)
    annual_price: Optional[float] = Field(None, ge=0)
    annual_discount_percentage: Optional[float] = Field(None, ge=0, le=100)
    features: Optional[list[str]] = None
    is_active: Optional[bool] = None


class FeatureAdd(BaseModel):
    feature: str = Field(..., max_length=255)


class GiftCardPurchaseRequest(BaseModel):
    """Gift card purchase form. Amount is checked by the service."""

    business_id: str
    amount: str = Field(..., json_schema_extra={"example": "50.00"})
    recipient_name: str = ""
    recipient_email: str = ""
    recipient_phone: Optional[str] = None
    message: Optional[str] = None
    purchased_by_name: str = ""
    purchased_by_email: str = ""


class GiftCardResponse(BaseModel):
    id: Optional[str] = None
    business_id: str
    business_name: Optional[str] = None
    amount: float
    recipient_name: str
    recipient_email: str
    purchased_by_name: str
    purchased_by_email: str
    qr_code: str
    numeric_code: str
    status: str
    effective_status: str
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class GiftCardListResponse(BaseModel):
    gift_cards: list[GiftCardResponse]
    total: int
    total_active_value: float


class GiftCardStatusUpdate(BaseModel):
    status: str = Field(..., json_schema_extra={"example": "redeemed"})


class AmenityCreate(BaseModel):
    display_name: str = Field(..., max_length=255, json_schema_extra={"example": "Free Wi-Fi"})
    description: Optional[str] = None
    sort_order: int = 0


class AmenityToggle(BaseModel):
    is_active: bool


class GrantAdminRequest(BaseModel):
    email: EmailStr


class AnalyticsResponse(BaseModel):
    total_users: int
    total_businesses: int
    total_saved_restaurants: int
    total_collections: int
    total_admins: int
    active_subscriptions: int


# =============================================================================
# Preferences Models
# =============================================================================


class PreferencesUpdate(BaseModel):
    """Amenity preferences. Omitted fields are unchanged."""

    wheelchair_access: Optional[bool] = None
    extended_hours: Optional[bool] = None
    gluten_free: Optional[bool] = None
    low_noise: Optional[bool] = None
    public_transport: Optional[bool] = None
    pet_friendly: Optional[bool] = None
    outdoor_seating: Optional[bool] = None
    senior_discounts: Optional[bool] = None
    online_booking: Optional[bool] = None
    air_conditioned: Optional[bool] = None
    preferred_language: Optional[str] = Field(None, min_length=2, max_length=10)


# =============================================================================
# Page Routing Models
# =============================================================================


class PageRoute(BaseModel):
    path: str
    page: str
    requires_auth: bool = False


class RouteTableResponse(BaseModel):
    routes: list[PageRoute]
    sign_in_path: str


class RouteCheckResponse(BaseModel):
    path: str
    page: str
    allowed: bool
    redirect_to: Optional[str] = None


# =============================================================================
# Health Check Models
# =============================================================================


class HealthStatus(BaseModel):
    """Individual service health status."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(
        ..., description="Service status"
    )
    latency_ms: Optional[float] = Field(None, description="Response latency in milliseconds")
    message: Optional[str] = Field(None, description="Additional status message")


class HealthCheckResponse(BaseModel):
    """Response model for health check endpoint."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(
        ..., description="Overall system status"
    )
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Check timestamp")
    services: dict[str, HealthStatus] = Field(
        default_factory=dict,
        description="Individual service statuses",
    )
    uptime_seconds: Optional[float] = Field(None, description="Server uptime in seconds")
    active_sessions: Optional[int] = Field(None, description="Guide sessions held in memory")


# =============================================================================
# Error Models
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    notice: Optional[Notice] = Field(None, description="Notice to show the user")
    redirect_to: Optional[str] = Field(None, description="Page the client should navigate to")
    path: Optional[str] = Field(None, description="Request path that caused the error")
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Error timestamp",
    )


class ValidationErrorDetail(BaseModel):
    """Details for validation errors."""

    field: str = Field(..., description="Field that failed validation")
    message: str = Field(..., description="Validation error message")
    value: Optional[Any] = Field(None, description="Invalid value provided")


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: str = Field(default="validation_error", description="Error type")
    message: str = Field(default="Request validation failed", description="Error message")
    errors: list[ValidationErrorDetail] = Field(..., description="List of validation errors")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
