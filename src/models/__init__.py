"""
Data Models and Schemas.

This module defines the data structures used throughout CityGuide:

- Guide records: BusinessRecord with optional SocialLinks / ContactDetails
- Notices: transient user-facing messages
- Persisted rows: Collection, SavedRestaurant, CollectionShare, BusinessProfile,
  SubscriptionPlan, GiftCard, AmenityOption, UserPreferences

Example:
    from src.models import BusinessRecord, Notice

    notice = Notice.error("USA Cities Only", "Currently only supporting cities in the United States.")
"""

from src.models.schemas import (
    AmenityOption,
    BusinessProfile,
    BusinessRecord,
    BusinessStatus,
    Category,
    Collection,
    CollectionShare,
    ContactDetails,
    CurrentUser,
    GiftCard,
    GiftCardStatus,
    Notice,
    ReviewSource,
    SavedRestaurant,
    SocialLinks,
    SubscriptionPlan,
    SubscriptionTier,
    TRY_AGAIN,
    UserPreferences,
)

__all__ = [
    # Enums
    "Category",
    "ReviewSource",
    "SubscriptionTier",
    "BusinessStatus",
    "GiftCardStatus",
    # Guide
    "BusinessRecord",
    "SocialLinks",
    "ContactDetails",
    "Notice",
    "TRY_AGAIN",
    # Identity
    "CurrentUser",
    # Persisted rows
    "Collection",
    "SavedRestaurant",
    "CollectionShare",
    "BusinessProfile",
    "SubscriptionPlan",
    "GiftCard",
    "AmenityOption",
    "UserPreferences",
]
