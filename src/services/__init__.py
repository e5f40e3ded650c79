"""
Supabase-backed services.

Each service wraps one group of tables. Remote failures surface as
BackendError; bad input surfaces as ValidationFailure carrying a notice.
"""

from src.services.admin import AdminService, SystemAnalytics
from src.services.amenities import AmenityService, derive_option_key
from src.services.base import SupabaseService
from src.services.businesses import BusinessService, SubscriptionPlanService
from src.services.collections import (
    CollectionService,
    CollectionSummary,
    SaveOutcome,
    SharedCollection,
)
from src.services.gift_cards import GiftCardPurchase, GiftCardService
from src.services.preferences import PreferenceService

__all__ = [
    "AdminService",
    "SystemAnalytics",
    "AmenityService",
    "derive_option_key",
    "SupabaseService",
    "BusinessService",
    "SubscriptionPlanService",
    "CollectionService",
    "CollectionSummary",
    "SaveOutcome",
    "SharedCollection",
    "GiftCardPurchase",
    "GiftCardService",
    "PreferenceService",
]
