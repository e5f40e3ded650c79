"""API route modules."""

from src.api.routes.admin import router as admin_router
from src.api.routes.businesses import router as businesses_router
from src.api.routes.collections import router as collections_router
from src.api.routes.collections import shared_router
from src.api.routes.gift_cards import router as gift_cards_router
from src.api.routes.guide import router as guide_router
from src.api.routes.health import router as health_router
from src.api.routes.pages import router as pages_router
from src.api.routes.preferences import router as preferences_router
from src.api.routes.taxonomy import router as taxonomy_router

__all__ = [
    "admin_router",
    "businesses_router",
    "collections_router",
    "shared_router",
    "gift_cards_router",
    "guide_router",
    "health_router",
    "pages_router",
    "preferences_router",
    "taxonomy_router",
]
