"""
Monitoring and observability for CityGuide.

Provides Prometheus metrics for guide searches, exports, saves, API requests
and Supabase calls.

Usage:
    from src.monitoring import track_backend_operation

    with track_backend_operation("collections", "delete"):
        supabase.table("collections").delete().eq("id", collection_id).execute()
"""

from src.monitoring.metrics import (
    API_REQUEST_DURATION,
    BACKEND_OPERATIONS,
    CSV_EXPORT_TOTAL,
    GUIDE_SEARCH_TOTAL,
    SAVED_BUSINESS_TOTAL,
    get_metrics_app,
    record_rejected_search,
    track_api_request,
    track_backend_operation,
    track_guide_search,
)

__all__ = [
    "API_REQUEST_DURATION",
    "BACKEND_OPERATIONS",
    "CSV_EXPORT_TOTAL",
    "GUIDE_SEARCH_TOTAL",
    "SAVED_BUSINESS_TOTAL",
    "get_metrics_app",
    "record_rejected_search",
    "track_api_request",
    "track_backend_operation",
    "track_guide_search",
]
