"""
Prometheus metrics for CityGuide observability.

Usage:
    from src.monitoring.metrics import track_backend_operation

    with track_backend_operation("collections", "insert"):
        supabase.table("collections").insert(row).execute()

    # Or manually
    CSV_EXPORT_TOTAL.labels(category="Eat").inc()
"""

import time
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from starlette.applications import Starlette
from starlette.responses import Response
from starlette.routing import Route


# =============================================================================
# Metric Definitions
# =============================================================================

# Guide search metrics
GUIDE_SEARCH_TOTAL = Counter(
    "cityguide_guide_search_total",
    "Total number of guide searches",
    ["category", "outcome"],
)

GUIDE_SEARCH_DURATION = Histogram(
    "cityguide_guide_search_duration_seconds",
    "Duration of guide searches in seconds, artificial delay included",
    ["category"],
    buckets=[0.1, 0.5, 1.0, 2.0, 3.0, 5.0, 10.0],
)

CSV_EXPORT_TOTAL = Counter(
    "cityguide_csv_export_total",
    "Total number of CSV exports",
    ["category"],
)

SAVED_BUSINESS_TOTAL = Counter(
    "cityguide_saved_business_total",
    "Total number of listings saved into collections",
    ["category"],
)

# API request metrics
API_REQUEST_DURATION = Histogram(
    "cityguide_api_request_duration_seconds",
    "Duration of API requests in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

API_REQUEST_TOTAL = Counter(
    "cityguide_api_request_total",
    "Total number of API requests",
    ["method", "endpoint", "status_code"],
)

# Backend (Supabase) metrics
BACKEND_OPERATIONS = Counter(
    "cityguide_backend_operations_total",
    "Total Supabase operations",
    ["table", "operation", "status"],
)

BACKEND_LATENCY = Histogram(
    "cityguide_backend_latency_seconds",
    "Latency of Supabase operations",
    ["table", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


def _category_label(category) -> str:
    return getattr(category, "value", category) or "none"


# =============================================================================
# Tracking Context Managers
# =============================================================================


@contextmanager
def track_guide_search(category) -> Generator[None, None, None]:
    """
    Context manager to track guide search duration and outcome.

    Usage:
        with track_guide_search(Category.EAT):
            records = await produce_records()
    """
    label = _category_label(category)
    start_time = time.perf_counter()
    outcome = "success"
    try:
        yield
    except Exception:
        outcome = "error"
        raise
    finally:
        duration = time.perf_counter() - start_time
        GUIDE_SEARCH_DURATION.labels(category=label).observe(duration)
        GUIDE_SEARCH_TOTAL.labels(category=label, outcome=outcome).inc()


def record_rejected_search(category: Optional[object]) -> None:
    """Count a search that failed validation before any work was done."""
    GUIDE_SEARCH_TOTAL.labels(category=_category_label(category), outcome="rejected").inc()


@contextmanager
def track_api_request(
    method: str,
    endpoint: str,
) -> Generator[dict, None, None]:
    """
    Context manager to track API request duration and status.

    Usage:
        with track_api_request("GET", "/health") as ctx:
            response = await call_next(request)
            ctx["status_code"] = response.status_code
    """
    start_time = time.perf_counter()
    context = {"status_code": "500", "endpoint": endpoint}  # Default to error
    try:
        yield context
    finally:
        duration = time.perf_counter() - start_time
        status_code = str(context.get("status_code", "500"))
        API_REQUEST_DURATION.labels(
            method=method,
            endpoint=context["endpoint"],
            status_code=status_code,
        ).observe(duration)
        API_REQUEST_TOTAL.labels(
            method=method,
            endpoint=context["endpoint"],
            status_code=status_code,
        ).inc()


@contextmanager
def track_backend_operation(
    table: str,
    operation: str,
) -> Generator[None, None, None]:
    """
    Context manager to track Supabase operations.

    Usage:
        with track_backend_operation("gift_cards", "select"):
            result = supabase.table("gift_cards").select("*").execute()
    """
    start_time = time.perf_counter()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        duration = time.perf_counter() - start_time
        BACKEND_OPERATIONS.labels(
            table=table,
            operation=operation,
            status=status,
        ).inc()
        BACKEND_LATENCY.labels(
            table=table,
            operation=operation,
        ).observe(duration)


# =============================================================================
# Metrics Endpoint
# =============================================================================


async def metrics_endpoint(request) -> Response:
    """Prometheus metrics endpoint handler."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


def get_metrics_app() -> Starlette:
    """
    Get a Starlette app for serving metrics.

    Mount this at /metrics in your main app:
        from src.monitoring.metrics import get_metrics_app
        app.mount("/metrics", get_metrics_app())
    """
    return Starlette(
        routes=[
            Route("/", metrics_endpoint),
        ]
    )
