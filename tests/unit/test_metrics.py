"""Unit tests for Prometheus metric helpers."""

import pytest
from prometheus_client import REGISTRY

from src.monitoring.metrics import (
    record_rejected_search,
    track_api_request,
    track_backend_operation,
    track_guide_search,
)
from src.models.schemas import Category


def _value(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestGuideSearchMetrics:
    def test_success_counted(self):
        before = _value("cityguide_guide_search_total", category="Stay", outcome="success")
        with track_guide_search(Category.STAY):
            pass
        after = _value("cityguide_guide_search_total", category="Stay", outcome="success")
        assert after == before + 1

    def test_error_counted_and_reraised(self):
        before = _value("cityguide_guide_search_total", category="Play", outcome="error")
        with pytest.raises(RuntimeError):
            with track_guide_search(Category.PLAY):
                raise RuntimeError("boom")
        after = _value("cityguide_guide_search_total", category="Play", outcome="error")
        assert after == before + 1

    def test_rejection_without_category(self):
        before = _value("cityguide_guide_search_total", category="none", outcome="rejected")
        record_rejected_search(None)
        after = _value("cityguide_guide_search_total", category="none", outcome="rejected")
        assert after == before + 1


class TestRequestMetrics:
    def test_endpoint_can_be_relabelled(self):
        labels = dict(method="GET", endpoint="/api/v1/guide/sessions/{session_id}", status_code="200")
        before = _value("cityguide_api_request_total", **labels)

        with track_api_request("GET", "/api/v1/guide/sessions/abc") as ctx:
            ctx["endpoint"] = "/api/v1/guide/sessions/{session_id}"
            ctx["status_code"] = 200

        assert _value("cityguide_api_request_total", **labels) == before + 1

    def test_defaults_to_500(self):
        labels = dict(method="POST", endpoint="/boom", status_code="500")
        before = _value("cityguide_api_request_total", **labels)
        with pytest.raises(ValueError):
            with track_api_request("POST", "/boom"):
                raise ValueError("boom")
        assert _value("cityguide_api_request_total", **labels) == before + 1


def test_backend_operation_status():
    ok = dict(table="collections", operation="metrics-test", status="success")
    failed = dict(table="collections", operation="metrics-test", status="error")
    ok_before = _value("cityguide_backend_operations_total", **ok)
    failed_before = _value("cityguide_backend_operations_total", **failed)

    with track_backend_operation("collections", "metrics-test"):
        pass
    with pytest.raises(KeyError):
        with track_backend_operation("collections", "metrics-test"):
            raise KeyError("missing")

    assert _value("cityguide_backend_operations_total", **ok) == ok_before + 1
    assert _value("cityguide_backend_operations_total", **failed) == failed_before + 1
