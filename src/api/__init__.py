"""
CityGuide FastAPI Application.

This module contains the REST API for CityGuide:

- main: FastAPI application entry point and configuration
- routes/: API endpoint definitions organized by domain
- models: Pydantic request/response models
- dependencies: FastAPI dependency injection providers

API Structure:
- /health - Health check and readiness probes
- /api/v1/taxonomy - Regions, countries and cities
- /api/v1/guide - Guide sessions, search, CSV export
- /api/v1/collections, /api/v1/shared - Saved listings and share links
- /api/v1/businesses/mine - Owner business registration and editing
- /api/v1/admin - Business management
- /metrics - Prometheus metrics

Example:
    from src.api.main import app

    # Run with: uvicorn src.api.main:app --reload
"""

from src.api.main import app

__all__ = ["app"]
