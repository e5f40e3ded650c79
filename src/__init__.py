"""
CityGuide - a business directory and guide for places to eat, stay, drink and play.

This package contains the core modules for the CityGuide service:
- guide: location taxonomy, selection state machine, city resolver,
  mock result generator, presentation and CSV export, guide sessions
- services: Supabase-backed collections, admin and preference services
- api: FastAPI application and endpoints
- config: Pydantic settings
- core: exceptions, request sequencing and the dependency container
- models: Data models and schemas
- monitoring: Prometheus metrics
"""

__version__ = "0.1.0"
