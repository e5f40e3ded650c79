"""
CityGuide Test Suite.

- unit/: Guide flow, services against the in-memory Supabase fake, metrics
- integration/: HTTP tests through the FastAPI app with TestClient
- conftest.py: Shared fixtures and the fake Supabase client

Run tests with: pytest
"""
