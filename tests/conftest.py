"""
Pytest Configuration and Shared Fixtures.

This module provides common fixtures for all tests:

- fake_supabase: In-memory stand-in for the Supabase client
- container: DependencyContainer wired to the fake and installed globally
- user / other_user / admin_user: Signed-in users with bearer tokens
- generator: Seeded mock result generator with no delay
- complete_state: A selection ready to search
- sample_record: One business listing
"""

import os

# Settings are read at import time by the API module
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("SEARCH_DELAY_SECONDS", "0")

import random
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Optional
from uuid import uuid4

import pytest

from src.config.settings import Settings, get_settings
from src.core.container import DependencyContainer, set_container
from src.guide.generator import MockResultGenerator
from src.guide.selection import SelectionState
from src.models.schemas import (
    BusinessRecord,
    Category,
    ContactDetails,
    CurrentUser,
    ReviewSource,
    SocialLinks,
)

get_settings.cache_clear()


# =============================================================================
# Fake Supabase
# =============================================================================

# Child rows removed with their parent (ON DELETE CASCADE)
CASCADES = {
    "collections": [("saved_restaurants", "collection_id"), ("collection_shares", "collection_id")],
    "businesses": [("gift_cards", "business_id"), ("business_subscriptions", "business_id")],
}

TABLE_DEFAULTS: dict[str, Callable[[], dict[str, Any]]] = {
    "gift_cards": lambda: {
        "status": "active",
        "expires_at": (datetime.now(timezone.utc) + timedelta(days=365)).isoformat(),
    },
    "collections": lambda: {"is_public": False},
    "amenity_options": lambda: {"is_active": True, "category": "general", "sort_order": 0},
}


class FakeResponse:
    """Mimics the APIResponse returned by postgrest ``execute()``."""

    def __init__(self, data: list[dict], count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query builder over an in-memory table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._operation = "select"
        self._columns = "*"
        self._count: Optional[str] = None
        self._payload: Any = None
        self._on_conflict: Optional[str] = None
        self._filters: list[Callable[[dict], bool]] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: Optional[int] = None

    # Operations

    def select(self, columns: str = "*", count: Optional[str] = None) -> "FakeQuery":
        self._operation = "select"
        self._columns = columns
        self._count = count
        return self

    def insert(self, rows) -> "FakeQuery":
        self._operation = "insert"
        self._payload = rows
        return self

    def update(self, changes: dict) -> "FakeQuery":
        self._operation = "update"
        self._payload = changes
        return self

    def upsert(self, row: dict, on_conflict: Optional[str] = None) -> "FakeQuery":
        self._operation = "upsert"
        self._payload = row
        self._on_conflict = on_conflict or "id"
        return self

    def delete(self) -> "FakeQuery":
        self._operation = "delete"
        return self

    # Filters and modifiers

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values) -> "FakeQuery":
        allowed = list(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    # Execution

    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self._filters)

    def execute(self) -> FakeResponse:
        self._db.calls.append((self._table, self._operation))
        if (self._table, self._operation) in self._db.failures:
            raise RuntimeError(f"simulated failure on {self._table}.{self._operation}")
        return getattr(self, f"_execute_{self._operation}")()

    def _execute_select(self) -> FakeResponse:
        rows = [dict(row) for row in self._db.rows(self._table) if self._matches(row)]
        if "business:businesses" in self._columns:
            rows = self._join_business(rows)
        for column, desc in reversed(self._order):
            rows.sort(key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        if self._limit is not None:
            rows = rows[: self._limit]
        count = len(rows) if self._count else None
        return FakeResponse(rows, count)

    def _join_business(self, rows: list[dict]) -> list[dict]:
        businesses = {b["id"]: b for b in self._db.rows("businesses")}
        joined = []
        for row in rows:
            business = businesses.get(row.get("business_id"))
            if business is None:
                continue
            row["business"] = {
                "business_name": business.get("business_name"),
                "city": business.get("city"),
                "country": business.get("country"),
            }
            joined.append(row)
        return joined

    def _execute_insert(self) -> FakeResponse:
        rows = self._payload if isinstance(self._payload, list) else [self._payload]
        return FakeResponse([self._db.add(self._table, row) for row in rows])

    def _execute_update(self) -> FakeResponse:
        updated = []
        for row in self._db.rows(self._table):
            if self._matches(row):
                row.update(self._payload)
                updated.append(dict(row))
        return FakeResponse(updated)

    def _execute_upsert(self) -> FakeResponse:
        key = self._on_conflict
        for row in self._db.rows(self._table):
            if row.get(key) == self._payload.get(key):
                row.update(self._payload)
                return FakeResponse([dict(row)])
        return FakeResponse([self._db.add(self._table, self._payload)])

    def _execute_delete(self) -> FakeResponse:
        table = self._db.rows(self._table)
        removed = [row for row in table if self._matches(row)]
        self._db.tables[self._table] = [row for row in table if not self._matches(row)]
        for row in removed:
            self._db.cascade(self._table, row["id"])
        return FakeResponse([dict(row) for row in removed])


class FakeRpc:
    def __init__(self, db: "FakeSupabase", function: str, params: dict):
        self._db = db
        self._function = function
        self._params = params

    def execute(self) -> FakeResponse:
        self._db.calls.append((self._function, "rpc"))
        if (self._function, "rpc") in self._db.failures:
            raise RuntimeError(f"simulated failure on {self._function}")
        handler = getattr(self._db, f"_rpc_{self._function}")
        return FakeResponse(handler(**self._params))


class FakeAuth:
    """Resolves bearer tokens to users like ``supabase.auth.get_user``."""

    def __init__(self):
        self._tokens: dict[str, SimpleNamespace] = {}

    def register(self, token: str, user: CurrentUser) -> None:
        self._tokens[token] = SimpleNamespace(id=user.id, email=user.email)

    def get_user(self, token: str) -> SimpleNamespace:
        if token not in self._tokens:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=self._tokens[token])


class FakeSupabase:
    """In-memory stand-in for ``supabase.Client``."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: set[tuple[str, str]] = set()
        self.auth = FakeAuth()
        self._tick = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, function: str, params: dict) -> FakeRpc:
        return FakeRpc(self, function, params)

    def fail(self, table: str, operation: str) -> None:
        """Make the next and every later call to table.operation raise."""
        self.failures.add((table, operation))

    def rows(self, table: str) -> list[dict]:
        return self.tables.setdefault(table, [])

    def add(self, table: str, row: dict) -> dict:
        # Strictly increasing timestamps keep "newest first" deterministic
        self._tick += 1
        stamp = datetime.now(timezone.utc) + timedelta(microseconds=self._tick)
        stored = {**TABLE_DEFAULTS.get(table, dict)(), **row}
        stored.setdefault("id", str(uuid4()))
        stored.setdefault("created_at", stamp.isoformat())
        self.rows(table).append(stored)
        return dict(stored)

    def cascade(self, table: str, row_id: str) -> None:
        for child, column in CASCADES.get(table, []):
            children = self.rows(child)
            removed = [row for row in children if row.get(column) == row_id]
            self.tables[child] = [row for row in children if row.get(column) != row_id]
            for row in removed:
                self.cascade(child, row["id"])

    def _rpc_is_admin(self, user_id: str) -> bool:
        return any(
            row["id"] == user_id and row.get("is_admin") for row in self.rows("profiles")
        )

    def _rpc_set_admin_by_email(self, user_email: str) -> None:
        matched = [row for row in self.rows("profiles") if row.get("email") == user_email]
        if not matched:
            raise RuntimeError(f"No profile with email {user_email}")
        for row in matched:
            row["is_admin"] = True
        return None


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: fake credentials and no search delay."""
    return Settings(
        supabase_url="http://localhost:54321",
        supabase_key="test-service-key",
        search_delay_seconds=0,
        public_origin="https://cityguide.test",
    )


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def container(settings, fake_supabase):
    """Container on the fake client, installed as the global container."""
    container = DependencyContainer(settings=settings, supabase=fake_supabase)
    set_container(container)
    yield container
    set_container(None)


def _add_profile(fake: FakeSupabase, user: CurrentUser, is_admin: bool = False) -> None:
    fake.rows("profiles").append({"id": user.id, "email": user.email, "is_admin": is_admin})


@pytest.fixture
def user(fake_supabase) -> CurrentUser:
    member = CurrentUser(id=str(uuid4()), email="member@example.com")
    _add_profile(fake_supabase, member)
    fake_supabase.auth.register("member-token", member)
    return member


@pytest.fixture
def other_user(fake_supabase) -> CurrentUser:
    member = CurrentUser(id=str(uuid4()), email="someone-else@example.com")
    _add_profile(fake_supabase, member)
    fake_supabase.auth.register("other-token", member)
    return member


@pytest.fixture
def admin_user(fake_supabase) -> CurrentUser:
    admin = CurrentUser(id=str(uuid4()), email="admin@example.com")
    _add_profile(fake_supabase, admin, is_admin=True)
    fake_supabase.auth.register("admin-token", admin)
    return admin


@pytest.fixture
def generator() -> MockResultGenerator:
    """Seeded generator with no artificial delay."""
    return MockResultGenerator(delay_seconds=0, rng=random.Random(1234))


@pytest.fixture
def complete_state() -> SelectionState:
    return SelectionState(
        category=Category.EAT,
        region="North America",
        country="United States",
        city="Austin",
        result_count=5,
        ready=True,
    )


@pytest.fixture
def sample_record() -> BusinessRecord:
    """Return a sample business listing for testing."""
    return BusinessRecord(
        name='Joe\'s "Famous" Grill',
        address="123 Main St, Austin, United States",
        map_reference="https://maps.google.com/?q=Austin%2C%20United%20States",
        social_links=SocialLinks(instagram="https://instagram.com/business1"),
        contact=ContactDetails(phone="+1-512-555-0101", website="https://business1.com"),
        images=["https://images.example.com/1.jpg", "https://images.example.com/2.jpg"],
        rating=4.25,
        review_count=321,
        source=ReviewSource.YELP,
    )
