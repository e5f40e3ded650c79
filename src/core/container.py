"""
Dependency Injection Container for CityGuide.

Owns the long-lived objects of the application: the Supabase client, the
mock result generator, the guide session store and the services built on
them. Everything is created lazily on first access and cached.

Usage:
    # At application startup
    container = DependencyContainer()
    await container.initialize()

    # Hand services to whoever needs them
    collections = container.collections

    # At shutdown
    await container.shutdown()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar

import structlog
from supabase import Client, create_client

from src.config.settings import Settings, get_settings
from src.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from src.guide.generator import MockResultGenerator
    from src.guide.session import SessionStore
    from src.services.base import SupabaseService

logger = structlog.get_logger(__name__)

S = TypeVar("S", bound="SupabaseService")


class DependencyContainer:
    """
    Central container for all service dependencies.

    A Supabase client may be injected (tests pass a fake); otherwise one is
    created from settings on first use.

    Example:
        container = DependencyContainer(supabase=fake_client)
        await container.initialize()
        session = container.sessions.create()
    """

    def __init__(self, settings: Settings | None = None, supabase: Client | None = None):
        """
        Initialize the container.

        Args:
            settings: Application settings. Defaults to get_settings().
            supabase: Pre-built Supabase client. Defaults to one built from settings.
        """
        self._settings = settings or get_settings()
        self._supabase: Client | None = supabase
        self._generator: MockResultGenerator | None = None
        self._sessions: SessionStore | None = None
        self._services: dict[type, SupabaseService] = {}
        self._initialized = False

        logger.info("dependency_container_created")

    @property
    def settings(self) -> Settings:
        """Get application settings."""
        return self._settings

    @property
    def supabase(self) -> Client:
        """
        Get the Supabase client (lazy initialization).

        Raises:
            ConfigurationError: If the client cannot be created.
        """
        if self._supabase is None:
            try:
                self._supabase = create_client(
                    self._settings.supabase_url,
                    self._settings.supabase_key.get_secret_value(),
                )
                logger.info("supabase_client_created")
            except Exception as e:
                logger.error("supabase_client_creation_failed", error=str(e))
                raise ConfigurationError(
                    f"Failed to create Supabase client: {e}",
                    config_key="supabase_url",
                ) from e
        return self._supabase

    @property
    def generator(self) -> "MockResultGenerator":
        if self._generator is None:
            from src.guide.generator import MockResultGenerator

            self._generator = MockResultGenerator(
                supported_country=self._settings.supported_country,
                delay_seconds=self._settings.search_delay_seconds,
                default_count=self._settings.default_result_count,
            )
        return self._generator

    @property
    def sessions(self) -> "SessionStore":
        if self._sessions is None:
            from src.guide.session import SessionStore

            self._sessions = SessionStore(self.generator)
        return self._sessions

    def _service(self, cls: Callable[..., S]) -> S:
        if cls not in self._services:
            self._services[cls] = cls(self.supabase, self._settings)
        return self._services[cls]

    @property
    def collections(self):
        from src.services.collections import CollectionService

        return self._service(CollectionService)

    @property
    def businesses(self):
        from src.services.businesses import BusinessService

        return self._service(BusinessService)

    @property
    def plans(self):
        from src.services.businesses import SubscriptionPlanService

        return self._service(SubscriptionPlanService)

    @property
    def gift_cards(self):
        from src.services.gift_cards import GiftCardService

        return self._service(GiftCardService)

    @property
    def amenities(self):
        from src.services.amenities import AmenityService

        return self._service(AmenityService)

    @property
    def preferences(self):
        from src.services.preferences import PreferenceService

        return self._service(PreferenceService)

    @property
    def admin(self):
        from src.services.admin import AdminService

        return self._service(AdminService)

    async def initialize(self) -> None:
        """
        Create the session store and the Supabase client.

        No remote call is made here; connectivity is reported by /health/ready.
        """
        if self._initialized:
            logger.warning("container_already_initialized")
            return

        logger.info("container_initializing")
        _ = self.supabase
        _ = self.sessions
        self._initialized = True
        logger.info("container_initialized")

    async def shutdown(self) -> None:
        """Drop all guide sessions and cached services."""
        logger.info("container_shutting_down")

        if self._sessions is not None:
            self._sessions.clear()
            self._sessions = None
        self._services.clear()

        self._initialized = False
        logger.info("container_shutdown_complete")

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized


# Global container instance for convenience
# Prefer passing container explicitly via dependency injection
_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """
    Get the global container instance.

    Creates one if it doesn't exist.
    """
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def set_container(container: DependencyContainer | None) -> None:
    """Replace the global container (used by tests)."""
    global _container
    _container = container


async def initialize_container() -> DependencyContainer:
    """
    Initialize and return the global container.

    Convenience function for application startup.
    """
    container = get_container()
    await container.initialize()
    return container


async def shutdown_container() -> None:
    """
    Shutdown the global container.

    Convenience function for application shutdown.
    """
    global _container
    if _container is not None:
        await _container.shutdown()
        _container = None
