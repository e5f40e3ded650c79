"""Admin privileges and system-wide analytics."""

from dataclasses import asdict, dataclass

import structlog

from src.core.exceptions import ValidationFailure
from src.models.schemas import CurrentUser, Notice
from src.services.base import SupabaseService

logger = structlog.get_logger(__name__)


@dataclass
class SystemAnalytics:
    """Head counts shown on the admin dashboard."""

    total_users: int
    total_businesses: int
    total_saved_restaurants: int
    total_collections: int
    total_admins: int
    active_subscriptions: int

    def as_dict(self) -> dict:
        return asdict(self)


class AdminService(SupabaseService):
    """Admin checks, grants and dashboard counts. Rules live in database RPCs."""

    async def is_admin(self, user: CurrentUser) -> bool:
        result = self._rpc("is_admin", {"user_id": user.id})
        return bool(result.data)

    async def grant_admin(self, email: str) -> Notice:
        """
        Give admin rights to the account with this email.

        Raises:
            ValidationFailure: If no email is given.
        """
        email = email.strip()
        if not email:
            raise ValidationFailure(
                Notice.error("Error", "Please enter an email address."),
                {"field": "email"},
            )

        self._rpc("set_admin_by_email", {"user_email": email})
        logger.info("admin_granted", email=email)
        return Notice.success("Success", f"Admin privileges granted to {email}.")

    async def system_analytics(self) -> SystemAnalytics:
        return SystemAnalytics(
            total_users=self._count("profiles"),
            total_businesses=self._count("businesses"),
            total_saved_restaurants=self._count("saved_restaurants"),
            total_collections=self._count("collections"),
            total_admins=self._count("profiles", is_admin=True),
            active_subscriptions=self._count("business_subscriptions", status="active"),
        )
