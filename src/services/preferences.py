"""Member amenity preferences and language."""

from typing import Any

import structlog

from src.models.schemas import CurrentUser, UserPreferences
from src.services.base import SupabaseService

logger = structlog.get_logger(__name__)


class PreferenceService(SupabaseService):
    """Read and upsert the ``user_preferences`` row of the signed-in user."""

    async def get_preferences(self, user: CurrentUser) -> UserPreferences:
        """Stored preferences, or defaults when the user has none yet."""
        result = self._run(
            "user_preferences",
            "select",
            self._table("user_preferences").select("*").eq("user_id", user.id).limit(1),
        )
        if not result.data:
            return UserPreferences(user_id=user.id)

        # Null columns fall back to the model defaults
        row = {key: value for key, value in result.data[0].items() if value is not None}
        return UserPreferences.from_db_row(row)

    async def save_preferences(self, user: CurrentUser, changes: dict[str, Any]) -> UserPreferences:
        """Merge changes into the current preferences and upsert the row."""
        current = await self.get_preferences(user)
        update = {
            key: value
            for key, value in changes.items()
            if key in UserPreferences.model_fields and key != "user_id"
        }
        row = UserPreferences.model_validate({**current.model_dump(), **update}).to_db_row()

        self._run(
            "user_preferences",
            "upsert",
            self._table("user_preferences").upsert(row, on_conflict="user_id"),
        )
        logger.info("preferences_saved", user_id=user.id)
        return UserPreferences.from_db_row(row)
