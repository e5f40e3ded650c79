"""Amenity options offered to businesses and matched against member preferences."""

import re
from typing import Optional

import structlog

from src.core.exceptions import NotFoundError, ValidationFailure
from src.models.schemas import AmenityOption, Notice
from src.services.base import SupabaseService

logger = structlog.get_logger(__name__)

CUSTOM_CATEGORY = "custom"


def derive_option_key(display_name: str) -> str:
    """``"Free Wi-Fi Access"`` -> ``"free_wifi_access"``."""
    key = re.sub(r"\s+", "_", display_name.strip().lower())
    return re.sub(r"[^a-z0-9_]", "", key)


class AmenityService(SupabaseService):
    """CRUD over ``amenity_options``."""

    async def list_amenities(self, include_inactive: bool = False) -> list[AmenityOption]:
        query = self._table("amenity_options").select("*")
        if not include_inactive:
            query = query.eq("is_active", True)
        result = self._run("amenity_options", "select", query.order("sort_order"))
        return [AmenityOption.from_db_row(row) for row in (result.data or [])]

    async def add_amenity(
        self,
        display_name: str,
        description: Optional[str] = None,
        sort_order: int = 0,
    ) -> AmenityOption:
        """
        Add a custom amenity. The key is derived from the display name.

        Raises:
            ValidationFailure: If the name is blank, yields an empty key, or
                the key already exists.
        """
        if not display_name.strip():
            raise ValidationFailure(
                Notice.error("Error", "Please enter an amenity name."),
                {"field": "display_name"},
            )

        option_key = derive_option_key(display_name)
        if not option_key:
            raise ValidationFailure(
                Notice.error("Error", "Amenity name must contain letters or numbers."),
                {"field": "display_name"},
            )

        existing = self._run(
            "amenity_options",
            "select",
            self._table("amenity_options").select("id").eq("option_key", option_key),
        )
        if existing.data:
            raise ValidationFailure(
                Notice.error("Error", "An amenity with this name already exists."),
                {"option_key": option_key},
            )

        row = AmenityOption(
            option_key=option_key,
            display_name=display_name.strip(),
            description=description or None,
            category=CUSTOM_CATEGORY,
            sort_order=sort_order,
        ).to_db_row()
        result = self._run("amenity_options", "insert", self._table("amenity_options").insert(row))

        logger.info("amenity_added", option_key=option_key)
        return AmenityOption.from_db_row(result.data[0])

    async def set_active(self, amenity_id: str, is_active: bool) -> AmenityOption:
        result = self._run(
            "amenity_options",
            "update",
            self._table("amenity_options").update({"is_active": is_active}).eq("id", amenity_id),
        )
        if not result.data:
            raise NotFoundError("amenity_option", amenity_id)
        logger.info("amenity_toggled", amenity_id=amenity_id, is_active=is_active)
        return AmenityOption.from_db_row(result.data[0])

    async def delete_amenity(self, amenity_id: str) -> None:
        result = self._run(
            "amenity_options",
            "delete",
            self._table("amenity_options").delete().eq("id", amenity_id),
        )
        if not result.data:
            raise NotFoundError("amenity_option", amenity_id)
        logger.info("amenity_deleted", amenity_id=amenity_id)
