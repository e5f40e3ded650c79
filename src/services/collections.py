"""
Collections and saved listings.

A collection is a user-owned, named group of saved listings. Saving
snapshots the listing's JSON payload; there is no live link back to the
generator. Deleting a collection removes its saved rows through the
database's ON DELETE CASCADE, not here.

Every method takes the signed-in user explicitly and scopes its queries to
that user's rows.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import structlog

from src.core.exceptions import NotFoundError, ValidationFailure
from src.models.schemas import (
    BusinessRecord,
    Category,
    Collection,
    CollectionShare,
    CurrentUser,
    Notice,
    SavedRestaurant,
)
from src.monitoring.metrics import SAVED_BUSINESS_TOTAL
from src.services.base import SupabaseService, utcnow

logger = structlog.get_logger(__name__)

PICK_A_COLLECTION = Notice.info(
    "Choose a Collection",
    "Pick an existing collection or create a new one to save this business.",
)

SHARE_TOKEN_BYTES = 24


@dataclass
class CollectionSummary:
    """A collection plus the number of listings saved in it."""

    collection: Collection
    saved_count: int


@dataclass
class SaveOutcome:
    """Result of a save attempt: the stored row (if any) and a notice."""

    saved: Optional[SavedRestaurant]
    notice: Notice


@dataclass
class SharedCollection:
    """What an anonymous visitor sees through a share link."""

    collection: Collection
    saved: list[SavedRestaurant]
    expires_at: Optional[datetime] = None


class CollectionService(SupabaseService):
    """CRUD over collections, saved_restaurants and collection_shares."""

    # -----------------------------------------------------------------
    # Collections
    # -----------------------------------------------------------------

    async def list_collections(self, user: CurrentUser) -> list[CollectionSummary]:
        """The user's collections, newest first, with saved-listing counts."""
        result = self._run(
            "collections",
            "select",
            self._table("collections")
            .select("*")
            .eq("user_id", user.id)
            .order("created_at", desc=True),
        )
        collections = [Collection.from_db_row(row) for row in (result.data or [])]
        if not collections:
            return []

        saved = self._run(
            "saved_restaurants",
            "select",
            self._table("saved_restaurants")
            .select("collection_id")
            .eq("user_id", user.id)
            .in_("collection_id", [c.id for c in collections]),
        )
        counts: dict[str, int] = {}
        for row in saved.data or []:
            counts[row["collection_id"]] = counts.get(row["collection_id"], 0) + 1

        return [CollectionSummary(c, counts.get(c.id, 0)) for c in collections]

    async def get_collection(self, user: CurrentUser, collection_id: str) -> Collection:
        result = self._run(
            "collections",
            "select",
            self._table("collections")
            .select("*")
            .eq("id", collection_id)
            .eq("user_id", user.id)
            .limit(1),
        )
        if not result.data:
            raise NotFoundError("collection", collection_id)
        return Collection.from_db_row(result.data[0])

    async def create_collection(
        self,
        user: CurrentUser,
        name: str,
        description: Optional[str] = None,
        is_public: bool = False,
    ) -> Collection:
        """
        Create a collection. Names are not deduplicated.

        Raises:
            ValidationFailure: If the name is blank.
        """
        name = name.strip()
        if not name:
            raise ValidationFailure(
                Notice.error("Name Required", "Please give your collection a name."),
                {"field": "name"},
            )

        row = Collection(
            user_id=user.id,
            name=name,
            description=description,
            is_public=is_public,
        ).to_db_row()
        result = self._run("collections", "insert", self._table("collections").insert(row))
        collection = Collection.from_db_row(result.data[0])

        logger.info("collection_created", collection_id=collection.id, user_id=user.id)
        return collection

    async def delete_collection(self, user: CurrentUser, collection_id: str) -> None:
        """
        Delete a collection. Saved listings and share links go with it.

        Raises:
            NotFoundError: If the user owns no such collection.
        """
        result = self._run(
            "collections",
            "delete",
            self._table("collections")
            .delete()
            .eq("id", collection_id)
            .eq("user_id", user.id),
        )
        if not result.data:
            raise NotFoundError("collection", collection_id)
        logger.info("collection_deleted", collection_id=collection_id, user_id=user.id)

    # -----------------------------------------------------------------
    # Saved listings
    # -----------------------------------------------------------------

    async def save_business(
        self,
        user: CurrentUser,
        record: BusinessRecord,
        collection_id: Optional[str],
        city: str,
        country: str,
        category: Optional[Category] = None,
    ) -> SaveOutcome:
        """
        Snapshot a listing into one of the user's collections.

        With no collection chosen nothing is written and the caller gets a
        notice asking the user to pick or create one.
        """
        if not collection_id:
            return SaveOutcome(saved=None, notice=PICK_A_COLLECTION)

        collection = await self.get_collection(user, collection_id)

        row = SavedRestaurant(
            user_id=user.id,
            collection_id=collection.id,
            restaurant_name=record.name,
            restaurant_address=record.address,
            restaurant_data=record.to_payload(),
            city=city,
            country=country,
            category=category.value if category else None,
        ).to_db_row()
        result = self._run(
            "saved_restaurants", "insert", self._table("saved_restaurants").insert(row)
        )
        saved = SavedRestaurant.from_db_row(result.data[0])

        SAVED_BUSINESS_TOTAL.labels(category=row["category"] or "none").inc()
        logger.info(
            "business_saved",
            saved_id=saved.id,
            collection_id=collection.id,
            user_id=user.id,
        )
        return SaveOutcome(
            saved=saved,
            notice=Notice.success(
                "Business Saved",
                f"{record.name} has been saved to {collection.name}.",
            ),
        )

    async def save_to_new_collection(
        self,
        user: CurrentUser,
        name: str,
        record: BusinessRecord,
        city: str,
        country: str,
        category: Optional[Category] = None,
        description: Optional[str] = None,
    ) -> SaveOutcome:
        """Create a collection and save the listing into it."""
        collection = await self.create_collection(user, name, description)
        return await self.save_business(user, record, collection.id, city, country, category)

    async def list_saved(
        self,
        user: CurrentUser,
        collection_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[SavedRestaurant]:
        """Saved listings, newest first, optionally for one collection."""
        query = self._table("saved_restaurants").select("*").eq("user_id", user.id)
        if collection_id:
            query = query.eq("collection_id", collection_id)
        query = query.order("created_at", desc=True)
        if limit:
            query = query.limit(limit)

        result = self._run("saved_restaurants", "select", query)
        return [SavedRestaurant.from_db_row(row) for row in (result.data or [])]

    async def delete_saved(self, user: CurrentUser, saved_id: str) -> None:
        result = self._run(
            "saved_restaurants",
            "delete",
            self._table("saved_restaurants")
            .delete()
            .eq("id", saved_id)
            .eq("user_id", user.id),
        )
        if not result.data:
            raise NotFoundError("saved_restaurant", saved_id)
        logger.info("saved_business_deleted", saved_id=saved_id, user_id=user.id)

    # -----------------------------------------------------------------
    # Sharing
    # -----------------------------------------------------------------

    def share_link(self, token: str) -> str:
        return f"{self._settings.public_origin.rstrip('/')}/shared/{token}"

    async def share_collection(
        self,
        user: CurrentUser,
        collection_id: str,
        expires_in_days: Optional[int] = None,
    ) -> tuple[CollectionShare, str]:
        """
        Publish a collection under an opaque token.

        Args:
            expires_in_days: Link lifetime. None falls back to the configured
                default, which may itself be None (never expires).

        Returns:
            The share row and the public link.
        """
        collection = await self.get_collection(user, collection_id)

        ttl = expires_in_days if expires_in_days is not None else self._settings.share_token_ttl_days
        expires_at = utcnow() + timedelta(days=ttl) if ttl else None

        row = CollectionShare(
            collection_id=collection.id,
            share_token=secrets.token_urlsafe(SHARE_TOKEN_BYTES),
            expires_at=expires_at,
        ).to_db_row()
        result = self._run(
            "collection_shares", "insert", self._table("collection_shares").insert(row)
        )
        share = CollectionShare.from_db_row(result.data[0])

        logger.info(
            "collection_shared",
            collection_id=collection.id,
            expires_at=row.get("expires_at"),
        )
        return share, self.share_link(share.share_token)

    async def resolve_share(self, token: str) -> SharedCollection:
        """
        Read-only lookup behind a share link. No authentication.

        Raises:
            NotFoundError: If the token is unknown, expired or its collection
                is gone.
        """
        result = self._run(
            "collection_shares",
            "select",
            self._table("collection_shares").select("*").eq("share_token", token).limit(1),
        )
        if not result.data:
            raise NotFoundError("share", token)

        share = CollectionShare.from_db_row(result.data[0])
        if share.is_expired(utcnow()):
            logger.info("share_token_expired", collection_id=share.collection_id)
            raise NotFoundError("share", token)

        collection_rows = self._run(
            "collections",
            "select",
            self._table("collections").select("*").eq("id", share.collection_id).limit(1),
        )
        if not collection_rows.data:
            raise NotFoundError("share", token)

        saved_rows = self._run(
            "saved_restaurants",
            "select",
            self._table("saved_restaurants")
            .select("*")
            .eq("collection_id", share.collection_id)
            .order("created_at", desc=True),
        )
        return SharedCollection(
            collection=Collection.from_db_row(collection_rows.data[0]),
            saved=[SavedRestaurant.from_db_row(row) for row in (saved_rows.data or [])],
            expires_at=share.expires_at,
        )
