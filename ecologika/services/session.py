"""Session store: the single writer of the authenticated profile.

Consumers read the profile through :class:`SessionStore` and mutate it only
through the named methods below. The in-memory profile is replaced after the
store confirms a write, never before, so a failed write leaves it untouched.
"""
import logging
from datetime import datetime
from typing import Callable, List, Set

from fastapi import Depends
from pymongo import ReturnDocument

from ecologika.db.session import get_db
from ecologika.models.user import Profile, SessionInfo
from ecologika.services.auth import get_current_user

logger = logging.getLogger(__name__)

Listener = Callable[[Profile], None]


class SessionStore:
    def __init__(self, db, profile: Profile):
        self._db = db
        self._profile = profile
        self._listeners: List[Listener] = []
        self._in_flight: Set[str] = set()

    @property
    def profile(self) -> Profile:
        return self._profile

    @property
    def is_seller(self) -> bool:
        return self._profile.user_type == "seller"

    @property
    def is_master(self) -> bool:
        return self._profile.role == "admin"

    @property
    def is_approved(self) -> bool:
        return self._profile.is_approved

    def info(self) -> SessionInfo:
        return SessionInfo(
            profile=self._profile,
            is_seller=self.is_seller,
            is_master=self.is_master,
            is_approved=self.is_approved,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def is_product_saved(self, product_id: str) -> bool:
        return product_id in self._profile.saved_products

    def saved_product_ids(self) -> List[str]:
        return list(self._profile.saved_products)

    async def save_product(self, product_id: str) -> Profile:
        if self.is_product_saved(product_id):
            return self._profile
        return await self._write_saved_products(product_id, {"$addToSet": {"saved_products": product_id}})

    async def unsave_product(self, product_id: str) -> Profile:
        # Not short-circuited: this snapshot may predate a save made by another request
        return await self._write_saved_products(product_id, {"$pull": {"saved_products": product_id}})

    async def refresh(self) -> Profile:
        doc = await self._db.profiles.find_one({"id": self._profile.id})
        if doc is not None:
            self._replace(Profile(**doc))
        return self._profile

    async def _write_saved_products(self, product_id: str, operation: dict) -> Profile:
        # A second toggle for the same product while one is pending is dropped
        if product_id in self._in_flight:
            return self._profile

        self._in_flight.add(product_id)
        try:
            # Concurrent requests hold separate snapshots; the list only changes through atomic operators
            doc = await self._db.profiles.find_one_and_update(
                {"id": self._profile.id},
                {**operation, "$set": {"updated_at": datetime.utcnow()}},
                return_document=ReturnDocument.AFTER
            )
        finally:
            self._in_flight.discard(product_id)

        if doc is None:
            logger.warning(f"Profile {self._profile.id} vanished while updating saved products")
            return self._profile

        self._replace(Profile(**doc))
        return self._profile

    def _replace(self, profile: Profile):
        self._profile = profile
        for listener in list(self._listeners):
            try:
                listener(profile)
            except Exception as e:
                logger.error(f"Session listener failed: {e}")


async def get_session(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db)
) -> SessionStore:
    return SessionStore(db, current_user)
