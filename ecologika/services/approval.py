import logging
from datetime import datetime
from typing import List, Optional

from ecologika.models.product import Product
from ecologika.models.user import Profile

logger = logging.getLogger(__name__)

PENDING = "pending"


class NotPending(Exception):
    pass


async def list_pending_profiles(db) -> List[Profile]:
    docs = await db.profiles.find({"approval_status": PENDING}).sort("created_at", -1).to_list(1000)
    return [Profile(**doc) for doc in docs]


async def list_pending_products(db) -> List[Product]:
    docs = await db.products.find({"approval_status": PENDING}).sort("created_at", -1).to_list(1000)
    return [Product(**doc) for doc in docs]


async def _decide(collection, entity_id: str, approved: bool, admin_id: str, reason: Optional[str], **extra) -> dict:
    now = datetime.utcnow()
    update_data = {
        "approval_status": "approved" if approved else "rejected",
        "approved_at": now if approved else None,
        "approved_by": admin_id,
        "rejection_reason": None if approved else reason,
        "updated_at": now,
        **extra,
    }

    # Conditional on pending so a decision is applied at most once
    result = await collection.update_one(
        {"id": entity_id, "approval_status": PENDING},
        {"$set": update_data}
    )
    if result.matched_count == 0:
        raise NotPending(entity_id)

    return await collection.find_one({"id": entity_id})


async def approve_profile(db, profile_id: str, admin: Profile) -> Profile:
    doc = await _decide(db.profiles, profile_id, True, admin.id, None, is_approved=True)
    logger.info(f"Profile {profile_id} approved by {admin.id}")
    return Profile(**doc)


async def reject_profile(db, profile_id: str, admin: Profile, reason: str) -> Profile:
    doc = await _decide(db.profiles, profile_id, False, admin.id, reason, is_approved=False)
    logger.info(f"Profile {profile_id} rejected by {admin.id}: {reason}")
    return Profile(**doc)


async def approve_product(db, product_id: str, admin: Profile) -> Product:
    doc = await _decide(db.products, product_id, True, admin.id, None)
    logger.info(f"Product {product_id} approved by {admin.id}")
    return Product(**doc)


async def reject_product(db, product_id: str, admin: Profile, reason: str) -> Product:
    doc = await _decide(db.products, product_id, False, admin.id, reason)
    logger.info(f"Product {product_id} rejected by {admin.id}: {reason}")
    return Product(**doc)
