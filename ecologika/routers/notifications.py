from fastapi import APIRouter, Depends, HTTPException
from typing import List
from datetime import datetime

from ecologika.models.notification import Notification, UnreadCount
from ecologika.models.user import Profile
from ecologika.db.session import get_db
from ecologika.services.auth import get_current_user

router = APIRouter()

@router.get("/notifications", response_model=List[Notification])
async def list_notifications(
    limit: int = 50,
    skip: int = 0,
    unread_only: bool = False,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db)
):
    """Approval outcomes, sales and purchases addressed to the current user"""
    query = {"user_id": current_user.id}
    if unread_only:
        query["read"] = False

    docs = await db.notifications.find(query).sort("created_at", -1).skip(skip).limit(limit).to_list(limit)
    return [Notification(**doc) for doc in docs]

@router.get("/notifications/unread-count", response_model=UnreadCount)
async def count_unread(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db)
):
    count = await db.notifications.count_documents({"user_id": current_user.id, "read": False})
    return UnreadCount(unread_count=count)

@router.put("/notifications/mark-all-read")
async def mark_all_read(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db)
):
    result = await db.notifications.update_many(
        {"user_id": current_user.id, "read": False},
        {"$set": {"read": True, "read_at": datetime.utcnow()}}
    )
    return {"updated": result.modified_count}

@router.put("/notifications/{notification_id}/mark-read", response_model=Notification)
async def mark_read(
    notification_id: str,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db)
):
    query = {"id": notification_id, "user_id": current_user.id}
    doc = await db.notifications.find_one(query)
    if not doc:
        raise HTTPException(status_code=404, detail="Notification not found")

    if not doc.get("read", False):
        update = {"read": True, "read_at": datetime.utcnow()}
        await db.notifications.update_one(query, {"$set": update})
        doc.update(update)

    return Notification(**doc)
