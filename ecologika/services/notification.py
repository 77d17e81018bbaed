from typing import Optional, Dict, Any
import logging

from ecologika.models.notification import Notification

logger = logging.getLogger(__name__)

async def create_notification_helper(
    db,
    user_id: str,
    title: str,
    message: str,
    notification_type: str = "info",
    action_url: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
):
    """Create a notification for a single user"""
    notification_obj = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=notification_type,
        action_url=action_url,
        metadata=metadata or {},
    )
    await db.notifications.insert_one(notification_obj.model_dump())
    return notification_obj

async def notify_quietly(db, **kwargs) -> Optional[Notification]:
    """Same as create_notification_helper, but never raises.

    Used for side effects of an operation that has already been committed.
    """
    try:
        return await create_notification_helper(db, **kwargs)
    except Exception as e:
        logger.error(f"Failed to send notification to {kwargs.get('user_id')}: {e}")
        return None
