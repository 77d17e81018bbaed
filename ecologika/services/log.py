from fastapi import Request
from typing import Optional
import logging

from ecologika.models.log import ActivityLog

logger = logging.getLogger(__name__)

def client_ip(request: Request) -> str:
    # First hop of X-Forwarded-For when running behind the proxy
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"

async def log_activity(
    db,
    user_id: str,
    actor_name: str,
    action: str,
    details: str,
    target_id: Optional[str] = None,
    target_type: Optional[str] = None,
    request: Optional[Request] = None
) -> Optional[ActivityLog]:
    """Append an entry to the admin audit trail.

    The audited operation has already happened by the time this runs, so a
    failed insert is logged and swallowed.
    """
    entry = ActivityLog(
        user_id=user_id,
        actor_name=actor_name,
        action=action,
        details=details,
        target_id=target_id,
        target_type=target_type,
        ip_address=client_ip(request) if request else None,
        user_agent=request.headers.get("user-agent", "unknown") if request else None,
    )
    try:
        await db.activity_logs.insert_one(entry.model_dump())
    except Exception as e:
        logger.error(f"Failed to record {action} for {user_id}: {e}")
        return None
    return entry
