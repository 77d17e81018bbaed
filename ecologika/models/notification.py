from pydantic import BaseModel, Field
from typing import Any, Dict, Literal, Optional
import uuid
from datetime import datetime

NotificationType = Literal["success", "info", "warning", "error"]

class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    title: str
    message: str
    type: NotificationType = "info"
    read: bool = False
    action_url: Optional[str] = None  # Front-end route, e.g. /my-purchases
    metadata: Dict[str, Any] = {}  # product_id, purchase_id, ...
    created_at: datetime = Field(default_factory=datetime.utcnow)
    read_at: Optional[datetime] = None

class UnreadCount(BaseModel):
    unread_count: int
