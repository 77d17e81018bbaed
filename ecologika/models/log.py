from pydantic import BaseModel, Field
from typing import Optional
import uuid
from datetime import datetime

class ActivityLog(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    actor_name: str
    action: str  # 'product_created', 'purchase_completed', 'profile_approved', 'password_changed', etc.
    details: str
    target_id: Optional[str] = None
    target_type: Optional[str] = None  # 'product', 'profile', 'purchase'
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
