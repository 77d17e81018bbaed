from pydantic import BaseModel, Field
from typing import List
import uuid
from datetime import datetime

class ProductImage(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    product_id: str
    image_url: str
    image_order: int = Field(1, ge=1)
    created_at: datetime = Field(default_factory=datetime.utcnow)

class ImageReorderRequest(BaseModel):
    image_ids: List[str]  # Full set of image IDs in the desired display order

class ImagePositionRequest(BaseModel):
    position: int = Field(..., ge=0)  # Zero-based target index in the gallery
