from pydantic import BaseModel, Field
from typing import List, Literal, Optional
import uuid
from datetime import datetime

from ecologika.models.image import ProductImage

Unit = Literal["kg", "ton", "m³", "unidade"]
ApprovalStatus = Literal["pending", "approved", "rejected"]

class Product(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: Optional[str] = ""
    material: Optional[str] = ""
    category: Optional[str] = ""
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=0)
    unit: Optional[str] = "kg"
    country: Optional[str] = ""
    city: Optional[str] = ""
    address: Optional[str] = ""
    location: Optional[str] = ""  # Composite "city, country" string used by the location filter
    seller_id: str
    seller_name: Optional[str] = ""
    seller_company: Optional[str] = ""
    image_url: Optional[str] = None  # Legacy single image, superseded by product_images
    is_active: bool = True
    approval_status: ApprovalStatus = "pending"
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    co2_savings: Optional[float] = None  # kg of CO2 avoided per unit
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class Listing(Product):
    images: List[ProductImage] = []
    display_image: Optional[str] = None
    total_images: int = 0

class GalleryState(BaseModel):
    index: int
    image_url: Optional[str] = None
    counter: str
    has_navigation: bool

class ProductDetail(Listing):
    gallery: GalleryState
    is_saved: bool = False

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = ""
    material: str
    category: Optional[str] = ""
    price: float = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    unit: Unit = "kg"
    country: Optional[str] = ""
    city: Optional[str] = ""
    address: Optional[str] = ""
    location: Optional[str] = None
    co2_savings: Optional[float] = Field(None, ge=0)

class ProductEdit(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    material: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    quantity: Optional[int] = Field(None, gt=0)
    unit: Optional[Unit] = None
    country: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    location: Optional[str] = None
    co2_savings: Optional[float] = Field(None, ge=0)

class ApprovalDecision(BaseModel):
    reason: Optional[str] = None  # Used when rejecting
