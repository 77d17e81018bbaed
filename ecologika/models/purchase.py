from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import uuid
from datetime import datetime

class ShippingDetails(BaseModel):
    name: Optional[str] = ""
    email: Optional[str] = ""
    address: str = ""
    city: str = ""
    postal_code: Optional[str] = ""
    phone: str = ""

class CheckoutQuoteRequest(BaseModel):
    product_id: str
    quantity: int

class CheckoutRequest(BaseModel):
    product_id: str
    quantity: int
    shipping: ShippingDetails

class CheckoutQuote(BaseModel):
    product_id: str
    unit_price: float
    quantity: int
    subtotal: float
    shipping_fee: float
    total: float
    co2_saved: Optional[float] = None

class Purchase(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    product_id: str
    buyer_id: str
    seller_id: str
    quantity: int
    unit_price: float
    shipping_fee: float
    total_price: float
    co2_saved: Optional[float] = None
    status: str = "completed"  # pending, completed
    shipping: ShippingDetails
    purchase_date: datetime = Field(default_factory=datetime.utcnow)

class PurchaseHistoryEntry(BaseModel):
    purchase: Purchase
    product_name: str
    product_category: Optional[str] = ""

class SoldProductEntry(BaseModel):
    id: str
    product_name: str
    quantity: int
    total_price: float
    purchase_date: datetime
    status: str
    co2_saved: float = 0.0
    buyer_name: str
    buyer_email: str
    buyer_company: str
    buyer_location: str

class MonthlyEmissions(BaseModel):
    month: str  # YYYY-MM
    co2_saved: float
    purchases: int

class EmissionsReport(BaseModel):
    total_co2_saved: float
    total_purchases: int
    trees_equivalent: int
    monthly_average: float
    monthly: List[MonthlyEmissions]
    by_category: Dict[str, float]
