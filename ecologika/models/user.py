from pydantic import BaseModel, Field, computed_field
from typing import List, Literal, Optional
import uuid
from datetime import datetime

from ecologika.models.product import ApprovalStatus

UserType = Literal["buyer", "seller"]

# Authentication models
class UserCreate(BaseModel):
    email: str
    confirm_email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    user_type: UserType = "buyer"
    company: Optional[str] = ""
    company_role: Optional[str] = ""
    company_website: Optional[str] = ""
    nif_cnpj: Optional[str] = ""
    phone: Optional[str] = ""
    address: Optional[str] = ""
    city: Optional[str] = ""
    country: Optional[str] = ""
    interesses_ids: List[str] = []
    onde_ouviu: Optional[str] = ""
    accept_terms: bool = False

class UserLogin(BaseModel):
    email: str
    password: str

class Profile(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str
    name: str = ""
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    company: Optional[str] = ""
    company_role: Optional[str] = ""
    company_website: Optional[str] = ""
    nif_cnpj: Optional[str] = ""
    phone: Optional[str] = ""
    address: Optional[str] = ""
    city: Optional[str] = ""
    country: Optional[str] = ""
    location: Optional[str] = ""
    user_type: UserType = "buyer"
    role: str = "user"  # user, admin
    approval_status: ApprovalStatus = "pending"
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    saved_products: List[str] = []  # Product IDs, no duplicates
    interesses_ids: List[str] = []
    onde_ouviu: Optional[str] = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @computed_field
    @property
    def is_approved(self) -> bool:
        return self.approval_status == "approved"

class SessionInfo(BaseModel):
    profile: Profile
    is_seller: bool
    is_master: bool
    is_approved: bool

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    company_role: Optional[str] = None
    company_website: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    interesses_ids: Optional[List[str]] = None

class Token(BaseModel):
    access_token: str
    token_type: str

class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

class PasswordResetRequest(BaseModel):
    email: str

class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str
