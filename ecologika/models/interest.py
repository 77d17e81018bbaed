from pydantic import BaseModel, Field
from typing import List
import uuid
from datetime import datetime

class Interest(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    key: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

class InterestOption(BaseModel):
    id: str
    key: str
    label: str

class InterestGroups(BaseModel):
    residuos: List[InterestOption]
    projetos_certificados: List[InterestOption]
    projetos_apoiados: List[InterestOption]
