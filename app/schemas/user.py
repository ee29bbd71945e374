from pydantic import BaseModel
from typing import Optional

from app.models.user import UserRole

class UserCreate(BaseModel):
    name: str
    email: str
    password: str  # Will be hashed in the service
    role: UserRole

class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
