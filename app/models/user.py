from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"
    RECEPTIONIST = "RECEPTIONIST"

class User(BaseModel):
    """Public projection of a stored user. Never carries the password hash."""
    id: str = Field(..., description="Unique user ID")
    name: str = Field(..., description="User full name")
    email: str = Field(..., description="Login email, unique")
    role: UserRole = Field(..., description="User role")
    created_at: datetime = Field(..., serialization_alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., serialization_alias="updatedAt", description="Last update timestamp")

    def to_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
