from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

EMAIL_REGX = r"^[^@]+@[^@]+\.[^@]+$"


# Schema for registration / login (JSON body)
class UserCredentials(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGX)
    password: str = Field(..., min_length=1)


# Schema for returning user (without password hash)
class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    email: str
    created_at: datetime = Field(..., serialization_alias="createdAt")


class AuthResponse(BaseModel):
    message: str
    token: Optional[str] = None
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse
