from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.db import UserRole


class SUserRegister(BaseModel):
    username: str = Field(..., min_length=5, max_length=20, description="Username, 5 to 20 characters")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=5, max_length=50, description="Password, 5 to 50 characters")
    first_name: str = Field(..., min_length=2, max_length=50, description="First name, 2 to 50 characters")
    last_name: str = Field(..., min_length=2, max_length=50, description="Last name, 2 to 50 characters")
    role: UserRole = Field(UserRole.student, description="Role: student or teacher")


class SUserAuth(BaseModel):
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=5, max_length=50, description="Password, 5 to 50 characters")


class SUserResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole
    created_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class STeacherBrief(BaseModel):
    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)
