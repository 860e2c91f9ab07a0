"""Authentication Schemas — login request and session token response."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    email: str
    name: str
    user_id: str
    token: str
