"""User Schemas — account payloads; password fields never appear in responses."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator


class UserUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr


class UserCreate(UserUpdate):
    password: str = Field(min_length=6, max_length=32)
    password_confirm: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirm:
            raise ValueError("password_confirm must match password")
        return self


class PasswordChange(BaseModel):
    password_old: str = Field(min_length=1)
    password_new: str = Field(min_length=6, max_length=32)
    password_confirm: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password_new != self.password_confirm:
            raise ValueError("password_confirm must match password_new")
        return self


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
