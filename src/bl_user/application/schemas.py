"""Pydantic schemas for bl_user.

UserOut is the cached payload: it never carries the password hash.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.bl_user.domain.models import User

BCRYPT_MAX_BYTES = 72


class CreateUserInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        # bcrypt only hashes the first 72 bytes and newer releases reject longer input
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"must be at most {BCRYPT_MAX_BYTES} bytes")
        return v


class UpdateUserInput(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
