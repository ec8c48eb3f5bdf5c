from pydantic import EmailStr, Field, field_validator
from typing import Optional

from ._base import CamelModel, PyObjectId


# ✅ Request Schemas
class RegisterRequest(CamelModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=6, max_length=72)

    @field_validator("name", mode="before")
    @classmethod
    def _trim(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def _lower(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def _lower(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


# ✅ Response Schemas
class UserOut(CamelModel):
    id: PyObjectId
    name: str
    email: EmailStr
    avatar_url: Optional[str] = ""
    bio: Optional[str] = ""
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserOut


class MeResponse(CamelModel):
    user: UserOut
