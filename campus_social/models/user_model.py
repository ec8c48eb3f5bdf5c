from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from bson import ObjectId
from typing_extensions import Annotated
from pydantic.functional_validators import BeforeValidator

# Converts ObjectId to string before validation
PyObjectId = Annotated[str, BeforeValidator(lambda x: str(x))]


class UserModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    email: EmailStr
    name: str
    password: Optional[str] = None   # bcrypt hash, never returned
    avatar_url: str = ""
    cover_url: str = ""
    bio: str = ""
    role: str = "student"            # student | faculty | staff | admin
    department: Optional[str] = None
    year: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    is_verified: bool = False

    # Denormalized, maintained 1:1 with follows/posts writes
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {
        "populate_by_name": True,
        "arbitrary_types_allowed": True,
        "json_encoders": {ObjectId: str},
        "extra": "ignore",
    }
