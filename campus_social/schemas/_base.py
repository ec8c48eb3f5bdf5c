# campus_social/schemas/_base.py
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated
from pydantic.functional_validators import BeforeValidator

# For MongoDB ObjectId support
PyObjectId = Annotated[str, BeforeValidator(lambda x: str(x))]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (both accepted on input)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthorPreview(CamelModel):
    id: PyObjectId
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class MessageResponse(CamelModel):
    message: str
