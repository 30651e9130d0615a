"""
Shared base for response schemas.

The web client reads camelCase keys; models declare snake_case fields and
serialize through aliases.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
