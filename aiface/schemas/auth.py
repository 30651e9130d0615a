"""
Pydantic schemas for auth endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import Field

from aiface.schemas.base import CamelModel


class UserResponse(CamelModel):
    """Signed-in user profile."""
    id: int
    email: str
    name: Optional[str] = None
    profile_picture: Optional[str] = Field(None, description="Google avatar URL")
    created_at: Optional[datetime] = None
