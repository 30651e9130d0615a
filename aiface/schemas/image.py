"""
Pydantic schemas for image upload endpoints.
"""
from datetime import datetime
from pydantic import Field

from aiface.schemas.base import CamelModel


class ImageResponse(CamelModel):
    """Schema for an uploaded image."""
    id: int = Field(..., description="Image ID")
    user_id: int = Field(..., description="Owner user ID")
    filename: str = Field(..., description="Stored file name")
    original_name: str = Field(..., description="File name as uploaded")
    path: str = Field(..., description="Storage path")
    size: int = Field(..., description="Size in bytes")
    mimetype: str = Field(..., description="Media type")
    uploaded_at: datetime = Field(..., description="Upload timestamp")


class MessageResponse(CamelModel):
    message: str
