"""
Pydantic schemas for analysis usage endpoints.
"""
from pydantic import BaseModel, Field


class UsageStatus(BaseModel):
    """Today's analysis usage for the authenticated user."""
    count: int = Field(..., ge=0, description="Analyses run today")
    limit: int = Field(..., description="Daily analysis limit")
    remaining: int = Field(..., ge=0, description="Analyses left today")
    
    class Config:
        json_schema_extra = {
            "example": {
                "count": 2,
                "limit": 5,
                "remaining": 3
            }
        }


class QuotaExceededResponse(BaseModel):
    """Error response schema for quota exceeded."""
    message: str = Field(..., description="Human-readable error message")
    limit: int = Field(..., description="Daily analysis limit")
    count: int = Field(..., description="Analyses already run today")
    
    class Config:
        json_schema_extra = {
            "example": {
                "message": "Daily analysis limit reached (5 analyses per day)",
                "limit": 5,
                "count": 5
            }
        }


class ProviderErrorResponse(BaseModel):
    """Error response schema for a failed provider call."""
    message: str = Field("Error analyzing face", description="Human-readable error message")
    error: str = Field(..., description="Underlying provider error")
