"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from aiface.db.models.user import User
from aiface.db.models.image import Image
from aiface.db.models.analysis import Analysis
from aiface.db.models.usage import UsageRecord

__all__ = [
    "User",
    "Image",
    "Analysis",
    "UsageRecord",
]
