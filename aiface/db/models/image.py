"""
Image model for uploaded face photographs.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from aiface.db.base import Base


class Image(Base):
    """
    One uploaded photograph and where its bytes live in storage.

    The owner is fixed at upload time.
    """
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    filename = Column(String, nullable=False)  # stored name, "<epoch-ms>-<original>"
    original_name = Column(String, nullable=False)
    path = Column(String, nullable=False)
    size = Column(Integer, nullable=False)  # bytes
    mimetype = Column(String, nullable=False)

    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        Index('idx_images_user_uploaded', 'user_id', 'uploaded_at'),
    )

    def __repr__(self):
        return f"<Image(id={self.id}, user_id={self.user_id}, original_name='{self.original_name}')>"
