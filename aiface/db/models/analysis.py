"""
Analysis model for storing the normalized face analysis of an image.
"""
from sqlalchemy import Column, Integer, Float, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.sql import func
from aiface.db.base import Base


class Analysis(Base):
    """
    Canonical analysis result for one (image, user) pair.

    Re-analysis replaces the row in full. image_id carries no foreign key:
    deleting an image leaves its analysis in place.
    """
    __tablename__ = "analyses"

    id = Column(Integer, primary_key=True, index=True)
    image_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Narrative text from the provider, verbatim
    message = Column(Text, nullable=False)

    positive_traits = Column(JSON, nullable=False, default=list)
    negative_traits = Column(JSON, nullable=False, default=list)

    # Structured sub-sections, always populated (empty structures when absent)
    personality_analysis = Column(JSON, nullable=False, default=dict)  # facial_features, mian_xiang, physiognomy
    age_health_analysis = Column(JSON, nullable=False, default=dict)  # ages, health_indicators, stress/fatigue/hydration
    beauty_analysis = Column(JSON, nullable=False, default=dict)  # symmetry, golden ratio, balance, celebrity_matches

    confidence = Column(Float, nullable=False, default=0.95)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint('image_id', 'user_id', name='uq_analysis_image_user'),
    )

    def __repr__(self):
        return f"<Analysis(id={self.id}, image_id={self.image_id}, user_id={self.user_id})>"
