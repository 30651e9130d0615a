from sqlalchemy import Column, Integer, ForeignKey, Date, UniqueConstraint
from aiface.db.base import Base


class UsageRecord(Base):
    """
    Daily analysis usage tracking for per-user, per-day limits.

    Tracks number of analyses a user has run on a specific calendar day.
    Created lazily with count 0, only ever incremented.
    """
    __tablename__ = "analysis_usage"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # day bucket, time-of-day dropped
    count = Column(Integer, default=0, nullable=False)

    # Unique constraint: one record per user per day
    __table_args__ = (
        UniqueConstraint('user_id', 'date', name='uq_usage_user_date'),
    )
