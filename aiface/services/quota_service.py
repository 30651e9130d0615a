"""
Quota service for the daily analysis ledger.

Handles day bucketing, quota status, reservation and atomic consumption.
A reservation only checks the ceiling; the slot is consumed by commit()
once the analysis has actually been produced.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from aiface.core import config
from aiface.core.exceptions import QuotaExceeded
from aiface.db.models.usage import UsageRecord
from aiface.db.upsert import insert_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaReservation:
    """Handle for a not-yet-consumed analysis slot."""
    user_id: int
    day: date
    count: int
    limit: int


def get_daily_limit() -> int:
    return config.DAILY_ANALYSIS_LIMIT


def get_day_key(now: Optional[datetime] = None) -> date:
    """
    Truncate an instant to its calendar day in the quota reference time zone.

    Args:
        now: Instant to bucket (default: current time)

    Returns:
        The day used as the ledger key
    """
    tz = ZoneInfo(config.QUOTA_TIMEZONE) if config.QUOTA_TIMEZONE else None
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is not None:
        # Aware instants are bucketed in the reference zone, naive ones taken as is
        now = now.astimezone(tz)
    return now.date()


def _status(count: int, limit: int) -> Dict[str, int]:
    return {
        "count": count,
        "limit": limit,
        "remaining": max(limit - count, 0),
    }


def _get_count(db: Session, user_id: int, day: date) -> Optional[int]:
    record = db.query(UsageRecord).filter(
        UsageRecord.user_id == user_id,
        UsageRecord.date == day
    ).first()
    return record.count if record else None


def get_status(db: Session, user_id: int, now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Get today's usage for a user. Never creates a ledger row.

    Returns:
        Dictionary with count, limit and remaining
    """
    count = _get_count(db, user_id, get_day_key(now)) or 0
    return _status(count, get_daily_limit())


def reserve(db: Session, user_id: int, now: Optional[datetime] = None) -> QuotaReservation:
    """
    Make sure today's ledger row exists and check it against the daily limit.

    Args:
        db: Database session
        user_id: User ID
        now: Instant used for day bucketing (default: current time)

    Returns:
        QuotaReservation for the slot about to be consumed

    Raises:
        QuotaExceeded: If count >= limit; nothing is mutated
    """
    day = get_day_key(now)
    limit = get_daily_limit()

    stmt = insert_for(db, UsageRecord).values(user_id=user_id, date=day, count=0)
    db.execute(stmt.on_conflict_do_nothing(index_elements=["user_id", "date"]))
    db.commit()

    count = _get_count(db, user_id, day) or 0
    if count >= limit:
        logger.warning(
            f"Quota exceeded: user_id={user_id}, day={day.isoformat()}, "
            f"count={count}, limit={limit}"
        )
        raise QuotaExceeded(count=count, limit=limit)

    return QuotaReservation(user_id=user_id, day=day, count=count, limit=limit)


def commit(db: Session, reservation: QuotaReservation) -> Dict[str, int]:
    """
    Consume a reserved slot with a single find-or-create-then-increment.

    The increment happens in SQL so concurrent commits never lose updates.

    Returns:
        Updated status for the reservation's day
    """
    stmt = insert_for(db, UsageRecord).values(
        user_id=reservation.user_id,
        date=reservation.day,
        count=1
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "date"],
        set_={"count": UsageRecord.count + 1}
    )
    db.execute(stmt)
    db.commit()

    count = _get_count(db, reservation.user_id, reservation.day) or 0

    logger.info(
        f"Usage consumed: user_id={reservation.user_id}, day={reservation.day.isoformat()}, "
        f"used={count}/{reservation.limit}"
    )

    return _status(count, reservation.limit)
