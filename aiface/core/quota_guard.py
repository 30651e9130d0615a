"""
Quota enforcement dependency for face analysis.

require_analysis_quota() authenticates the user and reserves today's
analysis slot before the route body runs. QuotaExceeded propagates to the
application handler, which answers 429 with the current count and limit.
"""
import logging
from fastapi import Depends
from sqlalchemy.orm import Session

from aiface.core.auth_dependency import get_current_user, get_db
from aiface.db.models.user import User
from aiface.services.quota_service import QuotaReservation, reserve

logger = logging.getLogger(__name__)


def require_analysis_quota(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> QuotaReservation:
    """
    Dependency that checks the daily analysis limit.

    Returns:
        QuotaReservation to commit once the analysis succeeded

    Raises:
        QuotaExceeded: Daily limit reached
        HTTPException 401: Unauthorized
    """
    reservation = reserve(db, user.id)

    logger.debug(
        f"Quota check passed: user_id={user.id}, day={reservation.day.isoformat()}, "
        f"count={reservation.count}, limit={reservation.limit}"
    )

    return reservation
