import logging

from aiface.db.session import engine
from aiface.db.base import Base
import aiface.db.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


def init_db():
    """Create any missing tables. Existing tables are left untouched."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
