"""
Face analysis orchestration.

Runs one analyze request end to end: image lookup, the two provider
calls, cache write and quota commit. Quota is consumed only when the
primary analysis succeeded, and a failed call leaves the cache as it was.
"""
import base64
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from aiface.core.exceptions import ProviderFailure
from aiface.db.models.analysis import Analysis
from aiface.db.models.image import Image
from aiface.llm.provider import LLMProvider
from aiface.services import analysis_cache, quota_service, storage_service
from aiface.services.quota_service import QuotaReservation

logger = logging.getLogger(__name__)


def get_user_image(db: Session, image_id: int, user_id: int) -> Image:
    """Fetch an image owned by the user, or raise 404."""
    image = db.query(Image).filter(Image.id == image_id, Image.user_id == user_id).first()
    if not image:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found"
        )
    return image


def run_provider_calls(
    provider: LLMProvider,
    image_b64: str,
    mimetype: str
) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Run the analysis and celebrity calls side by side.

    Returns:
        Tuple of (raw analysis content, normalized celebrity matches)

    Raises:
        ProviderFailure: If the primary analysis call fails. A failed
            celebrity call only produces an empty match list.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        primary = pool.submit(provider.analyze_face, image_b64, mimetype)
        celebrity = pool.submit(provider.match_celebrities, image_b64, mimetype)

        try:
            celebrity_matches = analysis_cache.normalize_celebrity_matches(celebrity.result().content)
        except Exception as e:
            logger.warning(f"Celebrity matching failed, storing no matches: {type(e).__name__}: {e}")
            celebrity_matches = []

        try:
            raw_output = primary.result().content
        except Exception as e:
            raise ProviderFailure(f"{type(e).__name__}: {e}") from e

    return raw_output, celebrity_matches


def analyze_image(
    db: Session,
    user_id: int,
    image_id: int,
    reservation: QuotaReservation,
    provider: LLMProvider
) -> Tuple[Analysis, Dict[str, int]]:
    """
    Compute, store and account for a fresh analysis of one image.

    Args:
        db: Database session
        user_id: Owner of the image
        image_id: Image to analyze
        reservation: Quota slot obtained from quota_service.reserve
        provider: Vision provider

    Returns:
        Tuple of (stored Analysis, updated usage status)

    Raises:
        HTTPException 404: Image (or its stored file) not found
        ProviderFailure: Analysis call failed; quota and cache untouched
    """
    image = get_user_image(db, image_id, user_id)

    try:
        image_bytes = storage_service.read_bytes(image.path)
    except FileNotFoundError:
        logger.error(f"Stored file missing for image_id={image.id}, path={image.path}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image file not found"
        )

    image_b64 = base64.b64encode(image_bytes).decode("ascii")

    logger.info(f"Analysis started: user_id={user_id}, image_id={image.id}")
    raw_output, celebrity_matches = run_provider_calls(provider, image_b64, image.mimetype)

    analysis = analysis_cache.store(db, image.id, user_id, raw_output, celebrity_matches)
    usage = quota_service.commit(db, reservation)

    logger.info(
        f"Analysis completed: user_id={user_id}, image_id={image.id}, "
        f"celebrity_matches={len(celebrity_matches)}, remaining={usage['remaining']}"
    )

    return analysis, usage
